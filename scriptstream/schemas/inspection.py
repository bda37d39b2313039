"""Schemas for text inspection reports."""

from __future__ import annotations

from pydantic import BaseModel, Field

from scriptstream.schemas.decoding import ScalarRole


class ScalarInfo(BaseModel):
    """Description of one scalar value in a piece of text."""

    codepoint: int = Field(ge=0, description="Scalar value")
    char: str = Field(description="The scalar as a one-character string")
    name: str = Field(default="", description="Unicode character name, empty if unnamed")
    script: str = Field(default="", description="Registered script key, empty if none")
    role: ScalarRole = Field(default=ScalarRole.NEUTRAL, description="Combining-table role")
    combining_class: int = Field(default=0, ge=0, description="Canonical combining class")

    @property
    def label(self) -> str:
        """U+XXXX notation for display."""
        return f"U+{self.codepoint:04X}"


class NormalizationReport(BaseModel):
    """NFC/NFD comparison for a piece of text."""

    text: str = Field(description="Input text")
    nfc: str = Field(description="NFC form")
    nfd: str = Field(description="NFD form")
    is_nfc: bool = Field(description="Whether the input is already NFC")

    @property
    def nfc_length(self) -> int:
        return len(self.nfc)

    @property
    def nfd_length(self) -> int:
        return len(self.nfd)
