"""Decoder result and state schemas.

Defines the roles a scalar can play in the combining table, the status tags
the ReplacementGuard assigns to each decode event, and the DecodedSegment
returned by every feed()/flush() call.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class ScalarRole(StrEnum):
    """Role of a scalar in the combining table."""

    BASE_CANDIDATE = "base_candidate"
    COMBINING_MARK = "combining_mark"
    NEUTRAL = "neutral"


class DecodeStatus(StrEnum):
    """Outcome of a single decode event.

    CLEAN means no replacement character was produced. BOUNDARY_DEFERRED
    means the increment was clean but ended inside a multi-byte sequence
    whose remaining bytes are still expected. TERMINAL_CORRUPTION means the
    decoder inserted at least one U+FFFD for bytes no later context can repair.
    """

    CLEAN = "clean"
    BOUNDARY_DEFERRED = "boundary_deferred"
    TERMINAL_CORRUPTION = "terminal_corruption"


class DecoderState(StrEnum):
    """What the StreamDecoder is currently holding back."""

    EMPTY = "empty"
    BUFFERING = "buffering"
    HOLDING = "holding"
    BUFFERING_HOLDING = "buffering_holding"


class NormalizationForm(StrEnum):
    """Canonical normalization form applied to every emitted segment."""

    NFC = "NFC"
    NFD = "NFD"


class DecodedSegment(BaseModel):
    """Text released to the caller by one feed() or flush() call."""

    text: str = Field(default="", description="Normalized text to append to the transcript")
    corrupted: bool = Field(
        default=False,
        description="True when the decoder inserted a replacement character for invalid bytes",
    )
    status: DecodeStatus = Field(
        default=DecodeStatus.CLEAN, description="ReplacementGuard classification"
    )
    replacements: int = Field(
        default=0, ge=0, description="Number of U+FFFD inserted by the decoder in this segment"
    )


class DecodeStats(BaseModel):
    """Running counters for one StreamDecoder instance."""

    increments: int = Field(default=0, ge=0, description="Number of feed() calls")
    bytes_in: int = Field(default=0, ge=0, description="Total bytes received")
    chars_out: int = Field(default=0, ge=0, description="Total characters released")
    segments: int = Field(default=0, ge=0, description="Non-empty segments released")
    corrupted_segments: int = Field(
        default=0, ge=0, description="Segments flagged as terminal corruption"
    )
    replacements: int = Field(
        default=0, ge=0, description="Total U+FFFD inserted by the decoder"
    )
