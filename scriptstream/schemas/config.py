"""Decoder configuration schema loaded from defaults.toml."""

from __future__ import annotations

from pydantic import BaseModel, Field

from scriptstream.schemas.decoding import NormalizationForm


class DecoderConfig(BaseModel):
    """Settings shared by every StreamDecoder built from the registry."""

    normalization: NormalizationForm = Field(
        default=NormalizationForm.NFC,
        description="Normalization form applied to every emitted segment",
    )
    scripts: list[str] = Field(
        default_factory=lambda: ["thai", "lao"],
        description="Registered script keys whose combining marks get lookahead",
    )
    log_corruption: bool = Field(
        default=True, description="Log a warning for every terminal corruption event"
    )
