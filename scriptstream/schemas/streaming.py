"""Streaming schemas for delivering decoded text to the display layer.

StreamChunk is what a GenerationSession hands to its on_chunk callback;
SessionSummary is the end-of-generation report.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class StreamChunk(BaseModel):
    """A single chunk of decoded text released during generation."""

    delta: str = Field(description="New text in this chunk")
    accumulated: str = Field(description="Full transcript accumulated so far")
    increment_count: int = Field(ge=0, description="Raw increments consumed so far")
    corrupted: bool = Field(
        default=False, description="True if this chunk carries decoder-inserted U+FFFD"
    )
    is_complete: bool = Field(default=False, description="True on final chunk")


class SessionSummary(BaseModel):
    """Aggregate report for one finished generation session."""

    text: str = Field(description="Final transcript")
    increments: int = Field(ge=0, description="Raw increments consumed")
    bytes_in: int = Field(ge=0, description="Total bytes received")
    corrupted_segments: int = Field(ge=0, description="Segments flagged as corrupted")
    replacements: int = Field(ge=0, description="Decoder-inserted replacement characters")
    duration_seconds: float = Field(ge=0.0, description="Wall time from first push to finish")
    increments_per_second: float = Field(
        ge=0.0, description="Generation rate, as shown in the toolbar"
    )
