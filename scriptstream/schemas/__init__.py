"""scriptstream schema definitions.

All Pydantic v2 models and enums shared by the decoder, registry and session.
"""

from scriptstream.schemas.config import DecoderConfig
from scriptstream.schemas.decoding import (
    DecodedSegment,
    DecoderState,
    DecodeStats,
    DecodeStatus,
    NormalizationForm,
    ScalarRole,
)
from scriptstream.schemas.inspection import NormalizationReport, ScalarInfo
from scriptstream.schemas.scripts import ScriptDefinition, ScriptRange
from scriptstream.schemas.streaming import SessionSummary, StreamChunk

__all__ = [
    "DecodeStats",
    "DecodeStatus",
    "DecodedSegment",
    "DecoderConfig",
    "DecoderState",
    "NormalizationForm",
    "NormalizationReport",
    "ScalarInfo",
    "ScalarRole",
    "ScriptDefinition",
    "ScriptRange",
    "SessionSummary",
    "StreamChunk",
]
