"""scriptstream — incremental, script-aware text decoding for token streams."""

__version__ = "0.1.0"

from scriptstream.decoder import ScriptTable, StreamDecoder
from scriptstream.registry import build_decoder, load_decoder_config, load_script_table
from scriptstream.schemas import DecodedSegment, DecodeStatus, StreamChunk
from scriptstream.session import GenerationSession, decode_all, decode_stream

__all__ = [
    # Decoder
    "StreamDecoder", "ScriptTable", "DecodedSegment", "DecodeStatus",
    # Registry
    "build_decoder", "load_decoder_config", "load_script_table",
    # Session
    "GenerationSession", "StreamChunk", "decode_all", "decode_stream",
]
