"""Incremental decoder components.

ByteAccumulator → ScalarDecoder → CombiningLookahead → ReplacementGuard →
NormalizingEmitter, orchestrated by StreamDecoder.
"""

from scriptstream.decoder.accumulator import ByteAccumulator
from scriptstream.decoder.emitter import NormalizingEmitter
from scriptstream.decoder.guard import ReplacementGuard
from scriptstream.decoder.lookahead import CombiningLookahead
from scriptstream.decoder.scalars import DecodedScalar, ScalarDecoder
from scriptstream.decoder.stream import StreamDecoder
from scriptstream.decoder.table import ScriptTable

__all__ = [
    "ByteAccumulator",
    "CombiningLookahead",
    "DecodedScalar",
    "NormalizingEmitter",
    "ReplacementGuard",
    "ScalarDecoder",
    "ScriptTable",
    "StreamDecoder",
]
