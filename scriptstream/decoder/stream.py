"""StreamDecoder: incremental, script-aware text decoding.

Orchestrates the accumulator, scalar decoder, combining lookahead,
replacement guard and normalizing emitter behind two calls:

    feed(bytes) -> DecodedSegment
    flush()     -> DecodedSegment

All cross-increment state is a plain value held on the instance: the
trailing-byte buffer and at most one withheld base scalar. One instance
belongs to one generation session and must not be shared.
"""

from __future__ import annotations

import logging

from scriptstream.decoder.accumulator import ByteAccumulator
from scriptstream.decoder.emitter import NormalizingEmitter
from scriptstream.decoder.guard import ReplacementGuard
from scriptstream.decoder.lookahead import CombiningLookahead
from scriptstream.decoder.scalars import DecodedScalar, ScalarDecoder
from scriptstream.decoder.table import ScriptTable
from scriptstream.schemas.decoding import (
    DecodedSegment,
    DecoderState,
    DecodeStats,
    DecodeStatus,
    NormalizationForm,
)

logger = logging.getLogger(__name__)


class StreamDecoder:
    """Turns raw byte increments into display-safe text segments.

    feed() never raises and never blocks; it always returns a segment,
    possibly empty. flush() must be called exactly once when generation
    ends, including on cancellation and error paths, so a withheld base
    character is not lost. Further flush() calls return an empty segment.

    Lookahead only applies to scripts enabled in the table. The packaged
    defaults enable Thai and Lao; enable ``latin`` (in defaults.toml or via
    load_script_table) for a Latin base and a combining accent arriving in
    separate increments to be composed under NFC.
    """

    def __init__(
        self,
        table: ScriptTable | None = None,
        *,
        form: NormalizationForm = NormalizationForm.NFC,
        log_corruption: bool = True,
    ) -> None:
        if table is None:
            from scriptstream.registry import default_script_table

            table = default_script_table()

        self._table = table
        self._accumulator = ByteAccumulator()
        self._scalars = ScalarDecoder()
        self._lookahead = CombiningLookahead(table)
        self._guard = ReplacementGuard(log_corruption=log_corruption)
        self._emitter = NormalizingEmitter(form)
        self._stats = DecodeStats()

    # ── State ─────────────────────────────────────────────────

    @property
    def table(self) -> ScriptTable:
        return self._table

    @property
    def form(self) -> NormalizationForm:
        return self._emitter.form

    @property
    def state(self) -> DecoderState:
        """Which kinds of input are currently held back."""
        buffering = self._accumulator.pending > 0
        holding = self._lookahead.holding
        if buffering and holding:
            return DecoderState.BUFFERING_HOLDING
        if buffering:
            return DecoderState.BUFFERING
        if holding:
            return DecoderState.HOLDING
        return DecoderState.EMPTY

    @property
    def stats(self) -> DecodeStats:
        """Running counters (a copy)."""
        return self._stats.model_copy()

    @property
    def guard(self) -> ReplacementGuard:
        return self._guard

    # ── Core interface ────────────────────────────────────────

    def feed(self, data: bytes) -> DecodedSegment:
        """Decode one raw increment.

        Args:
            data: Bytes produced by the generation runtime for one step.
                Zero-length increments are valid no-ops.

        Returns:
            The text that can be appended to the transcript now, with the
            corruption flag and guard status for this increment.
        """
        self._stats.increments += 1
        self._stats.bytes_in += len(data)

        if data:
            self._accumulator.append(data)
        scalars = self._scalars.decode(self._accumulator.take_valid_prefix())
        released = self._lookahead.resolve(scalars)
        status = self._guard.inspect(scalars, deferred=self._accumulator.pending > 0)
        return self._emit(released, status, self._guard.last_inserted)

    def flush(self) -> DecodedSegment:
        """Release everything still held and return to the empty state.

        Bytes left in the accumulator can no longer be completed, so they
        are decoded as terminal corruption. The withheld base, if any, is
        released ahead of them since it came first in the stream.
        """
        if self.state is DecoderState.EMPTY:
            return DecodedSegment()

        logger.debug(
            "Flushing decoder in state %s (%d pending bytes)",
            self.state,
            self._accumulator.pending,
        )
        scalars = self._scalars.decode(self._accumulator.drain())
        released = self._lookahead.release() + scalars
        status = self._guard.inspect(scalars)
        return self._emit(released, status, self._guard.last_inserted)

    # ── Helpers ───────────────────────────────────────────────

    def _emit(
        self, released: list[DecodedScalar], status: DecodeStatus, replacements: int
    ) -> DecodedSegment:
        text = self._emitter.normalize(released)
        corrupted = status is DecodeStatus.TERMINAL_CORRUPTION

        if text:
            self._stats.segments += 1
            self._stats.chars_out += len(text)
        if corrupted:
            self._stats.corrupted_segments += 1
            self._stats.replacements += replacements

        return DecodedSegment(
            text=text,
            corrupted=corrupted,
            status=status,
            replacements=replacements,
        )
