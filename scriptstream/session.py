"""Generation session: the host-side adapter around StreamDecoder.

A session is created when a new assistant response begins. It feeds each
raw increment from the generation runtime through its own StreamDecoder,
appends released text to the transcript, and reports StreamChunk deltas to
the display layer. The decoder is flushed exactly once when the session
ends, whether generation completed, was cancelled or failed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable
from typing import Any

from scriptstream.decoder.stream import StreamDecoder
from scriptstream.schemas.decoding import DecodedSegment
from scriptstream.schemas.streaming import SessionSummary, StreamChunk

logger = logging.getLogger(__name__)

# Callback invoked with each StreamChunk; may be sync or async
ChunkListener = Callable[[StreamChunk], Any]


class GenerationSession:
    """Owns one StreamDecoder for the duration of one generation.

    push() and finish() are synchronous and return the chunk they produced.
    run() and consume() drive a whole stream, deliver chunks to on_chunk,
    and always finish the session in a ``finally`` block.
    """

    def __init__(
        self,
        decoder: StreamDecoder | None = None,
        *,
        on_chunk: ChunkListener | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if decoder is None:
            from scriptstream.registry import build_decoder

            decoder = build_decoder()

        self._decoder = decoder
        self._on_chunk = on_chunk
        self._clock = clock
        self._parts: list[str] = []
        self._increments = 0
        self._started_at: float | None = None
        self._finished_at: float | None = None

    @property
    def decoder(self) -> StreamDecoder:
        return self._decoder

    @property
    def transcript(self) -> str:
        """Text released so far."""
        return "".join(self._parts)

    @property
    def finished(self) -> bool:
        return self._finished_at is not None

    # ── Incremental interface ─────────────────────────────────

    def push(self, increment: bytes) -> StreamChunk | None:
        """Decode one increment and append its text to the transcript.

        Returns:
            A StreamChunk when text was released, otherwise None.

        Raises:
            RuntimeError: If the session has already finished.
        """
        if self.finished:
            raise RuntimeError("Cannot push to a finished generation session")
        if self._started_at is None:
            self._started_at = self._clock()

        self._increments += 1
        segment = self._decoder.feed(increment)
        if not segment.text:
            return None
        return self._append(segment, is_complete=False)

    def finish(self) -> StreamChunk:
        """Flush the decoder and mark the session complete.

        Safe to call more than once; later calls return an empty final chunk.
        """
        if self.finished:
            return self._chunk("", corrupted=False, is_complete=True)

        segment = self._decoder.flush()
        now = self._clock()
        if self._started_at is None:
            self._started_at = now
        self._finished_at = now

        chunk = self._append(segment, is_complete=True)
        logger.info(
            "Generation finished: %d increments, %d chars",
            self._increments,
            len(chunk.accumulated),
        )
        return chunk

    def summary(self) -> SessionSummary:
        """Aggregate statistics; duration runs to now if still streaming."""
        stats = self._decoder.stats
        start = self._started_at if self._started_at is not None else self._clock()
        end = self._finished_at if self._finished_at is not None else self._clock()
        duration = max(0.0, end - start)
        rate = self._increments / duration if duration > 0 else 0.0
        return SessionSummary(
            text=self.transcript,
            increments=self._increments,
            bytes_in=stats.bytes_in,
            corrupted_segments=stats.corrupted_segments,
            replacements=stats.replacements,
            duration_seconds=duration,
            increments_per_second=rate,
        )

    # ── Whole-stream drivers ──────────────────────────────────

    def run(self, increments: Iterable[bytes]) -> SessionSummary:
        """Feed a synchronous stream of increments, then finish.

        The final chunk reaches on_chunk even when the stream raises, so a
        withheld base character is never lost from the display. Async
        listeners are not supported here; use consume() instead.
        """
        completed = False
        try:
            for increment in increments:
                chunk = self.push(increment)
                if chunk is not None:
                    self._notify(chunk)
            completed = True
        finally:
            final = self.finish()
            if not completed:
                logger.info("Generation ended early; decoder flushed")
            self._notify(final)
        return self.summary()

    async def consume(self, increments: AsyncIterable[bytes]) -> SessionSummary:
        """Feed an async stream of increments, then finish.

        The decoder is flushed and the final chunk delivered even if the
        stream raises or the task is cancelled, so a withheld base
        character always reaches the transcript and the listener.
        """
        completed = False
        try:
            async for increment in increments:
                chunk = self.push(increment)
                if chunk is not None:
                    await self._anotify(chunk)
            completed = True
        finally:
            final = self.finish()
            if not completed:
                logger.info("Generation ended early; decoder flushed")
            await self._anotify(final)
        return self.summary()

    # ── Helpers ───────────────────────────────────────────────

    def _append(self, segment: DecodedSegment, *, is_complete: bool) -> StreamChunk:
        if segment.text:
            self._parts.append(segment.text)
        return self._chunk(segment.text, corrupted=segment.corrupted, is_complete=is_complete)

    def _chunk(self, delta: str, *, corrupted: bool, is_complete: bool) -> StreamChunk:
        return StreamChunk(
            delta=delta,
            accumulated=self.transcript,
            increment_count=self._increments,
            corrupted=corrupted,
            is_complete=is_complete,
        )

    def _notify(self, chunk: StreamChunk) -> None:
        if self._on_chunk is None:
            return
        result = self._on_chunk(chunk)
        if asyncio.iscoroutine(result):
            result.close()
            raise TypeError("Async on_chunk listeners require consume()")

    async def _anotify(self, chunk: StreamChunk) -> None:
        if self._on_chunk is None:
            return
        result = self._on_chunk(chunk)
        if asyncio.iscoroutine(result):
            await result


def decode_all(increments: Iterable[bytes], decoder: StreamDecoder | None = None) -> str:
    """Decode a complete sequence of increments and return the text."""
    session = GenerationSession(decoder)
    session.run(increments)
    return session.transcript


async def decode_stream(
    increments: AsyncIterable[bytes],
    decoder: StreamDecoder | None = None,
) -> AsyncIterator[str]:
    """Async generator yielding display-safe text as increments arrive.

    If the source raises, the flushed tail is yielded before the error
    propagates.

    Example:
        >>> async for text in decode_stream(runtime.byte_increments()):
        ...     message.append(text)
    """
    if decoder is None:
        from scriptstream.registry import build_decoder

        decoder = build_decoder()

    completed = False
    try:
        async for increment in increments:
            segment = decoder.feed(increment)
            if segment.text:
                yield segment.text
        completed = True
    except Exception:
        # The source failed; the held tail is still valid output
        tail = decoder.flush()
        if tail.text:
            yield tail.text
        raise
    finally:
        if not completed:
            decoder.flush()

    tail = decoder.flush()
    if tail.text:
        yield tail.text
