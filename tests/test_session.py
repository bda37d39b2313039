"""Tests for scriptstream.session — GenerationSession and stream helpers."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest

from scriptstream.decoder.stream import StreamDecoder
from scriptstream.schemas.streaming import StreamChunk
from scriptstream.session import GenerationSession, decode_all, decode_stream

SAWASDEE = [
    b"\xe0\xb8\xaa",
    b"\xe0\xb8\xa7",
    b"\xe0\xb8\xb1",
    b"\xe0\xb8\xaa\xe0\xb8\x94\xe0\xb8\xb5",
]


async def _aiter(items: list[bytes]) -> AsyncIterator[bytes]:
    for item in items:
        await asyncio.sleep(0)
        yield item


class TestPushAndFinish:
    def test_held_base_returns_none(self):
        session = GenerationSession(StreamDecoder())
        assert session.push("ก".encode()) is None
        assert session.transcript == ""

    def test_chunk_fields(self):
        session = GenerationSession(StreamDecoder())
        session.push("ก".encode())
        chunk = session.push("่".encode())
        assert chunk == StreamChunk(
            delta="ก่", accumulated="ก่", increment_count=2,
        )

    def test_finish_releases_held_base(self):
        session = GenerationSession(StreamDecoder())
        session.push("ไก".encode())
        final = session.finish()
        assert final.delta == "ก"
        assert final.is_complete is True
        assert session.transcript == "ไก"
        assert session.finished is True

    def test_finish_is_idempotent(self):
        session = GenerationSession(StreamDecoder())
        session.push(b"ok")
        session.finish()
        again = session.finish()
        assert again.delta == ""
        assert again.is_complete is True
        assert again.accumulated == "ok"

    def test_push_after_finish_raises(self):
        session = GenerationSession(StreamDecoder())
        session.finish()
        with pytest.raises(RuntimeError, match="finished"):
            session.push(b"a")

    def test_corrupted_chunk(self):
        session = GenerationSession(StreamDecoder())
        chunk = session.push(b"\x80")
        assert chunk is not None
        assert chunk.corrupted is True

    def test_default_decoder(self):
        session = GenerationSession()
        assert isinstance(session.decoder, StreamDecoder)


class TestRun:
    def test_run_delivers_chunks(self):
        received: list[StreamChunk] = []
        session = GenerationSession(StreamDecoder(), on_chunk=received.append)
        summary = session.run(SAWASDEE)
        assert [c.delta for c in received] == ["ส", "วั", "สดี", ""]
        assert received[-1].is_complete is True
        assert summary.text == "สวัสดี"
        assert summary.increments == 4

    def test_run_flushes_on_error(self):
        def increments():
            yield "ก".encode()
            raise ValueError("runtime failed")

        session = GenerationSession(StreamDecoder())
        with pytest.raises(ValueError, match="runtime failed"):
            session.run(increments())
        assert session.finished is True
        assert session.transcript == "ก"

    def test_listener_receives_held_base_on_error(self):
        def increments():
            yield "ไก".encode()
            raise ValueError("runtime failed")

        received: list[StreamChunk] = []
        session = GenerationSession(StreamDecoder(), on_chunk=received.append)
        with pytest.raises(ValueError):
            session.run(increments())
        assert "".join(c.delta for c in received) == "ไก"
        assert received[-1].is_complete is True

    def test_async_listener_rejected(self):
        async def listener(chunk: StreamChunk) -> None:
            pass

        session = GenerationSession(StreamDecoder(), on_chunk=listener)
        with pytest.raises(TypeError, match="consume"):
            session.run([b"a"])
        assert session.finished is True


class TestConsume:
    @pytest.mark.asyncio()
    async def test_async_listener(self):
        received: list[str] = []

        async def listener(chunk: StreamChunk) -> None:
            received.append(chunk.delta)

        session = GenerationSession(StreamDecoder(), on_chunk=listener)
        summary = await session.consume(_aiter(SAWASDEE))
        assert received == ["ส", "วั", "สดี", ""]
        assert summary.text == "สวัสดี"

    @pytest.mark.asyncio()
    async def test_sync_listener(self):
        received: list[StreamChunk] = []
        session = GenerationSession(StreamDecoder(), on_chunk=received.append)
        await session.consume(_aiter([b"hi"]))
        assert "".join(c.delta for c in received) == "hi"

    @pytest.mark.asyncio()
    async def test_stream_error_still_flushes(self):
        async def increments() -> AsyncIterator[bytes]:
            yield "ก".encode()
            raise ConnectionError("dropped")

        session = GenerationSession(StreamDecoder())
        with pytest.raises(ConnectionError):
            await session.consume(increments())
        assert session.transcript == "ก"

    @pytest.mark.asyncio()
    async def test_listener_receives_held_base_on_stream_error(self):
        async def increments() -> AsyncIterator[bytes]:
            yield "ไก".encode()
            raise ConnectionError("dropped")

        received: list[str] = []

        async def listener(chunk: StreamChunk) -> None:
            received.append(chunk.delta)

        session = GenerationSession(StreamDecoder(), on_chunk=listener)
        with pytest.raises(ConnectionError):
            await session.consume(increments())
        assert "".join(received) == "ไก"

    @pytest.mark.asyncio()
    async def test_cancellation_flushes(self):
        reached = asyncio.Event()

        async def increments() -> AsyncIterator[bytes]:
            yield "ก".encode()
            reached.set()
            await asyncio.sleep(3600)
            yield b"never"

        received: list[StreamChunk] = []
        session = GenerationSession(StreamDecoder(), on_chunk=received.append)
        task = asyncio.create_task(session.consume(increments()))
        await reached.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.finished is True
        assert session.transcript == "ก"
        assert received[-1].delta == "ก"
        assert received[-1].is_complete is True


class TestSummary:
    def test_rate_from_clock(self):
        times = iter([10.0, 12.0])
        session = GenerationSession(StreamDecoder(), clock=lambda: next(times))
        summary = session.run(SAWASDEE)
        assert summary.duration_seconds == 2.0
        assert summary.increments_per_second == 2.0
        assert summary.bytes_in == 18

    def test_corruption_counts(self):
        session = GenerationSession(StreamDecoder())
        summary = session.run([b"a\x80", b"\xff"])
        assert summary.replacements == 2
        assert summary.corrupted_segments == 2


class TestHelpers:
    def test_decode_all(self):
        assert decode_all(SAWASDEE) == "สวัสดี"

    def test_decode_all_split_bytes(self):
        data = "ไก่ ผี".encode()
        assert decode_all([data[i : i + 1] for i in range(len(data))]) == "ไก่ ผี"

    @pytest.mark.asyncio()
    async def test_decode_stream(self):
        parts = [text async for text in decode_stream(_aiter(SAWASDEE))]
        assert parts == ["ส", "วั", "สดี"]

    @pytest.mark.asyncio()
    async def test_decode_stream_flushes_tail(self):
        parts = [text async for text in decode_stream(_aiter([b"\xe0\xb8"]), StreamDecoder())]
        assert parts == ["\ufffd"]

    @pytest.mark.asyncio()
    async def test_decode_stream_yields_held_base_before_error(self):
        async def increments() -> AsyncIterator[bytes]:
            yield "ไก".encode()
            raise ConnectionError("dropped")

        parts: list[str] = []
        with pytest.raises(ConnectionError):
            async for text in decode_stream(increments(), StreamDecoder()):
                parts.append(text)
        assert parts == ["ไ", "ก"]
