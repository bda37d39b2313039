"""Byte buffer that holds an incomplete trailing scalar between increments."""

from __future__ import annotations

from scriptstream.decoder.utf8 import is_continuation, sequence_width, well_formed_length

# A held tail is at most the first three bytes of a four-byte sequence
_MAX_TAIL = 3


class ByteAccumulator:
    """Accumulates raw increments and releases them on scalar boundaries.

    No assumption is made that increment boundaries line up with scalar
    boundaries. After take_valid_prefix() the buffer holds nothing, or the
    well-formed start of exactly one multi-byte sequence that is still
    waiting for continuation bytes.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def pending(self) -> int:
        """Number of bytes currently held back."""
        return len(self._buffer)

    def append(self, data: bytes) -> None:
        """Concatenate an increment to the buffer."""
        self._buffer.extend(data)

    def take_valid_prefix(self) -> bytes:
        """Remove and return everything up to the last scalar boundary.

        A trailing run is kept only if it can still become a valid scalar.
        Malformed trailing bytes are released so the scalar decoder can
        report them now; more input would not repair them.
        """
        keep = self._incomplete_tail_length()
        cut = len(self._buffer) - keep
        prefix = bytes(self._buffer[:cut])
        del self._buffer[:cut]
        return prefix

    def drain(self) -> bytes:
        """Remove and return every held byte, complete or not."""
        data = bytes(self._buffer)
        self._buffer.clear()
        return data

    def _incomplete_tail_length(self) -> int:
        buf = self._buffer
        for back in range(1, min(_MAX_TAIL, len(buf)) + 1):
            start = len(buf) - back
            if is_continuation(buf[start]):
                continue
            width = sequence_width(buf[start])
            if back < width and well_formed_length(buf, start) == back:
                return back
            return 0
        return 0
