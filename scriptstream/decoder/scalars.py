"""Scalar decoding with maximal-subpart replacement.

Turns a byte prefix released by the ByteAccumulator into DecodedScalar
values. Invalid input is replaced following the Unicode "substitution of
maximal subparts" practice, which is also what CPython's utf-8 codec does
with errors="replace": each maximal subpart of an ill-formed sequence becomes
exactly one U+FFFD, and a byte that cannot start any sequence becomes its
own U+FFFD.
"""

from __future__ import annotations

from dataclasses import dataclass

from scriptstream.decoder.utf8 import REPLACEMENT_CHAR, sequence_width, well_formed_length


@dataclass(frozen=True)
class DecodedScalar:
    """One scalar value together with the bytes it was decoded from."""

    char: str
    raw: bytes
    replaced: bool = False

    @property
    def codepoint(self) -> int:
        return ord(self.char)


class ScalarDecoder:
    """Stateless UTF-8 decoder over complete byte prefixes."""

    def decode(self, data: bytes) -> list[DecodedScalar]:
        """Decode ``data`` into scalars.

        Scalars inserted for malformed bytes carry ``replaced=True``. A
        sequence truncated by the end of ``data`` counts as malformed, so
        callers should only pass the tail of a stream when no more bytes
        will ever arrive.
        """
        scalars: list[DecodedScalar] = []
        pos = 0
        end = len(data)

        while pos < end:
            lead = data[pos]

            # ASCII fast path
            if lead <= 0x7F:
                scalars.append(DecodedScalar(chr(lead), data[pos : pos + 1]))
                pos += 1
                continue

            width = sequence_width(lead)
            length = well_formed_length(data, pos)

            if width and length == width:
                raw = data[pos : pos + width]
                scalars.append(DecodedScalar(raw.decode("utf-8"), raw))
                pos += width
                continue

            # Ill-formed: consume the maximal subpart, at least one byte
            consumed = max(length, 1)
            scalars.append(
                DecodedScalar(REPLACEMENT_CHAR, data[pos : pos + consumed], replaced=True)
            )
            pos += consumed

        return scalars
