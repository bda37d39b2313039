"""UTF-8 well-formedness tables shared by the accumulator and scalar decoder.

Follows the well-formed byte sequence table of Unicode chapter 3 (table 3-7):
the second byte of a sequence has a narrowed range after E0, ED, F0 and F4,
which rules out overlongs, surrogates and scalars above U+10FFFF without
decoding the value first.
"""

from __future__ import annotations

REPLACEMENT_CHAR = "\ufffd"

_CONTINUATION = (0x80, 0xBF)

# Lead bytes whose first continuation byte has a restricted range
_SECOND_BYTE_RANGES: dict[int, tuple[int, int]] = {
    0xE0: (0xA0, 0xBF),  # no overlong 3-byte forms
    0xED: (0x80, 0x9F),  # no UTF-16 surrogates
    0xF0: (0x90, 0xBF),  # no overlong 4-byte forms
    0xF4: (0x80, 0x8F),  # nothing above U+10FFFF
}


def sequence_width(lead: int) -> int:
    """Number of bytes a sequence starting with ``lead`` must have.

    Returns 0 for bytes that can never start a well-formed sequence:
    continuation bytes, the overlong leads C0/C1, and F5..FF.
    """
    if lead <= 0x7F:
        return 1
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


def is_continuation(byte: int) -> bool:
    return _CONTINUATION[0] <= byte <= _CONTINUATION[1]


def continuation_range(lead: int, index: int) -> tuple[int, int]:
    """Legal range for the byte at ``index`` (1-based) after ``lead``."""
    if index == 1:
        return _SECOND_BYTE_RANGES.get(lead, _CONTINUATION)
    return _CONTINUATION


def well_formed_length(data: bytes | bytearray, start: int) -> int:
    """Length of the well-formed run beginning at ``data[start]``.

    Counts the lead byte plus every following byte that is legal in its
    position, stopping at the declared sequence width or the end of data.
    The result equals ``sequence_width`` for a complete scalar, is smaller
    for a truncated or malformed one, and is 0 for an invalid lead byte.
    The bytes counted for a malformed sequence form its maximal subpart.
    """
    lead = data[start]
    width = sequence_width(lead)
    if width == 0:
        return 0
    length = 1
    while length < width and start + length < len(data):
        low, high = continuation_range(lead, length)
        if not low <= data[start + length] <= high:
            break
        length += 1
    return length
