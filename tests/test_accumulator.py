"""Tests for scriptstream.decoder.accumulator and the UTF-8 tables."""

from __future__ import annotations

from scriptstream.decoder.accumulator import ByteAccumulator
from scriptstream.decoder.utf8 import sequence_width, well_formed_length


class TestSequenceWidth:
    def test_ascii(self):
        assert sequence_width(0x41) == 1

    def test_multibyte_leads(self):
        assert sequence_width(0xC3) == 2
        assert sequence_width(0xE0) == 3
        assert sequence_width(0xF0) == 4

    def test_invalid_leads(self):
        for lead in (0x80, 0xBF, 0xC0, 0xC1, 0xF5, 0xFF):
            assert sequence_width(lead) == 0


class TestWellFormedLength:
    def test_complete_thai(self):
        assert well_formed_length(b"\xe0\xb8\xaa", 0) == 3

    def test_truncated(self):
        assert well_formed_length(b"\xe0\xb8", 0) == 2

    def test_overlong_second_byte(self):
        # E0 must be followed by A0..BF
        assert well_formed_length(b"\xe0\x80\x80", 0) == 1

    def test_surrogate_second_byte(self):
        assert well_formed_length(b"\xed\xa0\x80", 0) == 1

    def test_above_max_scalar(self):
        assert well_formed_length(b"\xf4\x90\x80\x80", 0) == 1

    def test_invalid_lead(self):
        assert well_formed_length(b"\x80", 0) == 0


class TestByteAccumulator:
    def test_empty(self):
        acc = ByteAccumulator()
        assert acc.take_valid_prefix() == b""
        assert acc.pending == 0

    def test_ascii_passes_through(self):
        acc = ByteAccumulator()
        acc.append(b"Hello")
        assert acc.take_valid_prefix() == b"Hello"
        assert len(acc) == 0

    def test_holds_split_three_byte_sequence(self):
        acc = ByteAccumulator()
        acc.append(b"\xe0\xb8")
        assert acc.take_valid_prefix() == b""
        assert acc.pending == 2
        acc.append(b"\xaa")
        assert acc.take_valid_prefix() == b"\xe0\xb8\xaa"
        assert acc.pending == 0

    def test_holds_only_trailing_sequence(self):
        acc = ByteAccumulator()
        acc.append("ก".encode() + b"\xe0")
        assert acc.take_valid_prefix() == "ก".encode()
        assert acc.pending == 1

    def test_holds_three_bytes_of_four(self):
        acc = ByteAccumulator()
        acc.append(b"\xf0\x9f\x98")
        assert acc.take_valid_prefix() == b""
        assert acc.pending == 3
        acc.append(b"\x80")
        assert acc.take_valid_prefix() == "\U0001F600".encode()

    def test_complete_four_byte_sequence_released(self):
        acc = ByteAccumulator()
        acc.append("\U0001F600".encode())
        assert acc.take_valid_prefix() == "\U0001F600".encode()

    def test_malformed_tail_released(self):
        acc = ByteAccumulator()
        acc.append(b"\xe0\x80")
        assert acc.take_valid_prefix() == b"\xe0\x80"
        assert acc.pending == 0

    def test_surrogate_prefix_released(self):
        acc = ByteAccumulator()
        acc.append(b"\xed\xa0")
        assert acc.take_valid_prefix() == b"\xed\xa0"

    def test_invalid_lead_released(self):
        acc = ByteAccumulator()
        acc.append(b"\xc0")
        assert acc.take_valid_prefix() == b"\xc0"

    def test_stray_continuations_released(self):
        acc = ByteAccumulator()
        acc.append(b"\x80\x80\x80")
        assert acc.take_valid_prefix() == b"\x80\x80\x80"

    def test_drain_returns_incomplete_bytes(self):
        acc = ByteAccumulator()
        acc.append(b"\xe2\x82")
        acc.take_valid_prefix()
        assert acc.drain() == b"\xe2\x82"
        assert acc.pending == 0
