"""Tests for scriptstream.decoder.emitter — per-segment normalization."""

from __future__ import annotations

import unicodedata

from scriptstream.decoder.emitter import NormalizingEmitter
from scriptstream.decoder.scalars import ScalarDecoder
from scriptstream.schemas.decoding import NormalizationForm


def _normalize(text: str, form: NormalizationForm = NormalizationForm.NFC) -> str:
    return NormalizingEmitter(form).normalize(ScalarDecoder().decode(text.encode()))


class TestNormalizingEmitter:
    def test_default_form_is_nfc(self):
        assert NormalizingEmitter().form is NormalizationForm.NFC

    def test_empty(self):
        assert NormalizingEmitter().normalize([]) == ""

    def test_composes_latin_accent(self):
        assert _normalize("e\u0301") == "\u00e9"

    def test_thai_unchanged_by_nfc(self):
        for text in ("สวัสดี", "ไก่", "ผู้ใหญ่", "ที่นี่"):
            assert _normalize(text) == text

    def test_nfc_idempotent(self):
        once = _normalize("Caf\u00e9 ไก่")
        assert _normalize(once) == once
        assert unicodedata.is_normalized("NFC", once)

    def test_nfd_form(self):
        assert _normalize("\u00e9", NormalizationForm.NFD) == "e\u0301"

    def test_form_accepts_string(self):
        assert NormalizingEmitter("NFD").form is NormalizationForm.NFD
