"""Per-segment canonical normalization.

Each segment is normalized once at release. Because the lookahead keeps a
registered base and its marks in the same segment, concatenating normalized
segments stays in one form without re-normalizing the whole transcript.
Thai marks do not canonically compose, so NFC leaves them as they are while
still composing Latin accents that arrive together with their base.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Sequence

from scriptstream.decoder.scalars import DecodedScalar
from scriptstream.schemas.decoding import NormalizationForm


class NormalizingEmitter:
    """Joins released scalars into text in a single normalization form."""

    def __init__(self, form: NormalizationForm = NormalizationForm.NFC) -> None:
        self._form = NormalizationForm(form)

    @property
    def form(self) -> NormalizationForm:
        return self._form

    def normalize(self, scalars: Sequence[DecodedScalar]) -> str:
        text = "".join(s.char for s in scalars)
        if not text or unicodedata.is_normalized(self._form, text):
            return text
        return unicodedata.normalize(self._form, text)
