"""Replacement-character policy.

Distinguishes U+FFFD that the decoder had to insert for unrecoverable bytes
from U+FFFD that was already part of the source text. Only the former is
reported as corruption; the character itself still reaches the caller since
no further context can repair it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from scriptstream.decoder.scalars import DecodedScalar
from scriptstream.schemas.decoding import DecodeStatus

logger = logging.getLogger(__name__)


class ReplacementGuard:
    """Classifies decode events and counts terminal corruption."""

    def __init__(self, *, log_corruption: bool = True) -> None:
        self._log_corruption = log_corruption
        self._terminal_events = 0
        self._replacements = 0
        self._last_inserted = 0

    @property
    def terminal_events(self) -> int:
        """Decode events that produced at least one inserted U+FFFD."""
        return self._terminal_events

    @property
    def replacements(self) -> int:
        """Total U+FFFD inserted by the decoder."""
        return self._replacements

    @property
    def last_inserted(self) -> int:
        """U+FFFD inserted during the most recent inspect() call."""
        return self._last_inserted

    def inspect(
        self, scalars: Sequence[DecodedScalar], *, deferred: bool = False
    ) -> DecodeStatus:
        """Tag one decode event.

        Args:
            scalars: Everything ScalarDecoder produced for this event.
            deferred: Whether the accumulator is still holding the start of
                an incomplete sequence after this event.

        Returns:
            TERMINAL_CORRUPTION if the decoder inserted a replacement,
            otherwise BOUNDARY_DEFERRED when bytes are held back, else CLEAN.
        """
        inserted = [s for s in scalars if s.replaced]
        self._last_inserted = len(inserted)
        if inserted:
            self._terminal_events += 1
            self._replacements += len(inserted)
            if self._log_corruption:
                logger.warning(
                    "Unrecoverable UTF-8: %d replacement(s) for bytes [%s]",
                    len(inserted),
                    " ".join(s.raw.hex(" ") for s in inserted),
                )
            return DecodeStatus.TERMINAL_CORRUPTION
        if deferred:
            return DecodeStatus.BOUNDARY_DEFERRED
        return DecodeStatus.CLEAN
