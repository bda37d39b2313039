"""Single-step lookahead for script-specific combining marks.

A base consonant decoded at the end of an increment is withheld until the
next increment shows whether a combining mark follows it. This keeps a bare
consonant from being displayed and then retroactively gaining a tone mark,
and keeps base and mark in one emitted segment. At most one scalar is ever
withheld; this is not grapheme clustering.
"""

from __future__ import annotations

from collections.abc import Sequence

from scriptstream.decoder.scalars import DecodedScalar
from scriptstream.decoder.table import ScriptTable


class CombiningLookahead:
    """Holds back a trailing base candidate across one increment."""

    def __init__(self, table: ScriptTable) -> None:
        self._table = table
        self._pending: DecodedScalar | None = None

    @property
    def pending(self) -> DecodedScalar | None:
        """The withheld base scalar, if any."""
        return self._pending

    @property
    def holding(self) -> bool:
        return self._pending is not None

    def resolve(self, scalars: Sequence[DecodedScalar]) -> list[DecodedScalar]:
        """Return the scalars that are safe to emit now.

        A held base is released in front of the new scalars, so any combining
        marks at the head of ``scalars`` leave in the same segment as their
        base. When nothing new was decoded the held base stays put, since its
        marks may still be on the way.
        """
        if not scalars:
            return []

        released: list[DecodedScalar] = []
        if self._pending is not None:
            released.append(self._pending)
            self._pending = None
        released.extend(scalars)

        last = released[-1]
        if not last.replaced and self._table.is_base_candidate(last.codepoint):
            self._pending = released.pop()
        return released

    def release(self) -> list[DecodedScalar]:
        """Unconditionally release the held base (end of stream)."""
        if self._pending is None:
            return []
        pending, self._pending = self._pending, None
        return [pending]
