"""Data-driven combining table.

Maps scalar ranges to a ScalarRole. Scripts are registered as data (see
config/scripts.toml); adding one never touches the state machine. Lookups
are a binary search over sorted, non-overlapping ranges.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable

from scriptstream.errors import ScriptTableError
from scriptstream.schemas.decoding import ScalarRole
from scriptstream.schemas.scripts import ScriptDefinition, ScriptRange


class ScriptTable:
    """Immutable range → role lookup built from script definitions.

    Raises:
        ScriptTableError: If a range is reversed, two ranges overlap or a
            script key repeats.
    """

    def __init__(self, scripts: Iterable[ScriptDefinition]) -> None:
        self._scripts: dict[str, ScriptDefinition] = {}
        entries: list[tuple[ScriptRange, str]] = []

        for script in scripts:
            if script.key in self._scripts:
                raise ScriptTableError(f"Script '{script.key}' registered twice")
            self._scripts[script.key] = script
            for r in script.ranges:
                if r.end < r.start:
                    raise ScriptTableError(
                        f"Range end U+{r.end:04X} precedes start U+{r.start:04X} "
                        f"({script.key})"
                    )
                entries.append((r, script.key))

        entries.sort(key=lambda e: e[0].start)
        for (prev, prev_key), (cur, cur_key) in zip(entries, entries[1:]):
            if cur.start <= prev.end:
                raise ScriptTableError(
                    f"Range U+{cur.start:04X}-U+{cur.end:04X} ({cur_key}) overlaps "
                    f"U+{prev.start:04X}-U+{prev.end:04X} ({prev_key})"
                )

        self._starts = [r.start for r, _ in entries]
        self._entries = entries

    @property
    def scripts(self) -> list[ScriptDefinition]:
        """Registered scripts in registration order."""
        return list(self._scripts.values())

    def get(self, key: str) -> ScriptDefinition | None:
        return self._scripts.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._scripts

    def __len__(self) -> int:
        return len(self._scripts)

    def _lookup(self, codepoint: int) -> tuple[ScriptRange, str] | None:
        index = bisect_right(self._starts, codepoint) - 1
        if index < 0:
            return None
        entry = self._entries[index]
        if codepoint > entry[0].end:
            return None
        return entry

    def role_of(self, codepoint: int) -> ScalarRole:
        """Role of a scalar; NEUTRAL when no registered range covers it."""
        entry = self._lookup(codepoint)
        return entry[0].role if entry else ScalarRole.NEUTRAL

    def script_of(self, codepoint: int) -> str | None:
        """Key of the registered script whose block contains the scalar."""
        entry = self._lookup(codepoint)
        if entry is not None:
            return entry[1]
        for script in self._scripts.values():
            if script.in_block(codepoint):
                return script.key
        return None

    def is_base_candidate(self, codepoint: int) -> bool:
        return self.role_of(codepoint) is ScalarRole.BASE_CANDIDATE

    def is_combining_mark(self, codepoint: int) -> bool:
        return self.role_of(codepoint) is ScalarRole.COMBINING_MARK
