"""Text inspection helpers.

Checks used when diagnosing rendered output: script membership, combining
marks, replacement characters and NFC/NFD comparison. All helpers take an
optional ScriptTable and fall back to the packaged default.
"""

from __future__ import annotations

import unicodedata

from scriptstream.decoder.table import ScriptTable
from scriptstream.decoder.utf8 import REPLACEMENT_CHAR
from scriptstream.schemas.inspection import NormalizationReport, ScalarInfo


def _table_or_default(table: ScriptTable | None) -> ScriptTable:
    if table is not None:
        return table
    from scriptstream.registry import default_script_table

    return default_script_table()


def contains_script(text: str, script: str, table: ScriptTable | None = None) -> bool:
    """Whether any scalar in ``text`` belongs to the given registered script.

    Raises:
        KeyError: If ``script`` is not registered in the table.
    """
    definition = _table_or_default(table).get(script)
    if definition is None:
        raise KeyError(f"Script '{script}' is not registered")
    return any(definition.in_block(ord(ch)) for ch in text)


def has_combining_marks(text: str, table: ScriptTable | None = None) -> bool:
    """Whether ``text`` contains a registered combining mark."""
    resolved = _table_or_default(table)
    return any(resolved.is_combining_mark(ord(ch)) for ch in text)


def contains_replacement(text: str) -> bool:
    return REPLACEMENT_CHAR in text


def count_replacements(text: str) -> int:
    return text.count(REPLACEMENT_CHAR)


def normalization_report(text: str) -> NormalizationReport:
    """Compare ``text`` with its NFC and NFD forms."""
    return NormalizationReport(
        text=text,
        nfc=unicodedata.normalize("NFC", text),
        nfd=unicodedata.normalize("NFD", text),
        is_nfc=unicodedata.is_normalized("NFC", text),
    )


def describe_scalars(text: str, table: ScriptTable | None = None) -> list[ScalarInfo]:
    """One ScalarInfo per scalar in ``text``, in order."""
    resolved = _table_or_default(table)
    infos: list[ScalarInfo] = []
    for ch in text:
        cp = ord(ch)
        infos.append(
            ScalarInfo(
                codepoint=cp,
                char=ch,
                name=unicodedata.name(ch, ""),
                script=resolved.script_of(cp) or "",
                role=resolved.role_of(cp),
                combining_class=unicodedata.combining(ch),
            )
        )
    return infos
