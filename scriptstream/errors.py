"""Exception hierarchy for scriptstream.

Decoding itself never raises. These errors come only from loading and
validating configuration and script tables.
"""

from __future__ import annotations


class ScriptStreamError(Exception):
    """Base exception for all scriptstream errors."""


class ConfigError(ScriptStreamError, ValueError):
    """Raised when decoder configuration is missing a section or has a bad value."""


class ScriptTableError(ScriptStreamError, ValueError):
    """Raised when a script table has invalid, overlapping or unknown entries."""
