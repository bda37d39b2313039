"""Script combining-table schemas.

A script is registered as data: a display name, an optional Unicode block
used for membership checks, and a list of scalar ranges tagged with a role.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from scriptstream.schemas.decoding import ScalarRole

MAX_SCALAR = 0x10FFFF


class ScriptRange(BaseModel):
    """An inclusive range of scalar values sharing one role."""

    start: int = Field(ge=0, le=MAX_SCALAR, description="First scalar value in the range")
    end: int = Field(ge=0, le=MAX_SCALAR, description="Last scalar value in the range (inclusive)")
    role: ScalarRole = Field(description="Role of every scalar in the range")

    def __contains__(self, codepoint: int) -> bool:
        return self.start <= codepoint <= self.end


class ScriptDefinition(BaseModel):
    """One registered script loaded from scripts.toml."""

    key: str = Field(description="Registry key (e.g. 'thai')")
    name: str = Field(description="Human-friendly script name")
    block: tuple[int, int] | None = Field(
        default=None, description="Unicode block used for script membership checks"
    )
    ranges: list[ScriptRange] = Field(
        default_factory=list, description="Role-tagged scalar ranges"
    )

    def in_block(self, codepoint: int) -> bool:
        """Whether the scalar falls inside this script's Unicode block."""
        if self.block is None:
            return any(codepoint in r for r in self.ranges)
        return self.block[0] <= codepoint <= self.block[1]
