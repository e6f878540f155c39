"""Value objects produced by the markup injector."""

from dataclasses import dataclass

from domain.enums import ConflictType


@dataclass(frozen=True)
class HighlightStyle:
    """Visual treatment for one conflict category"""

    color: str
    background: str
    label: str


@dataclass(frozen=True)
class HighlightTrace:
    """One successful replacement inside a slot"""

    slot: str
    dish_name: str
    matched_text: str
    category: ConflictType
    used_fallback: bool = False
