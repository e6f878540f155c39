"""
HTML-tolerant match patterns for flagged dish names.

A flagged name comes back from the classifier as plain text, but it has to
be found again inside the original markup, where the same visible text may
be entity-encoded or interrupted by inline formatting tags.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern

from domain.schemas import Conflict

logger = logging.getLogger("dietaudit.patterns")

ENTITY_ALTERNATIVES = {
    "&": r"(?:&|&amp;|&#0*38;|&#x0*26;)",
    "<": r"(?:<|&lt;|&#0*60;|&#x0*3c;)",
    ">": r"(?:>|&gt;|&#0*62;|&#x0*3e;)",
    '"': r'(?:"|&quot;|&#0*34;|&#x0*22;)',
    "'": r"(?:'|&apos;|&#0*39;|&#x0*27;)",
}

# Inline formatting only; block tags (p, div, li, table...) are left out so
# a match can never span two unrelated blocks.
INLINE_TAGS = ("b", "strong", "i", "em", "span", "font", "u", "small", "big", "mark")

WORD_GAP = (
    r"(?:\s|&nbsp;|&#0*160;|&#x0*a0;|&#0*32;|&#x0*20;|<br\s*/?>"
    r"|</?(?:" + "|".join(INLINE_TAGS) + r")\b[^>]*>)+"
)

MIN_CONFLICT_NAME_LENGTH = 2
MIN_FALLBACK_NAME_LENGTH = 3


@dataclass(frozen=True)
class MatchPattern:
    """Compiled pattern for one conflict name"""

    source_name: str
    regex: Pattern[str]
    is_fallback: bool = False


def normalize_name(name: str) -> str:
    return re.sub(r"\s+", " ", name or "").strip()


def build_pattern(name: str) -> str:
    """
    Translate a plain dish name into a markup-tolerant regular expression.

    - characters with regex meaning are escaped
    - & < > " ' also match their named and numeric entity forms
    - every space matches any run of whitespace, &nbsp;, <br> or inline
      formatting tags (opening or closing)
    """
    parts = []
    for char in normalize_name(name):
        if char == " ":
            parts.append(WORD_GAP)
        elif char in ENTITY_ALTERNATIVES:
            parts.append(ENTITY_ALTERNATIVES[char])
        else:
            parts.append(re.escape(char))
    return "".join(parts)


def compile_pattern(name: str) -> Pattern[str]:
    """
    Case-insensitive pattern for ``name``.

    Tag and guarded-element boundaries are checked by the injector against a
    scan of the markup, not by the pattern.
    """
    return re.compile(f"(?P<dish>{build_pattern(name)})", re.IGNORECASE)


def fallback_name(name: str) -> Optional[str]:
    """
    The part of ``name`` before its first comma, when that differs.

    Covers classifier replies that echo a fuller description than the text
    present in the markup.
    """
    normalized = normalize_name(name)
    short = normalize_name(normalized.split(",")[0])
    if len(short) < MIN_FALLBACK_NAME_LENGTH or short == normalized:
        return None
    return short


def is_usable(conflict: Conflict) -> bool:
    return len(normalize_name(conflict.dish_name)) >= MIN_CONFLICT_NAME_LENGTH


def patterns_for(conflict: Conflict) -> List[MatchPattern]:
    """Full-name pattern first, then the before-comma fallback if any"""
    name = normalize_name(conflict.dish_name)
    patterns = [MatchPattern(source_name=name, regex=compile_pattern(name))]
    short = fallback_name(name)
    if short:
        patterns.append(
            MatchPattern(source_name=short, regex=compile_pattern(short), is_fallback=True)
        )
    return patterns


def order_by_specificity(conflicts: Iterable[Conflict]) -> List[Conflict]:
    """
    Longest dish names first, dropping unusable ones.

    "Chicken Salad" must be claimed before "Chicken" gets a chance to match
    inside it. The sort is stable, so equal lengths keep classifier order.
    """
    usable = []
    for conflict in conflicts:
        if is_usable(conflict):
            usable.append(conflict)
        else:
            logger.warning(f"Skipping conflict with unusable dish name {conflict.dish_name!r}")
    return sorted(usable, key=lambda c: len(normalize_name(c.dish_name)), reverse=True)
