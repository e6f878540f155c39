"""
Non-destructive highlight injection into a slot's original markup.

Matching runs on the markup string itself so untouched bytes stay exactly as
supplied. A light tag scan marks the regions a match may never touch: the
inside of any tag, the content of link/script/style elements, and the
content of markers injected by an earlier pass. Text inside a marker is
never matched again, which makes re-running an audit on its own output a
no-op.
"""

from __future__ import annotations
import logging
import re
from bisect import bisect_right
from dataclasses import dataclass, field
from html import escape
from typing import Iterable, List, Sequence, Tuple

from domain.enums import ConflictType
from domain.models import HighlightStyle, HighlightTrace
from domain.schemas import Conflict, MealSlot
from services.pattern_builder import MatchPattern, order_by_specificity, patterns_for

logger = logging.getLogger("dietaudit.highlighter")

MARKER_ATTR = "data-diet-audit"
MARKER_CLASS = "diet-audit-flag"

HIGHLIGHT_STYLES = {
    ConflictType.ALLERGY: HighlightStyle("#DC2626", "#FEE2E2", "ALLERGY"),
    ConflictType.DIET_TYPE_VIOLATION: HighlightStyle("#B45309", "#FEFCE8", "DIET VIOLATION"),
    ConflictType.AVERSION: HighlightStyle("#EA580C", "#FFF7ED", "AVERSION"),
    ConflictType.MEDICAL_CONFLICT: HighlightStyle("#C2410C", "#FFF7ED", "MEDICAL"),
}

TAG_RE = re.compile(r"<!--.*?-->|<[^>]*>", re.DOTALL)
TAG_SPLIT_RE = re.compile(r"(<!--.*?-->|<[^>]*>)", re.DOTALL)
TAG_NAME_RE = re.compile(r"<\s*(/)?\s*([a-zA-Z][a-zA-Z0-9]*)")
BLANK_TEXT_RE = re.compile(r"(?:\s|&nbsp;|&#0*160;|&#x0*a0;)*", re.IGNORECASE)

GUARDED_ELEMENTS = {"a", "script", "style"}
TRACKED_ELEMENTS = GUARDED_ELEMENTS | {"span"}
VOID_ELEMENTS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}


def _parse_tag(tag: str) -> Tuple[bool, str] | None:
    """Return (is_closing, lowercase name) or None for comments/doctypes"""
    match = TAG_NAME_RE.match(tag)
    if not match:
        return None
    return bool(match.group(1)), match.group(2).lower()


def _is_self_closing(tag: str) -> bool:
    return tag.rstrip(">").rstrip().endswith("/")


@dataclass
class MarkupRegions:
    """Tag spans and guarded element spans of one markup string"""

    tag_starts: List[int] = field(default_factory=list)
    tag_ends: List[int] = field(default_factory=list)
    guarded: List[Tuple[int, int]] = field(default_factory=list)

    @classmethod
    def scan(cls, html: str) -> "MarkupRegions":
        regions = cls()
        open_elements: List[Tuple[str, int, bool]] = []

        for match in TAG_RE.finditer(html):
            regions.tag_starts.append(match.start())
            regions.tag_ends.append(match.end())

            parsed = _parse_tag(match.group())
            if parsed is None:
                continue
            closing, name = parsed
            if name not in TRACKED_ELEMENTS:
                continue

            if not closing:
                if _is_self_closing(match.group()):
                    continue
                is_guarded = name in GUARDED_ELEMENTS or MARKER_ATTR in match.group()
                open_elements.append((name, match.start(), is_guarded))
                continue

            for index in range(len(open_elements) - 1, -1, -1):
                if open_elements[index][0] == name:
                    _, start, is_guarded = open_elements.pop(index)
                    if is_guarded:
                        regions.guarded.append((start, match.end()))
                    break

        # Unclosed guarded elements run to the end of the fragment
        for _, start, is_guarded in open_elements:
            if is_guarded:
                regions.guarded.append((start, len(html)))
        return regions

    def in_tag(self, pos: int) -> bool:
        index = bisect_right(self.tag_starts, pos) - 1
        return index >= 0 and pos < self.tag_ends[index]

    def touches_guarded(self, start: int, end: int) -> bool:
        return any(g_start < end and start < g_end for g_start, g_end in self.guarded)

    def allows(self, start: int, end: int) -> bool:
        """A span is usable when it starts and ends on text outside guarded elements"""
        if end <= start:
            return False
        if self.in_tag(start) or self.in_tag(end - 1):
            return False
        return not self.touches_guarded(start, end)


@dataclass
class InjectionResult:
    title: str
    html: str
    traces: List[HighlightTrace] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.traces)


def marker_open_tag(conflict: Conflict) -> str:
    style = HIGHLIGHT_STYLES[conflict.conflict_type]
    category = conflict.conflict_type.value
    title = escape(f"{style.label}: contains {conflict.conflicting_ingredient}", quote=True)
    return (
        f'<span class="{MARKER_CLASS} diet-audit-{category}" {MARKER_ATTR}="{category}" '
        f'style="color: {style.color}; background-color: {style.background}; '
        f'font-weight: bold; padding: 1px 4px; border-radius: 2px;" '
        f'title="{title}">'
    )


def is_balanced(fragment: str) -> bool:
    """True when every non-void tag opened inside ``fragment`` closes inside it"""
    stack: List[str] = []
    for match in TAG_RE.finditer(fragment):
        parsed = _parse_tag(match.group())
        if parsed is None:
            continue
        closing, name = parsed
        if name in VOID_ELEMENTS or (not closing and _is_self_closing(match.group())):
            continue
        if closing:
            if not stack or stack[-1] != name:
                return False
            stack.pop()
        else:
            stack.append(name)
    return not stack


def wrap_fragment(fragment: str, conflict: Conflict) -> str:
    """
    Wrap matched markup in a marker.

    A fragment whose inline tags are unbalanced ("Chicken <b>Salad" out of
    "Chicken <b>Salad Bowl</b>") cannot take a single wrapper without
    breaking nesting, so each text run gets its own marker instead.
    """
    open_tag = marker_open_tag(conflict)
    if is_balanced(fragment):
        return f"{open_tag}{fragment}</span>"

    pieces = []
    for piece in TAG_SPLIT_RE.split(fragment):
        if not piece:
            continue
        if TAG_RE.fullmatch(piece) or BLANK_TEXT_RE.fullmatch(piece):
            pieces.append(piece)
        else:
            pieces.append(f"{open_tag}{piece}</span>")
    return "".join(pieces)


def find_spans(html: str, pattern: MatchPattern) -> List[Tuple[int, int]]:
    """All non-overlapping, allowed spans of ``pattern`` in ``html``"""
    regions = MarkupRegions.scan(html)
    spans = []
    pos = 0
    while pos <= len(html):
        match = pattern.regex.search(html, pos)
        if match is None:
            break
        start, end = match.span()
        if regions.allows(start, end):
            spans.append((start, end))
            pos = end
        else:
            pos = start + 1
    return spans


def _apply_spans(html: str, spans: Sequence[Tuple[int, int]], conflict: Conflict) -> str:
    out = []
    cursor = 0
    for start, end in spans:
        out.append(html[cursor:start])
        out.append(wrap_fragment(html[start:end], conflict))
        cursor = end
    out.append(html[cursor:])
    return "".join(out)


def inject_highlights(title: str, html: str, conflicts: Iterable[Conflict]) -> InjectionResult:
    """
    Highlight every conflict found in one slot's markup.

    Conflicts run longest name first against the progressively modified
    markup, so a shorter name can only claim text no longer name claimed.
    A conflict that matches neither its full nor its fallback pattern is
    left unmarked.
    """
    result = InjectionResult(title=title, html=html or "")
    if not result.html:
        return result

    for conflict in order_by_specificity(conflicts):
        for pattern in patterns_for(conflict):
            spans = find_spans(result.html, pattern)
            if not spans:
                continue

            for start, end in spans:
                trace = HighlightTrace(
                    slot=title,
                    dish_name=conflict.dish_name,
                    matched_text=result.html[start:end],
                    category=conflict.conflict_type,
                    used_fallback=pattern.is_fallback,
                )
                result.traces.append(trace)
                logger.info(
                    f"[{title}] \"{pattern.source_name}\"{' (fallback)' if pattern.is_fallback else ''} "
                    f"-> {conflict.conflict_type.value} ({conflict.conflicting_ingredient}): "
                    f"{trace.matched_text!r}"
                )
            result.html = _apply_spans(result.html, spans, conflict)
            break
        else:
            logger.debug(f"[{title}] no match for \"{conflict.dish_name}\"")

    return result


def highlight_slots(slots: Sequence[MealSlot], conflicts: Sequence[Conflict]) -> List[InjectionResult]:
    """One InjectionResult per slot, in slot order; unmatched slots come back unchanged"""
    return [inject_highlights(slot.title, slot.html_content, conflicts) for slot in slots]


def count_markers(html: str) -> int:
    """Number of highlight markers present in ``html``"""
    return len(re.findall(rf"<span\b[^>]*\b{MARKER_ATTR}=", html or "", re.IGNORECASE))
