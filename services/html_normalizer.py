"""
Meal-slot text normalization.

Turns a slot's raw HTML into loosely atomic dish lines. The output is only
used to produce names for enrichment and classification; highlighting always
works on the original markup.
"""

from __future__ import annotations
import logging
import re
from typing import List

logger = logging.getLogger("dietaudit.normalizer")

LINE_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
# Headings label the slot ("Lunch"), they never name a dish
HEADING_RE = re.compile(r"<h([1-6])\b[^>]*>.*?</h\1\s*>", re.IGNORECASE | re.DOTALL)
BLOCK_TAG_RE = re.compile(
    r"</?(?:p|div|li|ul|ol|td|th|tr|table|tbody|thead)\b[^>]*>", re.IGNORECASE
)
COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
ANY_TAG_RE = re.compile(r"<[^>]+>")

ENTITY_RE = re.compile(r"&(?:#x[0-9a-f]+|#\d+|\w+);", re.IGNORECASE)
KNOWN_ENTITIES = {"&amp;": "&", "&lt;": "<", "&gt;": ">", "&nbsp;": " "}

URL_RE = re.compile(r"https?://\S+", re.IGNORECASE)
CALL_TO_ACTION_RE = re.compile(
    r"\s*[\[(](?:Buy|Order|View|Click|Read|Recipe|Link|Watch).+?[\])]", re.IGNORECASE
)
QUANTITY_RE = re.compile(
    r"\s*-\s*\d+(?:\.\d+)?\s*(?:grams|gms|gm|g|ml|calories|cal|kcal)\b", re.IGNORECASE
)

HORIZONTAL_SPACE_RE = re.compile(r"[^\S\n]+")
LINE_SPLIT_RE = re.compile(r"\n|\s+OR\s+|\s+[/+]\s*|\s*[/+]\s+", re.IGNORECASE)

MIN_LINE_LENGTH = 4


def _decode_entity(match: re.Match) -> str:
    return KNOWN_ENTITIES.get(match.group(0).lower(), " ")


def html_to_text(html: str) -> str:
    """
    Strip markup from a slot fragment, keeping one dish per line.

    Line breaks and block-level tags become newlines, every other tag is
    dropped. Common entities are decoded; any other entity becomes a space.
    """
    if not html:
        return ""

    text = COMMENT_RE.sub(" ", html)
    text = HEADING_RE.sub("\n", text)
    text = LINE_BREAK_RE.sub("\n", text)
    text = BLOCK_TAG_RE.sub("\n", text)
    text = ANY_TAG_RE.sub("", text)
    text = ENTITY_RE.sub(_decode_entity, text)
    return text.replace("\xa0", " ")


def strip_noise(text: str) -> str:
    """Remove URLs, call-to-action asides and trailing quantity/calorie notes"""
    text = URL_RE.sub("", text)
    text = CALL_TO_ACTION_RE.sub("", text)
    text = QUANTITY_RE.sub("", text)
    return text


def collapse_whitespace(text: str) -> str:
    """Collapse runs of spaces and tabs; newlines survive as line separators"""
    text = HORIZONTAL_SPACE_RE.sub(" ", text)
    return re.sub(r" ?\n[\s]*", "\n", text)


def split_dish_lines(text: str) -> List[str]:
    """
    Split normalized text into candidate dish lines.

    Separators are newlines, a whitespace-bounded "OR", and "/" or "+" with
    whitespace on at least one side, so "w/o" or "1/2" stay intact.
    """
    lines = [part.strip() for part in LINE_SPLIT_RE.split(text)]
    return [line for line in lines if len(line) >= MIN_LINE_LENGTH]


def normalize_slot_html(html: str) -> List[str]:
    """Full normalization of one slot: markup in, candidate dish lines out.

    Never raises on malformed markup; empty or contentless input gives [].
    """
    if not html or not html.strip():
        return []

    text = collapse_whitespace(strip_noise(html_to_text(html)))
    lines = split_dish_lines(text)
    logger.debug(f"Normalized slot into {len(lines)} candidate lines")
    return lines
