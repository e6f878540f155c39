"""Dish name extraction from normalized meal-slot lines."""

from __future__ import annotations
import logging
import re
from typing import Iterable, List, Optional

from domain.models import DishEntry
from domain.schemas import MealSlot
from services.html_normalizer import normalize_slot_html

logger = logging.getLogger("dietaudit.extractor")

# Parenthesized, bracketed and braced asides: quantities, prep notes, links
ASIDE_RE = re.compile(r"[(\[{].*?[)\]}]")
LEADING_BULLET_RE = re.compile(r"^\s*(?:[•●◦▪*\-–]+|\d{1,2}[.)])\s*")

MIN_SHORT_NAME_LENGTH = 3


def clean_dish_name(text: str) -> str:
    """Remove asides and collapse whitespace"""
    return re.sub(r"\s+", " ", ASIDE_RE.sub("", text)).strip()


def extract_dish_entry(line: str, meal_label: str) -> Optional[DishEntry]:
    """
    Build a DishEntry from one candidate line.

    Diet text is written as "Dish Name, preparation detail, quantity", so
    only the part before the first comma identifies the dish. Returns None
    when fewer than three characters survive cleaning.
    """
    raw_line = clean_dish_name(LEADING_BULLET_RE.sub("", line))
    short_name = clean_dish_name(raw_line.split(",")[0])
    if len(short_name) < MIN_SHORT_NAME_LENGTH:
        return None
    return DishEntry(meal_label=meal_label, raw_line=raw_line, short_name=short_name)


def extract_slot_dishes(slot: MealSlot) -> List[DishEntry]:
    entries = []
    for line in normalize_slot_html(slot.html_content):
        entry = extract_dish_entry(line, slot.title)
        if entry is not None:
            entries.append(entry)
    return entries


def extract_dishes(slots: Iterable[MealSlot]) -> List[DishEntry]:
    """Extract dish entries from every slot, in slot order"""
    entries: List[DishEntry] = []
    slot_count = 0
    for slot in slots:
        slot_count += 1
        entries.extend(extract_slot_dishes(slot))

    logger.info(f"Extracted {len(entries)} dish entries from {slot_count} meal sections")
    for entry in entries:
        logger.debug(f"  [{entry.meal_label}] {entry.raw_line[:80]}")
    return entries


def unique_short_names(entries: Iterable[DishEntry]) -> List[str]:
    """Short names in first-seen order, case-insensitively de-duplicated"""
    seen = set()
    names = []
    for entry in entries:
        key = entry.short_name.lower()
        if key not in seen:
            seen.add(key)
            names.append(entry.short_name)
    return names
