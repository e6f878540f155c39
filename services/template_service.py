"""Template service - turning diet templates into ordered meal slots."""

import logging
import re
from typing import Any, List, Mapping, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

from domain.enums import MealTime
from domain.schemas import DietTemplate, HtmlStats, MealSlot

logger = logging.getLogger("dietaudit.templates")

MEAL_TIME_PATTERNS = {
    MealTime.ON_RISING: [r"on\s+rising", r"early\s+morning", r"wake\s+up"],
    MealTime.BREAKFAST: [r"breakfast", r"morning\s+meal"],
    MealTime.MID_MEAL: [r"mid\s+meal", r"mid[-\s]?morning", r"snack\s*1"],
    MealTime.LUNCH: [r"lunch", r"afternoon\s+meal"],
    MealTime.EVENING: [r"evening", r"tea\s+time", r"snack\s*2"],
    MealTime.DINNER: [r"dinner", r"supper"],
    MealTime.POST_DINNER: [r"post\s+dinner", r"bed\s*time", r"before\s+sleep"],
}

# Checked in this order so "Post Dinner" is not read as "Dinner"
DETECTION_ORDER = [
    MealTime.POST_DINNER,
    MealTime.ON_RISING,
    MealTime.MID_MEAL,
    MealTime.BREAKFAST,
    MealTime.LUNCH,
    MealTime.EVENING,
    MealTime.DINNER,
]

# Per-meal HTML fields on templates returned by the platform, in plan order
MEAL_FIELDS = [
    ("on_rising", "On Rising"),
    ("breakfast", "Breakfast"),
    ("mid_morning", "Mid Morning"),
    ("pre_workout", "Pre Workout"),
    ("post_workout", "Post Workout"),
    ("pre_lunch", "Pre Lunch"),
    ("lunch", "Lunch"),
    ("post_lunch", "Post Lunch"),
    ("tea_eve", "Tea / Evening Snack"),
    ("late_eve", "Late Evening"),
    ("pre_dinner", "Pre Dinner"),
    ("dinner", "Dinner"),
    ("post_dinner", "Post Dinner"),
    ("bed_time", "Bed Time"),
]

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
LABEL_TAGS = {"strong", "b"}
MAX_HEADING_LENGTH = 60
DEFAULT_SLOT_TITLE = "Meal Plan"


def detect_meal_time(text: str) -> Optional[MealTime]:
    """Meal time named by a heading, or None"""
    normalized = (text or "").strip()
    if not normalized or len(normalized) > MAX_HEADING_LENGTH:
        return None
    for meal_time in DETECTION_ORDER:
        if any(re.search(p, normalized, re.IGNORECASE) for p in MEAL_TIME_PATTERNS[meal_time]):
            return meal_time
    return None


def _heading_text(node: Tag) -> Optional[str]:
    """Text of ``node`` if it acts as a section heading"""
    if node.name in HEADING_TAGS or node.name in LABEL_TAGS:
        return node.get_text(" ", strip=True)
    # <p><strong>Lunch</strong></p> style labels
    children = [c for c in node.children if not (isinstance(c, NavigableString) and not c.strip())]
    if len(children) == 1 and isinstance(children[0], Tag) and children[0].name in LABEL_TAGS:
        return children[0].get_text(" ", strip=True)
    return None


def split_template_into_slots(html: str) -> List[MealSlot]:
    """
    Segment a combined template body into meal slots by its headings.

    Markup following a meal-time heading, up to the next one, becomes that
    slot's HTML verbatim. Content before the first heading is dropped. A
    body with no recognizable headings comes back as a single slot.
    """
    if not html or not html.strip():
        return []

    soup = BeautifulSoup(html, "html.parser")
    root = soup.body if soup.body is not None else soup

    slots: List[MealSlot] = []
    current_title: Optional[str] = None
    buffer: List[str] = []

    def flush():
        if current_title is not None:
            slots.append(MealSlot(title=current_title, html_content="".join(buffer).strip()))

    for node in root.children:
        if isinstance(node, Tag):
            heading = _heading_text(node)
            meal_time = detect_meal_time(heading) if heading else None
            if meal_time is not None:
                flush()
                current_title = meal_time.value
                buffer = []
                continue
        if current_title is not None:
            buffer.append(str(node))
    flush()

    if not slots:
        logger.info("No meal-time headings found; using the whole body as one slot")
        return [MealSlot(title=DEFAULT_SLOT_TITLE, html_content=html)]

    logger.info(f"Split template into {len(slots)} meal slots")
    return slots


def html_stats(html: str) -> HtmlStats:
    soup = BeautifulSoup(html or "", "html.parser")
    return HtmlStats(
        length=len(html or ""),
        headings=len(soup.find_all(list(HEADING_TAGS))),
        lists=len(soup.find_all(["ul", "ol"])),
        links=len(soup.find_all("a")),
    )


class TemplateService:
    """Business logic for mapping platform template records."""

    @staticmethod
    def slots_from_record(raw: Mapping[str, Any]) -> List[MealSlot]:
        """Meal slots from per-meal fields, or from a combined body"""
        slots = []
        for key, title in MEAL_FIELDS:
            value = raw.get(key)
            if isinstance(value, str) and value.strip():
                slots.append(MealSlot(title=title, html_content=value))
        if slots:
            return slots

        body = raw.get("content_html") or raw.get("content") or raw.get("body") or ""
        return split_template_into_slots(body) if isinstance(body, str) else []

    @staticmethod
    def to_template(raw: Mapping[str, Any], index: int = 0) -> DietTemplate:
        status = raw.get("status") or raw.get("diet_status")
        if status == 1:
            status = "READY"
        return DietTemplate(
            id=str(raw.get("diet_id") or raw.get("id") or f"template_{index}"),
            name=str(
                raw.get("diet_name")
                or raw.get("subject")
                or raw.get("name")
                or raw.get("title")
                or "Untitled"
            ),
            status=str(status or "DRAFT"),
            sections=TemplateService.slots_from_record(raw),
            diet_note=raw.get("diet_note") or None,
        )

    @staticmethod
    def unwrap_templates(response: Any) -> List[Mapping[str, Any]]:
        """Template records from the envelopes the listing endpoint uses"""
        wrapper = response[0] if isinstance(response, list) and response else response
        if isinstance(wrapper, Mapping):
            inner = wrapper.get("data")
            if isinstance(inner, Mapping) and isinstance(inner.get("data"), list):
                return inner["data"]
            if isinstance(inner, list):
                return inner
        if isinstance(response, list) and all(isinstance(r, Mapping) for r in response):
            return response
        logger.warning(f"Unexpected template response structure: {type(response).__name__}")
        return []

    @staticmethod
    def to_templates(response: Any, limit: int = 50, search: str = "") -> List[DietTemplate]:
        records = TemplateService.unwrap_templates(response)
        templates = [
            TemplateService.to_template(raw, index)
            for index, raw in enumerate(records)
            if isinstance(raw, Mapping)
        ]
        query = (search or "").strip().lower()
        if query:
            templates = [t for t in templates if query in t.name.lower()]
            logger.info(f"Filtered to {len(templates)} templates matching {search!r}")
        return templates[:limit]
