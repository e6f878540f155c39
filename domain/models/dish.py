"""Value objects produced while reading a meal plan."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DishEntry:
    """One atomic food item parsed out of a meal slot.

    ``raw_line`` is the cleaned line with asides removed and may still carry
    preparation notes after a comma. ``short_name`` is the text before the
    first comma and is what gets sent for enrichment and classification.
    """

    meal_label: str
    raw_line: str
    short_name: str
