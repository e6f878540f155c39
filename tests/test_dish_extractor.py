"""
Tests for dish name extraction.
"""

from domain.models import DishEntry
from domain.schemas import MealSlot
from services.dish_extractor import (
    clean_dish_name,
    extract_dish_entry,
    extract_dishes,
    extract_slot_dishes,
    unique_short_names,
)


# =============================================================================
# SINGLE LINES
# =============================================================================


def test_short_name_is_text_before_first_comma():
    entry = extract_dish_entry("Masala Oats (1 bowl), with veggies", "Breakfast")
    assert entry.short_name == "Masala Oats"
    assert entry.meal_label == "Breakfast"
    assert "with veggies" in entry.raw_line


def test_asides_and_bullets_are_removed():
    assert clean_dish_name("Poha [recipe] {v2}") == "Poha"
    assert extract_dish_entry("1. Vegetable Upma", "Breakfast").short_name == "Vegetable Upma"
    assert extract_dish_entry("• Green Tea", "Breakfast").short_name == "Green Tea"


def test_too_short_names_are_skipped():
    assert extract_dish_entry("(1 cup) ab", "Breakfast") is None
    assert extract_dish_entry(", Poha", "Breakfast") is None


# =============================================================================
# SLOTS
# =============================================================================


def test_heading_and_quantity_round_trip():
    """
    Test the canonical lunch slot.

    Verifies:
    - The heading is not a dish
    - Quantity and side notes stay out of the short name
    """
    slot = MealSlot(title="Lunch", html_content="<h3>Lunch</h3><p>Grilled Chicken, 150g, with rice</p>")
    entries = extract_slot_dishes(slot)
    assert [e.short_name for e in entries] == ["Grilled Chicken"]
    assert entries[0].raw_line == "Grilled Chicken, 150g, with rice"


def test_extract_dishes_keeps_slot_order():
    slots = [
        MealSlot(title="Breakfast", html_content="<p>Poha</p><p>Green Tea</p>"),
        MealSlot(title="Dinner", html_content="<ul><li>Paneer Tikka</li></ul>"),
    ]
    entries = extract_dishes(slots)
    assert [(e.meal_label, e.short_name) for e in entries] == [
        ("Breakfast", "Poha"),
        ("Breakfast", "Green Tea"),
        ("Dinner", "Paneer Tikka"),
    ]


def test_empty_slot_yields_nothing():
    assert extract_slot_dishes(MealSlot(title="Evening", html_content="")) == []


def test_unique_short_names_is_case_insensitive():
    entries = [
        DishEntry("Breakfast", "Poha", "Poha"),
        DishEntry("Dinner", "poha", "poha"),
        DishEntry("Dinner", "Upma", "Upma"),
    ]
    assert unique_short_names(entries) == ["Poha", "Upma"]
