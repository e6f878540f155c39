"""
Tests for meal-slot HTML normalization.

Covers markup stripping, noise removal and dish line splitting.
"""

from services.html_normalizer import (
    collapse_whitespace,
    html_to_text,
    normalize_slot_html,
    split_dish_lines,
    strip_noise,
)


# =============================================================================
# MARKUP STRIPPING
# =============================================================================


def test_block_tags_and_line_breaks_become_lines():
    """
    Test that paragraphs and <br> both separate dishes.

    Verifies:
    - Each paragraph is its own line
    - <br> inside a paragraph splits it
    """
    lines = normalize_slot_html("<p>Poha</p><p>Upma<br>Idli Sambar</p>")
    assert lines == ["Poha", "Upma", "Idli Sambar"]


def test_headings_are_dropped_with_their_content():
    assert normalize_slot_html("<h3>Lunch</h3><p>Dal Khichdi</p>") == ["Dal Khichdi"]


def test_inline_tags_do_not_split_dish_names():
    assert normalize_slot_html("<p>Masala <b>Oats</b></p>") == ["Masala Oats"]


def test_entities_are_decoded():
    """
    Test entity handling.

    Verifies:
    - &amp; and &nbsp; decode to their characters
    - Unknown entities become a space
    """
    assert html_to_text("Dal&nbsp;&amp; Rice") == "Dal & Rice"
    assert html_to_text("Tea&hellip;") == "Tea "


def test_comments_are_removed():
    assert normalize_slot_html("<p>Poha<!-- swap with upma --></p>") == ["Poha"]


# =============================================================================
# NOISE REMOVAL
# =============================================================================


def test_strip_noise_removes_urls_and_quantities():
    assert strip_noise("Smoothie https://example.com/r/1").strip() == "Smoothie"
    assert strip_noise("Moong Dal Chilla - 150 grams") == "Moong Dal Chilla"
    assert strip_noise("Buttermilk - 200 ml") == "Buttermilk"


def test_strip_noise_removes_call_to_action_asides():
    assert strip_noise("Smoothie (Recipe link)") == "Smoothie"
    assert strip_noise("Protein Bar [Buy here]") == "Protein Bar"


def test_collapse_whitespace_keeps_newlines():
    assert collapse_whitespace("Poha  \t with peas \n\n   Upma") == "Poha with peas\nUpma"


# =============================================================================
# LINE SPLITTING
# =============================================================================


def test_split_on_or_and_slashes():
    """
    Test alternative separators.

    Verifies:
    - Standalone OR splits alternatives
    - Spaced "/" and "+" split, but "w/o" and "1/2" stay intact
    """
    assert split_dish_lines("Oats Porridge OR Poha") == ["Oats Porridge", "Poha"]
    assert split_dish_lines("Roti / Rice") == ["Roti", "Rice"]
    assert split_dish_lines("Idli + Sambar") == ["Idli", "Sambar"]
    assert split_dish_lines("Tea w/o sugar") == ["Tea w/o sugar"]
    assert split_dish_lines("1/2 cup Milk") == ["1/2 cup Milk"]


def test_short_lines_are_discarded():
    assert split_dish_lines("Tea\nab\nUpma") == ["Upma"]


def test_empty_and_contentless_input():
    assert normalize_slot_html("") == []
    assert normalize_slot_html("   ") == []
    assert normalize_slot_html("<p></p><br/>") == []
