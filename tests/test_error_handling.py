"""
Error taxonomy and edge case tests.

This test suite covers:
- Exception codes, statuses and payloads
- Concurrent use of the shared enrichment cache
- Malformed markup reaching the pipeline
"""

from concurrent.futures import ThreadPoolExecutor

from app.exceptions import DietAuditError, NotFoundError, ServiceValidationError, UpstreamAPIError
from services import EnrichmentCache
from services.dish_extractor import extract_slot_dishes
from services.highlight_injector import count_markers, inject_highlights
from test_fixtures import make_conflict, make_slot


# =============================================================================
# EXCEPTION TAXONOMY
# =============================================================================


def test_error_codes_and_statuses():
    """
    Test each error class.

    Verifies:
    - Default codes and suggested HTTP statuses
    - All of them share the DietAuditError base
    """
    cases = [
        (DietAuditError("x"), "INTERNAL_ERROR", 500),
        (ServiceValidationError("x", field="age"), "VALIDATION_ERROR", 422),
        (UpstreamAPIError("x", 404, "client-details"), "API_ERROR", 502),
        (NotFoundError("x"), "NOT_FOUND", 404),
    ]
    for error, code, status in cases:
        assert isinstance(error, DietAuditError)
        assert error.code == code
        assert error.http_status == status


def test_error_payloads():
    assert ServiceValidationError("Invalid age", field="age").to_dict() == {
        "message": "Invalid age",
        "code": "VALIDATION_ERROR",
        "details": {"field": "age"},
    }
    upstream = UpstreamAPIError("API request failed", 0, "recipe/batch-search")
    assert upstream.to_dict()["details"] == {"endpoint": "recipe/batch-search", "status_code": 0}
    assert str(upstream) == "API request failed"
    assert DietAuditError("boom").to_dict() == {"message": "boom", "code": "INTERNAL_ERROR"}


# =============================================================================
# CONCURRENCY
# =============================================================================


def test_cache_survives_concurrent_writers():
    cache = EnrichmentCache()

    def fill(offset):
        for i in range(200):
            cache.put(f"dish {offset}-{i}", [f"ingredient {i}"])
            cache.get(f"dish {offset}-{i}")

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(fill, range(8)))

    assert len(cache) == 1600


# =============================================================================
# MALFORMED MARKUP
# =============================================================================


def test_unclosed_tags_do_not_break_extraction():
    entries = extract_slot_dishes(make_slot("Lunch", "<p>Dal Khichdi<p><b>Jeera Rice"))
    assert [e.short_name for e in entries] == ["Dal Khichdi", "Jeera Rice"]


def test_unclosed_anchor_guards_the_rest_of_the_fragment():
    html = '<p>Poha <a href="/r">Poha with peanuts'
    result = inject_highlights("Breakfast", html, [make_conflict("Poha", "peanuts")])
    assert count_markers(result.html) == 1
    assert result.html.endswith('<a href="/r">Poha with peanuts')
