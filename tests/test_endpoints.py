"""
HTTP endpoint tests.

Dependencies are routed to stubs through the ``stub_api`` fixture; no
upstream service or model provider is contacted.
"""

from app.exceptions import ServiceValidationError, UpstreamAPIError
from domain.enums import ConflictType
from test_fixtures import BREAKFAST_HTML, client, make_conflict, stub_api  # noqa: F401


def audit_payload(**overrides):
    payload = {
        "user_id": "u-1001",
        "template_id": "7",
        "template_name": "PCOS Reset",
        "meal_sections": [
            {"title": "Breakfast", "html_content": BREAKFAST_HTML},
            {"title": "Dinner", "htmlContent": "<p>Paneer Tikka</p>"},
        ],
    }
    payload.update(overrides)
    return payload


# =============================================================================
# HEALTH
# =============================================================================


def test_health_check():
    r = client.get("/health-check")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["service"] == "DietAudit"
    assert "X-Request-ID" in r.headers


def test_cache_status(stub_api):
    stub_api.cache.put("Poha", ["flattened rice"])
    r = client.get("/enrichment/cache-status")
    assert r.json() == {"cached_dishes": 1}


# =============================================================================
# AUDITS
# =============================================================================


def test_audit_success(stub_api):
    """
    Test a full audit over HTTP.

    Verifies:
    - 200 with success true and one conflict
    - Both alias spellings of the slot markup are accepted
    - The fetched enrichment lands in the shared cache
    """
    stub_api.classifier.conflicts = [make_conflict("Masala Oats", "Oats", ConflictType.ALLERGY)]

    r = client.post("/audits", json=audit_payload())

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["conflict_count"] == 1
    assert body["error"] is None
    sections = body["updated_sections"]
    assert 'data-diet-audit="allergy"' in sections[0]["replaced_content"]
    assert sections[1]["replaced_content"] == "<p>Paneer Tikka</p>"
    assert body["highlights"][0]["category"] == "allergy"
    assert "masala oats" in stub_api.cache


def test_audit_upstream_failure_returns_502(stub_api):
    stub_api.platform.profile_error = UpstreamAPIError("API request failed", 503, "client-details")

    r = client.post("/audits", json=audit_payload())

    assert r.status_code == 502
    body = r.json()
    assert body["success"] is False
    assert body["error"]["code"] == "API_ERROR"
    assert body["conflict_count"] == 0


def test_audit_classifier_validation_failure_returns_422(stub_api):
    stub_api.classifier.error = ServiceValidationError("bad reply", field="conflicts")

    r = client.post("/audits", json=audit_payload())

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_audit_with_no_sections(stub_api):
    r = client.post("/audits", json=audit_payload(meal_sections=[]))
    assert r.status_code == 200
    assert r.json()["conflict_count"] == 0
    assert stub_api.classifier.calls == []


def test_audit_request_validation(stub_api):
    r = client.post("/audits", json={"meal_sections": []})
    assert r.status_code == 422
    body = r.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"


# =============================================================================
# CLIENTS AND TEMPLATES
# =============================================================================


def test_get_client_profile(stub_api):
    r = client.get("/clients/u-42")
    assert r.status_code == 200
    body = r.json()
    assert body["user_id"] == "u-42"
    assert body["allergies"] == ["Oats"]


def test_get_client_profile_upstream_error(stub_api):
    stub_api.platform.profile_error = UpstreamAPIError("API request failed", 500, "client-details")

    r = client.get("/clients/u-42")

    assert r.status_code == 502
    error = r.json()["error"]
    assert error["code"] == "API_ERROR"
    assert error["details"]["status_code"] == 500


def test_list_templates(stub_api):
    stub_api.platform.templates_response = {
        "data": {
            "data": [
                {"diet_id": 7, "diet_name": "PCOS Reset", "breakfast": "<p>Poha</p>"},
                {"diet_id": 8, "diet_name": "Diabetes Care", "lunch": "<p>Dal</p>"},
            ]
        }
    }

    r = client.get("/templates", params={"search": "pcos"})

    assert r.status_code == 200
    templates = r.json()
    assert [t["id"] for t in templates] == ["7"]
    assert templates[0]["sections"][0]["title"] == "Breakfast"


def test_get_template_not_found(stub_api):
    r = client.get("/templates/missing")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"


def test_split_template_sections():
    r = client.post(
        "/templates/sections",
        json={"content_html": "<h3>Breakfast</h3><p>Poha</p><h3>Dinner</h3><p>Khichdi</p>"},
    )
    assert r.status_code == 200
    assert [s["title"] for s in r.json()] == ["Breakfast", "Dinner"]


def test_template_stats():
    r = client.post("/templates/stats", json={"content_html": "<h3>Lunch</h3><ul><li>Dal</li></ul>"})
    assert r.status_code == 200
    assert r.json()["headings"] == 1


# =============================================================================
# DISHES
# =============================================================================


def test_extract_dishes():
    r = client.post(
        "/dishes/extract",
        json={"meal_sections": [{"title": "Lunch", "html_content": "<h3>Lunch</h3><p>Grilled Chicken, 150g, with rice</p>"}]},
    )
    assert r.status_code == 200
    assert r.json() == [
        {
            "meal_label": "Lunch",
            "raw_line": "Grilled Chicken, 150g, with rice",
            "short_name": "Grilled Chicken",
        }
    ]


def test_unknown_route_uses_error_envelope():
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "HTTP_404"
