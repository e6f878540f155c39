"""
Shared test fixtures and utilities for the DietAudit test suite.

This module contains stub collaborators, sample markup, helper factories and
the test client setup reused across test files.
"""

from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_classifier, get_enrichment_cache, get_platform_client
from domain.enums import ConflictType, DietPreference
from domain.schemas import AuditResult, ClientProfile, Conflict, EnrichedDish, MealSlot
from main import app
from services import EnrichmentCache

client = TestClient(app)


# Realistic meal sections as they arrive from the template editor
BREAKFAST_HTML = "<p>Masala Oats (1 bowl), with veggies</p><p>Green Tea</p>"
LUNCH_HTML = "<h3>Lunch</h3><p>Grilled Chicken, 150g, with rice</p>"
DINNER_HTML = "<ul><li>Paneer Tikka</li><li>Jeera Rice</li></ul>"


def make_slot(title: str = "Breakfast", html: str = BREAKFAST_HTML) -> MealSlot:
    return MealSlot(title=title, html_content=html)


def make_profile(**overrides) -> ClientProfile:
    """
    Create a client profile with realistic defaults.

    Args:
        **overrides: Any ClientProfile field to replace

    Returns:
        ClientProfile: Asha Rao, vegetarian, allergic to oats

    Example:
        >>> make_profile(allergies=[]).allergies
        []
    """
    data = {
        "user_id": "u-1001",
        "first_name": "Asha",
        "last_name": "Rao",
        "email": "asha.rao@example.com",
        "age": 34,
        "gender": "Female",
        "allergies": ["Oats"],
        "medical_conditions": ["PCOS"],
        "food_aversions": [],
        "diet_preference": DietPreference.VEG,
    }
    data.update(overrides)
    return ClientProfile(**data)


def make_conflict(
    dish_name: str,
    ingredient: str = "Oats",
    conflict_type: ConflictType = ConflictType.ALLERGY,
    reason: str = "",
) -> Conflict:
    return Conflict(
        dish_name=dish_name,
        conflicting_ingredient=ingredient,
        conflict_type=conflict_type,
        reason=reason,
    )


class StubPlatform:
    """
    In-memory stand-in for PlatformClient.

    Set ``profile_error``, ``recipe_error`` or ``template_error`` to an
    exception instance to make the matching call raise it.
    """

    def __init__(self, profile: Optional[ClientProfile] = None, recipes: Optional[Dict[str, List[str]]] = None):
        self.profile = profile or make_profile()
        self.recipes = recipes or {}
        self.templates_response = {"data": {"data": []}}
        self.profile_error: Optional[Exception] = None
        self.recipe_error: Optional[Exception] = None
        self.template_error: Optional[Exception] = None
        self.profile_calls: List[str] = []
        self.recipe_calls: List[List[str]] = []

    def fetch_client_profile(self, user_id: str) -> ClientProfile:
        self.profile_calls.append(user_id)
        if self.profile_error is not None:
            raise self.profile_error
        return self.profile.model_copy(update={"user_id": user_id})

    def fetch_templates(self, limit: int = 50, search: str = "", page: int = 1):
        if self.template_error is not None:
            raise self.template_error
        return self.templates_response

    def batch_search_recipes(self, names: List[str], timeout: Optional[float] = None) -> List[EnrichedDish]:
        self.recipe_calls.append(list(names))
        if self.recipe_error is not None:
            raise self.recipe_error
        return [
            EnrichedDish(name=name, ingredients=self.recipes[name.lower()])
            for name in names
            if name.lower() in self.recipes
        ]


class StubClassifier:
    """Returns preset conflicts and records every (profile, dishes) call"""

    def __init__(self, conflicts: Optional[List[Conflict]] = None):
        self.conflicts = conflicts or []
        self.error: Optional[Exception] = None
        self.calls: List[SimpleNamespace] = []

    def classify(self, profile: ClientProfile, dishes) -> AuditResult:
        self.calls.append(SimpleNamespace(profile=profile, dishes=list(dishes)))
        if self.error is not None:
            raise self.error
        return AuditResult(conflicts=list(self.conflicts))


@pytest.fixture
def stub_api():
    """
    Route the app's dependencies to stubs for one test.

    Yields:
        SimpleNamespace with ``platform``, ``classifier`` and ``cache``
    """
    stubs = SimpleNamespace(
        platform=StubPlatform(recipes={"masala oats": ["oats", "onion", "spices"]}),
        classifier=StubClassifier(),
        cache=EnrichmentCache(),
    )
    app.dependency_overrides[get_platform_client] = lambda: stubs.platform
    app.dependency_overrides[get_classifier] = lambda: stubs.classifier
    app.dependency_overrides[get_enrichment_cache] = lambda: stubs.cache
    try:
        yield stubs
    finally:
        app.dependency_overrides.clear()
