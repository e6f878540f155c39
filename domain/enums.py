"""
Domain enums for DietAudit application.
Contains all enumeration types used across the domain models.
"""

import enum


class ConflictType(str, enum.Enum):
    """Why a dish was flagged; also selects the highlight style"""

    ALLERGY = "allergy"
    AVERSION = "aversion"
    DIET_TYPE_VIOLATION = "diet_type_violation"
    MEDICAL_CONFLICT = "medical_conflict"


class DietPreference(str, enum.Enum):
    """Client eating habit"""

    VEG = "Veg"
    NON_VEG = "NonVeg"
    EGGETARIAN = "Eggetarian"
    VEGAN = "Vegan"


class MealTime(str, enum.Enum):
    """Meal-time headings recognized inside a combined template body"""

    ON_RISING = "On Rising"
    BREAKFAST = "Breakfast"
    MID_MEAL = "Mid Meal"
    LUNCH = "Lunch"
    EVENING = "Evening"
    DINNER = "Dinner"
    POST_DINNER = "Post Dinner"


class AuditErrorCode(str, enum.Enum):
    """Failure classes reported by an audit"""

    API_ERROR = "API_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
