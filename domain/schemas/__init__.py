"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.client_schemas import ClientProfile, ClientProfileOverride
from domain.schemas.audit_schemas import (
    MealSlot,
    Conflict,
    AuditResult,
    EnrichedDish,
    AuditRequest,
    UpdatedSection,
    HighlightRecord,
    AuditErrorDetail,
    AuditResponse,
)
from domain.schemas.template_schemas import (
    DietTemplate,
    TemplateSectionsRequest,
    DishExtractionRequest,
    DishEntryResponse,
    HtmlStats,
)

__all__ = [
    "ClientProfile",
    "ClientProfileOverride",
    "MealSlot",
    "Conflict",
    "AuditResult",
    "EnrichedDish",
    "AuditRequest",
    "UpdatedSection",
    "HighlightRecord",
    "AuditErrorDetail",
    "AuditResponse",
    "DietTemplate",
    "TemplateSectionsRequest",
    "DishExtractionRequest",
    "DishEntryResponse",
    "HtmlStats",
]
