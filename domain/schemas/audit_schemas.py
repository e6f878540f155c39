"""Schemas for diet audits: requests, classifier results and responses"""

from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional

from domain.enums import AuditErrorCode, ConflictType
from domain.schemas.client_schemas import ClientProfileOverride


class MealSlot(BaseModel):
    """One labeled section of a diet plan with its original markup"""

    title: str = Field(..., description="Display label, e.g. 'Breakfast'")
    html_content: str = Field(
        "",
        validation_alias=AliasChoices("html_content", "htmlContent", "raw_html"),
        description="Original markup for the slot",
    )

    model_config = {"from_attributes": True, "populate_by_name": True}


class Conflict(BaseModel):
    """One dish flagged by the classifier"""

    dish_name: str = Field(
        ..., description="Dish name as it appears in the template (text before first comma)"
    )
    conflicting_ingredient: str = Field(
        ..., description="The specific ingredient causing the conflict"
    )
    conflict_type: ConflictType
    reason: str = Field("", description="Brief explanation for the conflict")


class AuditResult(BaseModel):
    """Classifier output: conflicting dishes only, empty when the plan is safe"""

    conflicts: List[Conflict] = Field(default_factory=list)


class EnrichedDish(BaseModel):
    """Dish name plus whatever ingredients the recipe lookup returned"""

    name: str
    ingredients: List[str] = Field(default_factory=list)


class AuditRequest(BaseModel):
    """Audit a set of meal slots for one client"""

    user_id: str = Field(..., description="Client user id on the nutrition platform")
    template_id: Optional[str] = None
    template_name: Optional[str] = None
    meal_sections: List[MealSlot] = Field(default_factory=list)
    client_override: Optional[ClientProfileOverride] = None


class UpdatedSection(BaseModel):
    """A slot's markup after highlight injection"""

    title: str
    replaced_content: str


class HighlightRecord(BaseModel):
    """Trace of one injected highlight"""

    slot: str
    dish_name: str
    matched_text: str
    category: ConflictType
    used_fallback: bool = False

    model_config = {"from_attributes": True}


class AuditErrorDetail(BaseModel):
    code: AuditErrorCode
    message: str
    details: Optional[str] = None


class AuditResponse(BaseModel):
    """Structured success/failure result of one audit"""

    success: bool
    conflict_count: int = 0
    audit_result: Optional[AuditResult] = None
    updated_sections: List[UpdatedSection] = Field(default_factory=list)
    highlights: List[HighlightRecord] = Field(default_factory=list)
    error: Optional[AuditErrorDetail] = None

    @classmethod
    def empty(cls) -> "AuditResponse":
        return cls(success=True, conflict_count=0, audit_result=AuditResult())

    @classmethod
    def failure(
        cls, code: AuditErrorCode, message: str, details: Optional[str] = None
    ) -> "AuditResponse":
        return cls(
            success=False,
            error=AuditErrorDetail(code=code, message=message, details=details),
        )
