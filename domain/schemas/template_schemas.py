"""Schemas for diet templates and dish extraction requests"""

from pydantic import BaseModel, Field
from typing import List, Optional

from domain.schemas.audit_schemas import MealSlot


class DietTemplate(BaseModel):
    """Diet template with its meal content already split into slots"""

    id: str
    name: str
    status: str = "DRAFT"
    sections: List[MealSlot] = Field(default_factory=list)
    diet_note: Optional[str] = None


class TemplateSectionsRequest(BaseModel):
    content_html: str = Field(..., description="Full template body")


class DishExtractionRequest(BaseModel):
    meal_sections: List[MealSlot] = Field(default_factory=list)


class DishEntryResponse(BaseModel):
    meal_label: str
    raw_line: str
    short_name: str

    model_config = {"from_attributes": True}


class HtmlStats(BaseModel):
    length: int
    headings: int
    lists: int
    links: int
