"""Diet template routes"""

from fastapi import APIRouter, Depends, Query
from typing import List
import logging

from adapters import PlatformClient
from api.dependencies import get_platform_client
from app.exceptions import NotFoundError
from domain.schemas import DietTemplate, HtmlStats, MealSlot, TemplateSectionsRequest
from services import TemplateService
from services.template_service import html_stats, split_template_into_slots

router = APIRouter(prefix="/templates", tags=["Templates"])
logger = logging.getLogger("dietaudit.api.templates")


@router.get("", response_model=List[DietTemplate])
def list_templates(
    limit: int = Query(50, ge=1, le=1000),
    search: str = "",
    platform: PlatformClient = Depends(get_platform_client),
) -> List[DietTemplate]:
    """List diet templates with their meal content split into slots."""
    response = platform.fetch_templates(limit=limit, search=search)
    return TemplateService.to_templates(response, limit=limit, search=search)


@router.get("/{template_id}", response_model=DietTemplate)
def get_template(
    template_id: str,
    search: str = "",
    platform: PlatformClient = Depends(get_platform_client),
) -> DietTemplate:
    response = platform.fetch_templates(limit=1000, search=search)
    for template in TemplateService.to_templates(response, limit=1000, search=search):
        if template.id == template_id:
            return template
    raise NotFoundError(f"Template {template_id} not found", details={"template_id": template_id})


@router.post("/sections", response_model=List[MealSlot])
def split_sections(payload: TemplateSectionsRequest) -> List[MealSlot]:
    """Split a combined template body into meal slots by its headings."""
    return split_template_into_slots(payload.content_html)


@router.post("/stats", response_model=HtmlStats)
def template_stats(payload: TemplateSectionsRequest) -> HtmlStats:
    return html_stats(payload.content_html)
