"""Health check and utility routes"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_enrichment_cache
from api.responses import HealthResponse
from app.config import settings
from services import EnrichmentCache

router = APIRouter(tags=["Health"])
logger = logging.getLogger("dietaudit.api.health")


@router.get("/health-check", response_model=HealthResponse)
def health_check():
    """Basic health check endpoint"""
    return HealthResponse(status="ok", service=settings.app_name, version=settings.app_version)


@router.get("/enrichment/cache-status")
def enrichment_cache_status(cache: EnrichmentCache = Depends(get_enrichment_cache)):
    """Number of dish names with cached ingredient lists."""
    return {"cached_dishes": len(cache)}
