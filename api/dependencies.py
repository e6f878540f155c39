"""
API dependencies for dependency injection
"""

from fastapi import Depends, Request

from adapters import DietClassifier, PlatformClient
from app.config import settings
from services import AuditService, EnrichmentCache, EnrichmentService


def get_platform_client(request: Request) -> PlatformClient:
    """Upstream HTTP client owned by the application (see main.create_app)."""
    return request.app.state.platform_client


def get_classifier(request: Request) -> DietClassifier:
    return request.app.state.classifier


def get_enrichment_cache(request: Request) -> EnrichmentCache:
    """Process-lifetime ingredient cache shared by every audit."""
    return request.app.state.enrichment_cache


def get_enrichment_service(
    platform: PlatformClient = Depends(get_platform_client),
    cache: EnrichmentCache = Depends(get_enrichment_cache),
) -> EnrichmentService:
    return EnrichmentService(platform, cache, timeout=settings.enrichment_timeout_sec)


def get_audit_service(
    platform: PlatformClient = Depends(get_platform_client),
    classifier: DietClassifier = Depends(get_classifier),
    enrichment: EnrichmentService = Depends(get_enrichment_service),
) -> AuditService:
    """
    Audit service dependency for FastAPI routes.

    Usage:
        @router.post("/audits")
        def audit(service: AuditService = Depends(get_audit_service)):
            ...
    """
    return AuditService(platform, classifier, enrichment)
