"""Services package - Audit pipeline and business logic layer"""

from services.enrichment_service import EnrichmentCache, EnrichmentService
from services.template_service import TemplateService
from services.audit_service import AuditService

# Note: html_normalizer, dish_extractor, pattern_builder and highlight_injector
# are modules of pure functions, not classes

__all__ = [
    "EnrichmentCache",
    "EnrichmentService",
    "TemplateService",
    "AuditService",
]
