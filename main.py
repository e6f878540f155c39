"""
DietAudit FastAPI Application
Main entry point wiring configuration, shared clients, middleware and routes
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager

from api.routes import audits, clients, dishes, health, templates
from adapters import OpenAIDietClassifier, PlatformClient
from services import EnrichmentCache
from app.config import settings

from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    diet_audit_exception_handler,
    general_exception_handler,
)
from app.exceptions import DietAuditError

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("dietaudit.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown.
    Closes the pooled upstream HTTP session on shutdown.
    """
    _logger.info(f"Starting DietAudit in {settings.environment.value} mode")
    if not settings.api_token:
        _logger.warning("API_TOKEN is not set; upstream calls will be unauthenticated")

    try:
        yield
    finally:
        _logger.info("Shutting down DietAudit")
        app.state.platform_client.close()
        _logger.info(f"Enrichment cache held {len(app.state.enrichment_cache)} dishes")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.api_title,
        version=settings.app_version,
        description=settings.api_description,
        lifespan=lifespan,
        debug=settings.debug,
        openapi_url=(
            f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
        ),
        docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
        redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
    )

    # Shared, process-lifetime collaborators
    app.state.platform_client = PlatformClient(settings)
    app.state.classifier = OpenAIDietClassifier(settings)
    app.state.enrichment_cache = EnrichmentCache()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(DietAuditError, diet_audit_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(audits.router, prefix=settings.api_prefix)
    app.include_router(clients.router, prefix=settings.api_prefix)
    app.include_router(templates.router, prefix=settings.api_prefix)
    app.include_router(dishes.router, prefix=settings.api_prefix)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
