"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    DietAuditError,
    ServiceValidationError,
    UpstreamAPIError,
    NotFoundError,
)

__all__ = [
    "settings",
    "DietAuditError",
    "ServiceValidationError",
    "UpstreamAPIError",
    "NotFoundError",
]
