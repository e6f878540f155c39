"""
Domain layer - Value objects, schemas, mappers, and enums.
"""

from domain import enums, models, schemas

__all__ = ["enums", "models", "schemas"]
