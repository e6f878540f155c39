"""
Domain mappers package - Transform upstream payloads into domain schemas.
"""

from domain.mappers.client_mapper import ClientMapper

__all__ = ["ClientMapper"]
