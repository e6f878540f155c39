"""API routes package"""

from . import audits, clients, dishes, health, templates

__all__ = ["audits", "clients", "dishes", "health", "templates"]
