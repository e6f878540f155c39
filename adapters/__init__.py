"""
Adapters package - External service connections.
HTTP client for the nutrition platform and the chat-model classifier.
"""

from adapters.platform_client import PlatformClient
from adapters.diet_classifier import DietClassifier, OpenAIDietClassifier, parse_audit_result

__all__ = [
    "PlatformClient",
    "DietClassifier",
    "OpenAIDietClassifier",
    "parse_audit_result",
]
