"""
Domain models package - immutable value objects used by the pipeline.
"""

from domain.models.dish import DishEntry
from domain.models.highlight import HighlightStyle, HighlightTrace

__all__ = [
    "DishEntry",
    "HighlightStyle",
    "HighlightTrace",
]
