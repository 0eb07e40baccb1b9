"""
Model definitions for the heritage catalog
"""

from .i18n import LocalizedText, RawLocalizedText

__all__ = [
    "LocalizedText",
    "RawLocalizedText",
]
