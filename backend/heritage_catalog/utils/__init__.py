"""
Utility functions for the heritage catalog
"""

from .language import (
    LanguageWhitelist,
    get_language_whitelist,
    get_request_language,
    normalize_language,
    validate_language,
)

__all__ = [
    "LanguageWhitelist",
    "get_language_whitelist",
    "get_request_language",
    "normalize_language",
    "validate_language",
]
