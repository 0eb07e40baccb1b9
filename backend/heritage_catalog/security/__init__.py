"""
Security utilities for the heritage catalog
"""

from .identifier_sanitizer import (
    clean_full_text_term,
    clean_search_term,
    escape_like_pattern,
    validate_identifier,
)

__all__ = [
    "validate_identifier",
    "clean_full_text_term",
    "clean_search_term",
    "escape_like_pattern",
]
