"""
Identifier and search-term sanitization

Every table, field and alias name that reaches a query fragment goes through
validate_identifier() first. The check is fail-closed: a name that is not
entirely made of [A-Za-z0-9_] is rejected outright rather than cleaned up,
so a partially stripped guess can never address an unintended column.
"""

import re
from typing import Any, Optional

from heritage_catalog.utils.app_logger import get_logger

logger = get_logger(__name__)

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9_]+")
IDENTIFIER_FORBIDDEN = re.compile(r"[^A-Za-z0-9_]")

# Quotes, backticks and ASCII/C1 control characters.
FULL_TEXT_FORBIDDEN = re.compile(r"[\"'`\x00-\x1F\x7F-\x9F]")

LIKE_SPECIAL = re.compile(r"([\\%_])")

DEFAULT_IDENTIFIER_MAX_LENGTH = 64


def validate_identifier(name: Any, max_length: int = DEFAULT_IDENTIFIER_MAX_LENGTH) -> Optional[str]:
    """
    Validate a field or table name against the identifier charset.

    Returns the name unchanged when it only contains letters, digits and
    underscores; returns None otherwise (including empty, non-string or
    over-long names).
    """
    if not isinstance(name, str) or not name:
        return None

    if len(name) > max_length:
        logger.info("Identifier rejected: length %d exceeds %d", len(name), max_length)
        return None

    if IDENTIFIER_PATTERN.fullmatch(name) is None:
        stripped = IDENTIFIER_FORBIDDEN.sub("", name)
        logger.info(
            "Identifier rejected: %d forbidden character(s) in a %d-character name",
            len(name) - len(stripped),
            len(name),
        )
        return None

    return name


def clean_full_text_term(term: Any, max_length: int) -> Optional[str]:
    """
    Prepare a full-text search term.

    The term is truncated to `max_length` first, then stripped of quoting and
    control characters and surrounding whitespace. Returns None when nothing
    usable is left.
    """
    if not isinstance(term, str):
        return None
    cleaned = FULL_TEXT_FORBIDDEN.sub("", term[:max_length]).strip()
    return cleaned or None


def clean_search_term(term: Any, max_length: int) -> Optional[str]:
    """Trim and truncate a substring search term; None when empty."""
    if not isinstance(term, str):
        return None
    cleaned = term[:max_length].strip()
    return cleaned or None


def escape_like_pattern(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally (ESCAPE '\\')."""
    return LIKE_SPECIAL.sub(r"\\\1", term)
