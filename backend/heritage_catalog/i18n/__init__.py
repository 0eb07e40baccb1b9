"""
Multilingual content helpers (fr / ar / en / tz-ltn / tz-tfng).

Design goals:
- One canonical stored shape: a flat language map
- Request-scoped language via ContextVar (set by middleware)
- Partial edits never erase languages they did not mention
"""

from .codec import LocaleTextCodec
from .context import get_language, reset_language, set_language

__all__ = [
    "LocaleTextCodec",
    "get_language",
    "set_language",
    "reset_language",
]
