from __future__ import annotations

from contextvars import ContextVar, Token
from typing import Optional

from heritage_catalog.utils.language import LanguageWhitelist, normalize_language

_LANGUAGE: ContextVar[Optional[str]] = ContextVar("catalog_language", default=None)


def set_language(lang: Optional[str], whitelist: Optional[LanguageWhitelist] = None) -> Token:
    return _LANGUAGE.set(normalize_language(lang, whitelist))


def reset_language(token: Token) -> None:
    _LANGUAGE.reset(token)


def get_language(whitelist: Optional[LanguageWhitelist] = None) -> str:
    """Language of the current request, or the default outside a request."""
    lang = _LANGUAGE.get()
    if lang is None:
        return normalize_language(None, whitelist)
    return lang
