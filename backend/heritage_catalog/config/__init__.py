"""
Unified configuration access point

    from heritage_catalog.config import get_settings

    whitelist_codes = get_settings().i18n.supported_languages
"""

from .settings import (
    ApplicationSettings,
    DatabaseSettings,
    Environment,
    I18nSettings,
    QuerySettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "ApplicationSettings",
    "DatabaseSettings",
    "Environment",
    "I18nSettings",
    "QuerySettings",
    "get_settings",
    "reload_settings",
]
