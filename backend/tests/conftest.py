from __future__ import annotations

import pytest

from heritage_catalog.config import I18nSettings, QuerySettings
from heritage_catalog.i18n.codec import LocaleTextCodec
from heritage_catalog.query.builder import QueryFragmentBuilder
from heritage_catalog.utils.language import LanguageWhitelist


@pytest.fixture
def whitelist() -> LanguageWhitelist:
    return LanguageWhitelist(
        languages=("fr", "ar", "en", "tz-ltn", "tz-tfng"),
        default="fr",
        secondary="ar",
    )


@pytest.fixture
def codec(whitelist: LanguageWhitelist) -> LocaleTextCodec:
    return LocaleTextCodec(whitelist)


@pytest.fixture
def query_settings() -> QuerySettings:
    return QuerySettings()


@pytest.fixture
def builder(whitelist: LanguageWhitelist, query_settings: QuerySettings) -> QueryFragmentBuilder:
    return QueryFragmentBuilder(whitelist, query_settings)


@pytest.fixture
def i18n_settings() -> I18nSettings:
    return I18nSettings()
