"""
Unit tests for the language whitelist and request language negotiation
"""

import pytest
from unittest.mock import Mock

from heritage_catalog.config import I18nSettings
from heritage_catalog.observability.metrics import language_coercion_count
from heritage_catalog.utils.language import (
    LanguageWhitelist,
    get_request_language,
    normalize_language,
    validate_language,
    _parse_accept_language_header,
)


def _request(query=None, headers=None, cookies=None):
    request = Mock()
    request.query_params = query or {}
    request.headers = headers or {}
    request.cookies = cookies or {}
    return request


class TestLanguageWhitelist:
    """Closed set of language codes"""

    def test_from_settings_defaults(self):
        """Default configuration yields the five catalog languages"""
        whitelist = LanguageWhitelist.from_settings(I18nSettings())

        assert whitelist.languages == ("fr", "ar", "en", "tz-ltn", "tz-tfng")
        assert whitelist.default == "fr"
        assert whitelist.secondary == "ar"
        assert len(whitelist) == 5

    def test_default_must_be_member(self):
        with pytest.raises(ValueError):
            LanguageWhitelist(languages=("fr", "ar"), default="en", secondary="ar")

    def test_empty_whitelist_rejected(self):
        with pytest.raises(ValueError):
            LanguageWhitelist(languages=(), default="fr", secondary="fr")

    def test_membership_and_iteration(self, whitelist):
        assert "tz-tfng" in whitelist
        assert "de" not in whitelist
        assert list(whitelist)[0] == "fr"

    def test_match_trims_and_lowercases(self, whitelist):
        assert whitelist.match("  AR ") == "ar"
        assert whitelist.match("Tz-Ltn") == "tz-ltn"
        assert whitelist.match("de") is None
        assert whitelist.match(None) is None
        assert whitelist.match(42) is None

    def test_fallback_chain_is_deduplicated(self, whitelist):
        assert whitelist.fallback_chain("en") == ["en", "fr", "ar"]
        assert whitelist.fallback_chain("fr") == ["fr", "ar"]
        assert whitelist.fallback_chain("ar") == ["ar", "fr"]

    def test_fallback_chain_unknown_language_starts_at_default(self, whitelist):
        assert whitelist.fallback_chain("xx") == ["fr", "ar"]


class TestValidateLanguage:
    """Strict whitelist check, never raises"""

    @pytest.mark.parametrize("code,expected", [
        ("fr", "fr"),
        ("AR", "ar"),
        (" en ", "en"),
        ("tz-tfng", "tz-tfng"),
        ("de", "fr"),
        ("", "fr"),
        (None, "fr"),
        ("fr'; DROP TABLE oeuvre; --", "fr"),
        (123, "fr"),
    ])
    def test_validate_language(self, whitelist, code, expected):
        assert validate_language(code, whitelist) == expected

    def test_strict_check_does_not_negotiate_regions(self, whitelist):
        """Region codes are only accepted by normalize_language"""
        assert validate_language("ar-DZ", whitelist) == "fr"

    def test_coercion_is_counted(self, whitelist):
        before = language_coercion_count("request")
        validate_language("klingon", whitelist)
        assert language_coercion_count("request") == before + 1

    def test_missing_code_is_not_counted(self, whitelist):
        before = language_coercion_count("request")
        validate_language(None, whitelist)
        assert language_coercion_count("request") == before


class TestNormalizeLanguage:
    """Lenient negotiation for client-supplied codes"""

    @pytest.mark.parametrize("code,expected", [
        ("ar-DZ", "ar"),
        ("fr_FR", "fr"),
        ("en-US", "en"),
        ("en;q=0.8", "en"),
        ("kab", "tz-ltn"),
        ("ber", "tz-ltn"),
        ("tzm", "tz-ltn"),
        ("zgh", "tz-ltn"),
        ("tz", "tz-ltn"),
        ("tmh", "tz-tfng"),
        ("zgh-Tfng", "tz-tfng"),
        ("TZ-TFNG", "tz-tfng"),
        ("de-DE", "fr"),
        (None, "fr"),
    ])
    def test_normalize_language(self, whitelist, code, expected):
        assert normalize_language(code, whitelist) == expected


class TestAcceptLanguage:
    """Accept-Language parsing"""

    def test_parse_orders_by_quality(self):
        assert _parse_accept_language_header("en;q=0.5, ar-DZ, fr;q=0.8") == ["ar-DZ", "fr", "en"]

    def test_parse_empty_header(self):
        assert _parse_accept_language_header("") == []

    def test_parse_invalid_quality_defaults_to_one(self):
        assert _parse_accept_language_header("en;q=abc,fr;q=0.9") == ["en", "fr"]


class TestGetRequestLanguage:
    """Request language resolution order"""

    def test_query_parameter_wins(self, whitelist):
        request = _request(
            query={"lang": "ar"},
            headers={"X-Language": "en", "Accept-Language": "tz-tfng"},
            cookies={"language": "en"},
        )
        assert get_request_language(request, whitelist) == "ar"

    def test_header_before_cookie(self, whitelist):
        request = _request(headers={"X-Language": "en"}, cookies={"language": "ar"})
        assert get_request_language(request, whitelist) == "en"

    def test_cookie_before_accept_language(self, whitelist):
        request = _request(headers={"Accept-Language": "en"}, cookies={"language": "ar"})
        assert get_request_language(request, whitelist) == "ar"

    def test_accept_language_skips_unsupported(self, whitelist):
        request = _request(headers={"Accept-Language": "de-DE,de;q=0.9,ar;q=0.8"})
        assert get_request_language(request, whitelist) == "ar"

    def test_no_hint_returns_default(self, whitelist):
        assert get_request_language(_request(), whitelist) == "fr"

    def test_unknown_explicit_code_returns_default(self, whitelist):
        request = _request(query={"lang": "xx"}, headers={"Accept-Language": "ar"})
        assert get_request_language(request, whitelist) == "fr"
