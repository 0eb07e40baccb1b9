"""
Language utilities for the heritage catalog

The whitelist is a closed set of codes established once from configuration
and handed to every component that needs it. Nothing in this module raises
for an unknown code: it is coerced to the default language.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

from fastapi import Request

from heritage_catalog.config import I18nSettings, get_settings
from heritage_catalog.observability.metrics import record_language_coercion
from heritage_catalog.utils.app_logger import get_logger

logger = get_logger(__name__)

# Alternative codes clients send for the Latin-script Tamazight variant.
TAMAZIGHT_LATIN_PREFIXES = ("ber", "kab", "tzm", "zgh")


@dataclass(frozen=True)
class LanguageWhitelist:
    """
    Closed set of accepted language codes.

    `languages` is ordered by prevalence; `default` is used for bare strings
    and unknown codes, `secondary` is the last step of the extraction
    fallback chain.
    """

    languages: Tuple[str, ...]
    default: str
    secondary: str

    def __post_init__(self) -> None:
        if not self.languages:
            raise ValueError("A language whitelist needs at least one code")
        for code in (self.default, self.secondary):
            if code not in self.languages:
                raise ValueError(f"'{code}' is not part of the whitelist {self.languages}")

    @classmethod
    def from_settings(cls, i18n: Optional[I18nSettings] = None) -> "LanguageWhitelist":
        i18n = i18n or get_settings().i18n
        return cls(
            languages=tuple(i18n.supported_languages),
            default=i18n.default_language,
            secondary=i18n.secondary_language,
        )

    def __contains__(self, code: object) -> bool:
        return code in self.languages

    def __iter__(self) -> Iterator[str]:
        return iter(self.languages)

    def __len__(self) -> int:
        return len(self.languages)

    def match(self, code: Any) -> Optional[str]:
        """Return the whitelisted form of `code` (trimmed, lowercased) or None."""
        if not isinstance(code, str):
            return None
        candidate = code.strip().lower()
        return candidate if candidate in self.languages else None

    def validate(self, code: Any, *, source: str = "request") -> str:
        """
        Return `code` if it is whitelisted, otherwise the default language.

        Never raises.
        """
        matched = self.match(code)
        if matched is not None:
            return matched
        if code not in (None, ""):
            logger.debug("Language code outside whitelist coerced to '%s'", self.default)
            record_language_coercion(source)
        return self.default

    def fallback_chain(self, requested: Any) -> List[str]:
        """Ordered, de-duplicated [requested, default, secondary]."""
        chain: List[str] = []
        for candidate in (self.validate(requested, source="extract"), self.default, self.secondary):
            if candidate not in chain:
                chain.append(candidate)
        return chain


def get_language_whitelist() -> LanguageWhitelist:
    """Whitelist built from the current settings."""
    return LanguageWhitelist.from_settings()


def validate_language(code: Any, whitelist: Optional[LanguageWhitelist] = None) -> str:
    """
    Strict whitelist check: member codes pass (case-insensitive, trimmed),
    everything else becomes the default language.
    """
    return (whitelist or get_language_whitelist()).validate(code)


def _match_language(lang: Any, whitelist: LanguageWhitelist) -> Optional[str]:
    """
    Lenient negotiation for codes coming from headers or query strings.

    Supports:
    - exact members (fr, tz-tfng)
    - region codes (ar-DZ -> ar, fr_FR -> fr)
    - quality suffixes ("en;q=0.8")
    - Tamazight aliases (kab, ber, tzm, zgh -> tz-ltn; tmh, *tfng* -> tz-tfng)
    """
    if not isinstance(lang, str):
        return None

    raw = lang.strip().lower()
    if ";" in raw:
        raw = raw.split(";", 1)[0].strip()
    raw = raw.replace("_", "-")
    if not raw:
        return None

    if raw in whitelist:
        return raw

    candidates: List[str] = []
    if raw == "tmh" or "tfng" in raw:
        candidates.append("tz-tfng")
    if raw == "tz" or raw.startswith(TAMAZIGHT_LATIN_PREFIXES):
        candidates.append("tz-ltn")
    candidates.append(raw.split("-", 1)[0])

    for candidate in candidates:
        if candidate in whitelist:
            return candidate
    return None


def normalize_language(lang: Any, whitelist: Optional[LanguageWhitelist] = None) -> str:
    """Negotiate a client-supplied code down to a whitelisted one."""
    whitelist = whitelist or get_language_whitelist()
    matched = _match_language(lang, whitelist)
    if matched is not None:
        return matched
    if lang not in (None, ""):
        record_language_coercion("negotiation")
    return whitelist.default


def _parse_accept_language_header(value: str) -> List[str]:
    """
    Parse Accept-Language into raw language tags ordered by preference.

    Very small parser; we don't implement full RFC behavior, but we respect q=.
    """
    if not value:
        return []

    weighted: List[tuple[float, str]] = []
    for part in (p.strip() for p in value.split(",")):
        if not part:
            continue
        lang = part
        q = 1.0
        if ";" in part:
            lang, params = part.split(";", 1)
            lang = lang.strip()
            params = params.strip()
            if params.startswith("q="):
                try:
                    q = float(params[2:])
                except ValueError:
                    q = 1.0
        weighted.append((q, lang))

    # Sort by q desc, stable otherwise
    weighted.sort(key=lambda item: item[0], reverse=True)
    return [lang for _, lang in weighted]


def get_request_language(request: Request, whitelist: Optional[LanguageWhitelist] = None) -> str:
    """
    Resolve the language of a request.

    Priority: ?lang= query parameter, X-Language header, `language` cookie,
    Accept-Language header, default language.
    """
    whitelist = whitelist or get_language_whitelist()

    explicit = (
        request.query_params.get("lang")
        or request.headers.get("X-Language")
        or request.cookies.get("language")
    )
    if explicit:
        return normalize_language(explicit, whitelist)

    for candidate in _parse_accept_language_header(request.headers.get("Accept-Language", "")):
        matched = _match_language(candidate, whitelist)
        if matched is not None:
            return matched

    return whitelist.default
