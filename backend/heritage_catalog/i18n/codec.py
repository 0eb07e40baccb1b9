"""
Per-language text codec.

Every user-facing text field is stored as a flat language map
(`{"fr": "...", "ar": "...", ...}`). This module turns raw client input into
that map, reads one language out of it, and merges partial edits without
touching languages the edit did not mention.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Mapping, Optional

from heritage_catalog.exceptions import SchemaContractError
from heritage_catalog.models.i18n import LocalizedText, RawLocalizedText
from heritage_catalog.utils.app_logger import get_logger
from heritage_catalog.utils.language import LanguageWhitelist, get_language_whitelist

logger = get_logger(__name__)


class LocaleTextCodec:
    """Normalize, extract and merge LocalizedText values for one whitelist."""

    def __init__(self, whitelist: Optional[LanguageWhitelist] = None):
        self.whitelist = whitelist or get_language_whitelist()

    # ------------------------------------------------------------------
    # normalize
    # ------------------------------------------------------------------

    def normalize(self, raw: RawLocalizedText) -> LocalizedText:
        """
        Canonical map for raw input.

        - plain string -> {default: string}
        - string holding a JSON object -> treated as that object
        - mapping -> whitelisted keys only, values as strings
        - None -> {default: ""}

        The default language key is always present. Unknown keys are dropped
        silently.

        Raises:
            SchemaContractError: raw is none of the above (e.g. a number or a
                list), which means an untyped value reached the codec.
        """
        mapping = self._as_mapping(raw)
        if mapping is None:
            return {self.whitelist.default: raw}
        return self._complete(self._filter(mapping))

    def _as_mapping(self, raw: RawLocalizedText) -> Optional[Mapping[str, Any]]:
        """Mapping view of raw input, or None when raw is a plain string."""
        if raw is None:
            return {}
        if isinstance(raw, Mapping):
            return raw
        if isinstance(raw, str):
            stripped = raw.strip()
            if stripped.startswith("{") and stripped.endswith("}"):
                try:
                    parsed = json.loads(stripped)
                except ValueError:
                    return None
                if isinstance(parsed, dict):
                    return parsed
            return None
        raise SchemaContractError(
            f"Localized text must be a string or a language map, got {type(raw).__name__}",
            details={"type": type(raw).__name__},
        )

    def _filter(self, mapping: Mapping[str, Any]) -> LocalizedText:
        """Whitelisted keys of `mapping` with string values, in whitelist order."""
        found: Dict[str, str] = {}
        for key, value in mapping.items():
            code = self.whitelist.match(key)
            if code is None:
                continue
            if value is None:
                found[code] = ""
            elif isinstance(value, str):
                found[code] = value
            elif isinstance(value, (int, float)) and not isinstance(value, bool):
                found[code] = str(value)
            else:
                logger.debug("Dropped non-scalar value for language '%s'", code)
        return {code: found[code] for code in self.whitelist if code in found}

    def _complete(self, text: LocalizedText) -> LocalizedText:
        if self.whitelist.default not in text:
            text = {self.whitelist.default: "", **text}
        return {code: text[code] for code in self.whitelist if code in text}

    # ------------------------------------------------------------------
    # extract
    # ------------------------------------------------------------------

    def extract(self, text: Any, requested_language: Any) -> str:
        """
        Read one language with the fallback chain
        [requested, default, secondary]; first non-empty value wins, "" if none.

        An unsupported requested language behaves like the default language.
        """
        if not isinstance(text, Mapping):
            text = self.normalize(text)
        for code in self.whitelist.fallback_chain(requested_language):
            value = text.get(code)
            if isinstance(value, str) and value:
                return value
        return ""

    # ------------------------------------------------------------------
    # merge
    # ------------------------------------------------------------------

    def merge(self, existing: RawLocalizedText, incoming: RawLocalizedText) -> LocalizedText:
        """
        Merge a partial edit into a stored value.

        Languages present in `incoming` take its value, even an empty string
        (an explicit clear). Languages only in `existing` are preserved. The
        result is re-normalized against the whitelist.
        """
        base = self.normalize(existing)
        incoming_map = self._as_mapping(incoming)
        if incoming_map is None:
            updates = {self.whitelist.default: incoming}
        else:
            updates = self._filter(incoming_map)
        return self._complete({**base, **updates})

    # ------------------------------------------------------------------
    # translation helpers
    # ------------------------------------------------------------------

    def is_localized(self, value: Any) -> bool:
        """True for a mapping with at least one whitelisted key."""
        if not isinstance(value, Mapping):
            return False
        return any(self.whitelist.match(key) is not None for key in value)

    def has_translation(self, text: Any, language: str) -> bool:
        if not isinstance(text, Mapping):
            return False
        value = text.get(language)
        return isinstance(value, str) and value.strip() != ""

    def translation_status(self, text: Any) -> Dict[str, Any]:
        """Completion of a value across the whitelist."""
        complete = [code for code in self.whitelist if self.has_translation(text, code)]
        missing = [code for code in self.whitelist if code not in complete]
        return {
            "percentage": round(len(complete) * 100 / len(self.whitelist)),
            "complete": complete,
            "missing": missing,
        }

    def translate_deep(self, data: Any, language: Any, fields: Optional[Iterable[str]] = None) -> Any:
        """
        Replace LocalizedText values in nested dicts/lists by their extracted
        string. With `fields`, only keys in that set are translated.
        """
        only = set(fields) if fields is not None else None
        return self._translate(data, language, only)

    def _translate(self, data: Any, language: Any, only: Optional[set]) -> Any:
        if isinstance(data, list):
            return [self._translate(item, language, only) for item in data]
        if not isinstance(data, Mapping):
            return data

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if self.is_localized(value):
                if only is None or key in only:
                    result[key] = self.extract(value, language)
                else:
                    result[key] = value
            elif isinstance(value, (Mapping, list)):
                result[key] = self._translate(value, language, only)
            else:
                result[key] = value
        return result

