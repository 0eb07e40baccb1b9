"""
Query fragment builder for language-map columns.

Every field, table and alias name is passed through validate_identifier()
and every language code through the whitelist before a fragment is built.
Rejected input never raises: each method degrades to its safe default
and the degradation is logged and counted.

Safe defaults:
    build_search / build_multi_field_search -> []  (no filter)
    build_order       -> order by primary key
    build_exact_match -> Unsatisfiable             (matches nothing)
    build_projection  -> None                      (omit the column)
    build_full_text   -> None                      (no filter)

An invalid field name therefore WIDENS a listing instead of failing it.
Never rely on these fragments for access control.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from heritage_catalog.config import QuerySettings, get_settings
from heritage_catalog.observability.metrics import record_query_fallback
from heritage_catalog.security.identifier_sanitizer import (
    DEFAULT_IDENTIFIER_MAX_LENGTH,
    clean_full_text_term,
    clean_search_term,
    escape_like_pattern,
    validate_identifier,
)
from heritage_catalog.utils.app_logger import get_query_logger
from heritage_catalog.utils.language import LanguageWhitelist, get_language_whitelist

from .fragments import (
    AnyOf,
    ColumnRef,
    Condition,
    ExactMatch,
    FullTextMatch,
    LocalizedValue,
    OrderKey,
    Projection,
    SortDirection,
    SubstringMatch,
    Unsatisfiable,
)

logger = get_query_logger("query.builder")


class QueryFragmentBuilder:
    """Builds search, order, match and projection fragments for one whitelist."""

    def __init__(
        self,
        whitelist: Optional[LanguageWhitelist] = None,
        query_settings: Optional[QuerySettings] = None,
    ):
        self.whitelist = whitelist or get_language_whitelist()
        self.settings = query_settings or get_settings().query

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _fallback(self, operation: str, reason: str) -> None:
        level = logging.INFO if reason.startswith("invalid") else logging.DEBUG
        logger.log(level, "%s degraded to its safe default (%s)", operation, reason)
        record_query_fallback(operation, reason)

    def _identifier(self, name: Any) -> Optional[str]:
        # Fragments re-check names against DEFAULT_IDENTIFIER_MAX_LENGTH.
        max_length = min(self.settings.identifier_max_length, DEFAULT_IDENTIFIER_MAX_LENGTH)
        return validate_identifier(name, max_length)

    def _column(self, field: Any, table: Any) -> Optional[ColumnRef]:
        """Sanitized column reference, None if field or a given table is rejected."""
        clean_field = self._identifier(field)
        if clean_field is None:
            return None
        if table is None:
            return ColumnRef(clean_field)
        clean_table = self._identifier(table)
        if clean_table is None:
            return None
        return ColumnRef(clean_field, clean_table)

    def _languages(self, languages: Optional[Iterable[Any]]) -> List[str]:
        if languages is None:
            return list(self.whitelist)
        if isinstance(languages, str):
            languages = [languages]
        selected: List[str] = []
        for code in languages:
            matched = self.whitelist.match(code)
            if matched is not None and matched not in selected:
                selected.append(matched)
        return selected

    # ------------------------------------------------------------------
    # search
    # ------------------------------------------------------------------

    def build_search(
        self,
        field: Any,
        search_term: Any,
        *,
        table: Any = None,
        languages: Optional[Iterable[Any]] = None,
    ) -> List[SubstringMatch]:
        """
        One case-insensitive substring condition per language, to be OR-ed.

        `languages` defaults to the whole whitelist; codes outside it are
        dropped. An empty list means "apply no filter", never "match nothing".
        """
        term = clean_search_term(search_term, self.settings.search_term_max_length)
        if term is None:
            self._fallback("search", "empty_term")
            return []

        column = self._column(field, table)
        if column is None:
            self._fallback("search", "invalid_identifier")
            return []

        selected = self._languages(languages)
        if not selected:
            self._fallback("search", "no_languages")
            return []

        pattern = f"%{escape_like_pattern(term)}%"
        return [SubstringMatch(LocalizedValue(column, code), pattern) for code in selected]

    def build_multi_field_search(
        self,
        fields: Iterable[Any],
        search_term: Any,
        *,
        table: Any = None,
        languages: Optional[Iterable[Any]] = None,
    ) -> List[SubstringMatch]:
        """Per-field search conditions flattened into one OR group."""
        conditions: List[SubstringMatch] = []
        for field in fields:
            conditions.extend(self.build_search(field, search_term, table=table, languages=languages))
        return conditions

    # ------------------------------------------------------------------
    # ordering
    # ------------------------------------------------------------------

    def build_order(
        self,
        field: Any,
        language: Any,
        direction: Any = SortDirection.ASC,
        *,
        table: Any = None,
        primary_key: Optional[str] = None,
    ) -> OrderKey:
        """
        Ordering key on exactly one language entry.

        There is no fallback chain here: rows whose entry for `language` is
        empty sort as empty, even when another language is filled. A rejected
        field or table orders by the primary key instead; an unknown
        direction means ascending.
        """
        order = SortDirection.parse(direction)
        if order is None:
            logger.debug("Unknown sort direction replaced by ASC")
            order = SortDirection.ASC

        column = self._column(field, table)
        if column is None:
            self._fallback("order", "invalid_identifier")
            return OrderKey(self._primary_key(table, primary_key), order)

        code = self.whitelist.validate(language, source="order")
        return OrderKey(LocalizedValue(column, code), order)

    def _primary_key(self, table: Any, primary_key: Optional[str]) -> ColumnRef:
        key = self._identifier(primary_key) or self.settings.default_primary_key
        clean_table = self._identifier(table) if table is not None else None
        return ColumnRef(key, clean_table)

    # ------------------------------------------------------------------
    # conditions and projections
    # ------------------------------------------------------------------

    def build_exact_match(self, field: Any, language: Any, value: Any, *, table: Any = None) -> Condition:
        """Equality on one language entry; a rejected field matches nothing."""
        column = self._column(field, table)
        if column is None:
            self._fallback("exact_match", "invalid_identifier")
            return Unsatisfiable("invalid_identifier")
        if value is None:
            self._fallback("exact_match", "null_value")
            return Unsatisfiable("null_value")

        code = self.whitelist.validate(language, source="exact_match")
        return ExactMatch(LocalizedValue(column, code), str(value))

    def build_projection(
        self,
        field: Any,
        language: Any,
        alias: Any = None,
        *,
        table: Any = None,
    ) -> Optional[Projection]:
        """
        Named expression extracting one language entry, or None when the
        column must be omitted. The alias defaults to `<field>_<language>`.
        """
        column = self._column(field, table)
        if column is None:
            self._fallback("projection", "invalid_identifier")
            return None

        code = self.whitelist.validate(language, source="projection")
        if alias is None:
            alias = f"{column.field}_{code}".replace("-", "_")
        clean_alias = self._identifier(alias)
        if clean_alias is None:
            self._fallback("projection", "invalid_alias")
            return None

        return Projection(LocalizedValue(column, code), clean_alias)

    def build_full_text(self, field: Any, search_term: Any, *, table: Any = None) -> Optional[FullTextMatch]:
        """
        Full-text condition over a whole language-map column.

        The column needs a matching full-text index for this to be fast.
        """
        term = clean_full_text_term(search_term, self.settings.full_text_max_length)
        if term is None:
            self._fallback("full_text", "empty_term")
            return None

        column = self._column(field, table)
        if column is None:
            self._fallback("full_text", "invalid_identifier")
            return None

        config = self._identifier(self.settings.full_text_config)
        if config is None:
            self._fallback("full_text", "invalid_config")
            return None

        return FullTextMatch(column, term, config)

    @staticmethod
    def any_of(conditions: Iterable[Condition]) -> Optional[AnyOf]:
        """OR group of `conditions`, None when there are none."""
        collected = tuple(conditions)
        return AnyOf(collected) if collected else None
