"""
Catalog content store (Postgres).

Reads build their WHERE / ORDER BY / select list from query fragments;
writes go through UpdatePayload so that partial edits merge into the
stored language maps. Language-map columns are JSONB.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence

import asyncpg

from heritage_catalog.config import DatabaseSettings, get_settings
from heritage_catalog.exceptions import ContentValidationError, DatabaseError, EntityNotFoundError
from heritage_catalog.i18n.codec import LocaleTextCodec
from heritage_catalog.i18n.context import get_language
from heritage_catalog.models.content_schemas import get_schema
from heritage_catalog.models.update_payload import FieldSchema, UpdatePayload
from heritage_catalog.observability.metrics import record_query_fallback
from heritage_catalog.query.builder import QueryFragmentBuilder
from heritage_catalog.query.fragments import ColumnRef, OrderKey, SortDirection
from heritage_catalog.query.renderer import PostgresRenderer, quote_identifier
from heritage_catalog.utils.app_logger import get_logger
from heritage_catalog.utils.language import LanguageWhitelist, get_language_whitelist

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


class ContentStore:
    def __init__(
        self,
        *,
        pool: Optional[asyncpg.Pool] = None,
        database: Optional[DatabaseSettings] = None,
        whitelist: Optional[LanguageWhitelist] = None,
        builder: Optional[QueryFragmentBuilder] = None,
    ):
        self._pool = pool
        self._database = database or get_settings().database
        self.whitelist = whitelist or get_language_whitelist()
        self.codec = LocaleTextCodec(self.whitelist)
        self.builder = builder or QueryFragmentBuilder(self.whitelist)

    async def connect(self) -> None:
        if self._pool:
            return
        self._pool = await asyncpg.create_pool(
            self._database.postgres_url,
            min_size=self._database.pool_min_size,
            max_size=self._database.pool_max_size,
            command_timeout=self._database.command_timeout,
        )

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None

    def _require_pool(self) -> asyncpg.Pool:
        if not self._pool:
            raise DatabaseError("ContentStore not connected")
        return self._pool

    # ------------------------------------------------------------------
    # row helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _dump(value: Any) -> str:
        return json.dumps(value, ensure_ascii=False)

    def _row_to_dict(self, schema: FieldSchema, row: Mapping[str, Any]) -> Dict[str, Any]:
        data = dict(row)
        for name in schema.multilingual_fields:
            value = data.get(name)
            if isinstance(value, str):
                data[name] = json.loads(value)
        return data

    def _placeholder(self, schema: FieldSchema, column: str, index: int) -> str:
        if column in schema.multilingual_fields:
            return f"${index}::jsonb"
        return f"${index}"

    def _value(self, schema: FieldSchema, column: str, value: Any) -> Any:
        if column in schema.multilingual_fields or isinstance(value, (list, dict)):
            return self._dump(value)
        return value

    def _localized_field(self, schema: FieldSchema, name: Any, operation: str) -> Optional[str]:
        """`name` if it is a language-map column of `schema`, None otherwise."""
        if name in schema.multilingual_fields:
            return name
        logger.info("%s on '%s' ignored: not a multilingual field", operation, schema.name)
        record_query_fallback(operation, "invalid_field")
        return None

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    async def list_entities(
        self,
        content_type: str,
        *,
        language: Optional[str] = None,
        search: Optional[str] = None,
        search_fields: Optional[Sequence[str]] = None,
        full_text: Optional[str] = None,
        full_text_field: Optional[str] = None,
        sort_field: Optional[str] = None,
        direction: Any = SortDirection.ASC,
        projections: Sequence[str] = (),
        limit: int = 20,
        offset: int = 0,
        translate: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        List rows of one content type.

        `search` is matched in every language of `search_fields` (default:
        all multilingual fields). `projections` adds `<field>_<lang>`
        columns. With `translate`, language maps in the result are replaced
        by the text for `language` (with fallback).

        Field names that are not multilingual columns of the content type are
        dropped from search and projection; such a sort field orders by the
        primary key.
        """
        schema = get_schema(content_type)
        lang = self.whitelist.validate(language) if language is not None else get_language(self.whitelist)
        table = schema.table

        renderer = PostgresRenderer()
        select_list = [f"{quote_identifier(table)}.*"]
        for name in projections:
            if self._localized_field(schema, name, "projection") is None:
                continue
            projection = self.builder.build_projection(name, lang, table=table)
            if projection is not None:
                select_list.append(renderer.projection(projection))

        groups: List[Any] = []
        if search is not None:
            if search_fields is None:
                fields = list(schema.multilingual_fields)
            else:
                fields = [name for name in search_fields if self._localized_field(schema, name, "search")]
            groups.append(self.builder.build_multi_field_search(fields, search, table=table))
        if full_text is not None:
            if full_text_field is None:
                field = schema.multilingual_fields[0] if schema.multilingual_fields else None
            else:
                field = self._localized_field(schema, full_text_field, "full_text")
            if field is not None:
                groups.append(self.builder.build_full_text(field, full_text, table=table))
        where = renderer.where(groups)

        if sort_field and self._localized_field(schema, sort_field, "order"):
            order = self.builder.build_order(sort_field, lang, direction, table=table, primary_key=schema.primary_key)
        else:
            order = OrderKey(ColumnRef(schema.primary_key, table), SortDirection.parse(direction) or SortDirection.ASC)
        order_by = renderer.order_by([order])

        page_size = min(max(int(limit), 1), MAX_PAGE_SIZE)
        limit_ref = renderer.params.add(page_size)
        offset_ref = renderer.params.add(max(int(offset), 0))

        sql = " ".join(
            part
            for part in (
                f"SELECT {', '.join(select_list)} FROM {quote_identifier(table)}",
                where,
                order_by,
                f"LIMIT {limit_ref} OFFSET {offset_ref}",
            )
            if part
        )

        pool = self._require_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(sql, *renderer.params.values)

        items = [self._row_to_dict(schema, row) for row in rows]
        if translate:
            items = [self.codec.translate_deep(item, lang, schema.multilingual_fields) for item in items]
        return items

    async def get_entity(
        self,
        content_type: str,
        entity_id: Any,
        *,
        language: Optional[str] = None,
        translate: bool = False,
    ) -> Optional[Dict[str, Any]]:
        schema = get_schema(content_type)
        pool = self._require_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT * FROM {quote_identifier(schema.table)} WHERE {quote_identifier(schema.primary_key)} = $1",
                entity_id,
            )
        if row is None:
            return None

        item = self._row_to_dict(schema, row)
        if translate:
            lang = self.whitelist.validate(language) if language is not None else get_language(self.whitelist)
            item = self.codec.translate_deep(item, lang, schema.multilingual_fields)
        return item

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------

    async def update_entity(self, content_type: str, entity_id: Any, raw: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update.

        The payload is validated before the database is touched; the row is
        then locked, merged and written in one transaction, so either every
        supplied field changes or none does.

        Raises:
            ContentValidationError: the payload has field errors
            EntityNotFoundError: no row with this id
        """
        schema = get_schema(content_type)
        payload = UpdatePayload(raw, schema, self.codec)
        errors = payload.validate()
        if errors:
            raise ContentValidationError(errors, content_type=content_type)

        table = quote_identifier(schema.table)
        pk = quote_identifier(schema.primary_key)

        pool = self._require_pool()
        async with pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(f"SELECT * FROM {table} WHERE {pk} = $1 FOR UPDATE", entity_id)
                if row is None:
                    raise EntityNotFoundError(content_type, entity_id)
                current = self._row_to_dict(schema, row)

                if not payload.has_changes():
                    return current

                patch = payload.apply(current)
                columns = list(patch)
                assignments = ", ".join(
                    f"{quote_identifier(column)} = {self._placeholder(schema, column, index)}"
                    for index, column in enumerate(columns, start=2)
                )
                values = [self._value(schema, column, patch[column]) for column in columns]
                updated = await conn.fetchrow(
                    f"UPDATE {table} SET {assignments} WHERE {pk} = $1 RETURNING *",
                    entity_id,
                    *values,
                )

        logger.info("Updated %s %s (%s)", content_type, entity_id, ", ".join(columns))
        return self._row_to_dict(schema, updated)

    async def create_entity(self, content_type: str, raw: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Insert a new row from a create payload.

        Raises:
            ContentValidationError: missing required fields or field errors
        """
        schema = get_schema(content_type)
        entity = UpdatePayload.for_create(raw, schema, self.codec).to_new_entity()

        columns = list(entity)
        placeholders = ", ".join(self._placeholder(schema, column, index) for index, column in enumerate(columns, start=1))
        values = [self._value(schema, column, entity[column]) for column in columns]
        sql = (
            f"INSERT INTO {quote_identifier(schema.table)} "
            f"({', '.join(quote_identifier(column) for column in columns)}) "
            f"VALUES ({placeholders}) RETURNING *"
        )

        pool = self._require_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(sql, *values)

        logger.info("Created %s with %d column(s)", content_type, len(columns))
        return self._row_to_dict(schema, row)
