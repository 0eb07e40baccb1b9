"""
Presence-aware partial updates for catalog entities.

An UpdatePayload is built once from the raw body of a write request. Only
keys that are actually present in the body become FieldUpdates: an explicit
empty value is a real edit ("clear this"), a missing key means "leave it".
Multilingual fields are merged into the stored language map so that editing
one language never wipes the others.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from heritage_catalog.exceptions import ContentValidationError, SchemaContractError
from heritage_catalog.i18n.codec import LocaleTextCodec
from heritage_catalog.utils.app_logger import get_logger
from heritage_catalog.validators import get_validator

logger = get_logger(__name__)


# ----------------------------------------------------------------------
# Scalar coercions
#
# A value that cannot be coerced is returned unchanged so that the field's
# rules report it instead of it silently becoming 0 or None.
# ----------------------------------------------------------------------


def to_int(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            return int(stripped, 10)
        except ValueError:
            return value
    return value


def to_float(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            return float(stripped)
        except ValueError:
            return value
    return value


def to_bool(value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1")
    return bool(value)


def clean_string(value: Any) -> Optional[str]:
    """Trimmed string, None when empty."""
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def to_array(value: Any) -> List[Any]:
    """List as-is, JSON array strings parsed, anything else empty."""
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return []
        return parsed if isinstance(parsed, list) else []
    return []


# ----------------------------------------------------------------------
# Schema
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class FieldRule:
    """A named validator plus its constraints."""

    rule: str
    constraints: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FieldSpec:
    name: str
    multilingual: bool = False
    coerce: Optional[Callable[[Any], Any]] = None
    rules: Tuple[FieldRule, ...] = ()
    required_on_create: bool = False
    default: Any = None
    # Alternative request keys (camelCase bodies from older clients)
    aliases: Tuple[str, ...] = ()

    def read(self, raw: Mapping[str, Any]) -> Tuple[bool, Any]:
        """(present, value) for this field in a raw body."""
        for key in (self.name, *self.aliases):
            if key in raw:
                return True, raw[key]
        return False, None


@dataclass(frozen=True)
class FieldSchema:
    """Fields of one content type and the table they live in."""

    name: str
    table: str
    primary_key: str
    fields: Tuple[FieldSpec, ...]

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def __contains__(self, name: object) -> bool:
        return any(spec.name == name for spec in self.fields)

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise SchemaContractError(
            f"Field '{name}' is not declared for '{self.name}'",
            details={"content_type": self.name, "field": name},
        )

    @property
    def multilingual_fields(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if spec.multilingual)


# ----------------------------------------------------------------------
# Payload
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class FieldUpdate:
    """One explicitly supplied field, value kept exactly as received."""

    field_name: str
    value: Any
    is_multilingual: bool


class UpdatePayload:
    """
    Field-presence-aware partial update.

    Args:
        raw: request body (a mapping)
        schema: content type the body targets
        codec: codec used for multilingual fields
        for_create: also check `required_on_create` fields
    """

    def __init__(
        self,
        raw: Optional[Mapping[str, Any]],
        schema: FieldSchema,
        codec: Optional[LocaleTextCodec] = None,
        *,
        for_create: bool = False,
    ):
        self._schema = schema
        self._codec = codec or LocaleTextCodec()
        self._for_create = for_create

        raw = raw or {}
        updates: List[FieldUpdate] = []
        for spec in schema:
            present, value = spec.read(raw)
            if present:
                updates.append(FieldUpdate(spec.name, value, spec.multilingual))
        self._updates: Tuple[FieldUpdate, ...] = tuple(updates)

    @classmethod
    def for_create(
        cls,
        raw: Optional[Mapping[str, Any]],
        schema: FieldSchema,
        codec: Optional[LocaleTextCodec] = None,
    ) -> "UpdatePayload":
        return cls(raw, schema, codec, for_create=True)

    @property
    def schema(self) -> FieldSchema:
        return self._schema

    @property
    def fields(self) -> Tuple[FieldUpdate, ...]:
        return self._updates

    @property
    def is_create(self) -> bool:
        return self._for_create

    def has_field(self, name: str) -> bool:
        return any(update.field_name == name for update in self._updates)

    def has_changes(self) -> bool:
        return bool(self._updates)

    def get(self, name: str) -> Optional[FieldUpdate]:
        for update in self._updates:
            if update.field_name == name:
                return update
        return None

    # ------------------------------------------------------------------
    # validation
    # ------------------------------------------------------------------

    def _coerced(self, spec: FieldSpec, value: Any) -> Any:
        if spec.multilingual:
            return self._codec.normalize(value)
        if spec.coerce is not None:
            return spec.coerce(value)
        return value

    def _is_blank(self, spec: FieldSpec, value: Any) -> bool:
        if value is None:
            return True
        if spec.multilingual:
            return not any(text.strip() for text in value.values())
        return False

    def _check_field(self, spec: FieldSpec, raw_value: Any) -> Optional[str]:
        if spec.multilingual and raw_value is not None and not isinstance(raw_value, (str, Mapping)):
            return f"Expected text or a language map, got {type(raw_value).__name__}"

        value = self._coerced(spec, raw_value)

        if self._is_blank(spec, value):
            if self._for_create and spec.required_on_create:
                return "This field is required"
            if not spec.multilingual:
                return None

        for field_rule in spec.rules:
            validator = get_validator(field_rule.rule)
            if validator is None:
                raise SchemaContractError(
                    f"Unknown validation rule '{field_rule.rule}' on field '{spec.name}'",
                    details={"field": spec.name, "rule": field_rule.rule},
                )
            constraints = dict(field_rule.constraints)
            if field_rule.rule == "localized_text":
                constraints.setdefault("default_language", self._codec.whitelist.default)
            result = validator.validate(value, constraints)
            if not result.is_valid:
                return result.message
        return None

    def validate(self) -> List[Dict[str, str]]:
        """
        Field errors as `[{"field": ..., "message": ...}]`.

        Only supplied fields are checked. Create payloads additionally
        report missing `required_on_create` fields.
        """
        errors: List[Dict[str, str]] = []

        if self._for_create:
            for spec in self._schema:
                if spec.required_on_create and not self.has_field(spec.name):
                    errors.append({"field": spec.name, "message": "This field is required"})

        for update in self._updates:
            message = self._check_field(self._schema.field(update.field_name), update.value)
            if message:
                errors.append({"field": update.field_name, "message": message})

        return errors

    def _ensure_valid(self) -> None:
        errors = self.validate()
        if errors:
            logger.info(
                "Rejected %s payload for '%s': %d invalid field(s)",
                "create" if self._for_create else "update",
                self._schema.name,
                len(errors),
            )
            raise ContentValidationError(errors, content_type=self._schema.name)

    # ------------------------------------------------------------------
    # application
    # ------------------------------------------------------------------

    def apply(self, existing: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Patch for `existing` holding only the supplied fields.

        Multilingual values are merged into the stored map; scalars replace
        the stored value with their coerced form.

        Raises:
            ContentValidationError: the payload does not validate. Nothing is
                computed in that case.
        """
        self._ensure_valid()
        existing = existing or {}

        patch: Dict[str, Any] = {}
        for update in self._updates:
            spec = self._schema.field(update.field_name)
            if update.is_multilingual:
                patch[spec.name] = self._codec.merge(existing.get(spec.name), update.value)
            else:
                patch[spec.name] = self._coerced(spec, update.value)
        return patch

    def to_new_entity(self) -> Dict[str, Any]:
        """
        Column values for a new row: supplied fields normalized or coerced,
        schema defaults for the rest. Every multilingual column is filled.
        """
        self._ensure_valid()

        entity: Dict[str, Any] = {}
        for spec in self._schema:
            update = self.get(spec.name)
            if update is not None:
                entity[spec.name] = self._coerced(spec, update.value)
            elif spec.multilingual:
                entity[spec.name] = self._codec.normalize(spec.default)
            elif spec.default is not None:
                entity[spec.name] = spec.default
        return entity

    def __repr__(self) -> str:
        names = ", ".join(update.field_name for update in self._updates)
        return f"UpdatePayload({self._schema.name}: {names})"
