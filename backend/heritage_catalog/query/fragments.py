"""
Engine-agnostic query fragments.

Fragments are immutable descriptors produced by QueryFragmentBuilder and
turned into SQL by a renderer. Identifiers inside a fragment are always
allow-listed names; literal values are carried as data and only ever
reach the database as bound parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Tuple, Union

from heritage_catalog.exceptions import SchemaContractError
from heritage_catalog.security.identifier_sanitizer import validate_identifier


def _require_identifier(name: Optional[str], role: str) -> None:
    if validate_identifier(name) is None:
        raise SchemaContractError(
            f"Unsanitized {role} reached a query fragment",
            details={"role": role},
        )


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: Any) -> Optional["SortDirection"]:
        """Direction for 'asc'/'desc' in any case, None otherwise."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return None
        return None


@dataclass(frozen=True)
class ColumnRef:
    field: str
    table: Optional[str] = None

    def __post_init__(self) -> None:
        _require_identifier(self.field, "field")
        if self.table is not None:
            _require_identifier(self.table, "table")


@dataclass(frozen=True)
class LocalizedValue:
    """One language's entry of a language-map column."""

    column: ColumnRef
    language: str


@dataclass(frozen=True)
class SubstringMatch:
    """Case-insensitive match; `pattern` is already LIKE-escaped and wrapped in %."""

    value: LocalizedValue
    pattern: str


@dataclass(frozen=True)
class ExactMatch:
    value: LocalizedValue
    expected: str


@dataclass(frozen=True)
class Unsatisfiable:
    """Matches no row."""

    reason: str = ""


@dataclass(frozen=True)
class FullTextMatch:
    column: ColumnRef
    term: str
    config: str

    def __post_init__(self) -> None:
        _require_identifier(self.config, "text search configuration")


@dataclass(frozen=True)
class AnyOf:
    """OR of its conditions."""

    conditions: Tuple["Condition", ...]


Condition = Union[SubstringMatch, ExactMatch, Unsatisfiable, FullTextMatch, AnyOf]


@dataclass(frozen=True)
class OrderKey:
    expression: Union[LocalizedValue, ColumnRef]
    direction: SortDirection = SortDirection.ASC

    @property
    def is_fallback(self) -> bool:
        """True when ordering by the primary key instead of a language entry."""
        return isinstance(self.expression, ColumnRef)


@dataclass(frozen=True)
class Projection:
    """Named expression; unpacks as (expression, alias)."""

    expression: LocalizedValue
    alias: str

    def __post_init__(self) -> None:
        _require_identifier(self.alias, "alias")

    def __iter__(self) -> Iterator[Any]:
        yield self.expression
        yield self.alias
