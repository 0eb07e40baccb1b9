"""
PostgreSQL rendering of query fragments.

Language-map columns are JSONB. Identifiers are double-quoted after a
second allow-list check; every literal (language codes included) becomes an
asyncpg `$n` parameter collected in order.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Union

from heritage_catalog.exceptions import SchemaContractError
from heritage_catalog.security.identifier_sanitizer import validate_identifier

from .fragments import (
    AnyOf,
    ColumnRef,
    Condition,
    ExactMatch,
    FullTextMatch,
    LocalizedValue,
    OrderKey,
    Projection,
    SubstringMatch,
    Unsatisfiable,
)

# A WHERE group is one condition or a list of conditions to OR together.
ConditionGroup = Union[Condition, Sequence[Condition], None]


class ParameterCollector:
    """Bound parameters of one statement, numbered from 1."""

    def __init__(self) -> None:
        self.values: List[Any] = []

    def add(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"

    def __len__(self) -> int:
        return len(self.values)


def quote_identifier(name: str) -> str:
    if validate_identifier(name) is None:
        raise SchemaContractError("Refusing to quote an unsanitized identifier", details={"identifier": name})
    return f'"{name}"'


class PostgresRenderer:
    """
    Renders fragments into SQL text plus a shared parameter list.

    One renderer is used per statement, so that placeholder numbers stay
    consistent across WHERE, ORDER BY and the select list.
    """

    def __init__(self, params: Optional[ParameterCollector] = None):
        self.params = params or ParameterCollector()

    def column(self, ref: ColumnRef) -> str:
        if ref.table is None:
            return quote_identifier(ref.field)
        return f"{quote_identifier(ref.table)}.{quote_identifier(ref.field)}"

    def localized_value(self, value: LocalizedValue) -> str:
        return f"({self.column(value.column)} ->> {self.params.add(value.language)})"

    def condition(self, condition: Condition) -> str:
        if isinstance(condition, SubstringMatch):
            return f"{self.localized_value(condition.value)} ILIKE {self.params.add(condition.pattern)} ESCAPE '\\'"
        if isinstance(condition, ExactMatch):
            return f"{self.localized_value(condition.value)} = {self.params.add(condition.expected)}"
        if isinstance(condition, FullTextMatch):
            config = f"'{condition.config}'"
            return (
                f"to_tsvector({config}, {self.column(condition.column)}::text) "
                f"@@ plainto_tsquery({config}, {self.params.add(condition.term)})"
            )
        if isinstance(condition, Unsatisfiable):
            return "FALSE"
        if isinstance(condition, AnyOf):
            if not condition.conditions:
                return "FALSE"
            return "(" + " OR ".join(self.condition(item) for item in condition.conditions) + ")"
        raise SchemaContractError(
            f"Cannot render {type(condition).__name__} as a condition",
            details={"fragment": type(condition).__name__},
        )

    def where(self, groups: Iterable[ConditionGroup]) -> str:
        """
        `WHERE` clause AND-ing the groups, or "" when nothing filters.

        A list is one OR group; an empty list or None is skipped (no filter).
        """
        clauses: List[str] = []
        for group in groups:
            if group is None:
                continue
            if isinstance(group, (list, tuple)):
                if not group:
                    continue
                clauses.append(self.condition(AnyOf(tuple(group))))
            else:
                clauses.append(self.condition(group))
        return f"WHERE {' AND '.join(clauses)}" if clauses else ""

    def order_key(self, key: OrderKey) -> str:
        if isinstance(key.expression, ColumnRef):
            expression = self.column(key.expression)
        else:
            expression = self.localized_value(key.expression)
        return f"{expression} {key.direction.value}"

    def order_by(self, keys: Iterable[OrderKey]) -> str:
        rendered = [self.order_key(key) for key in keys]
        return f"ORDER BY {', '.join(rendered)}" if rendered else ""

    def projection(self, projection: Projection) -> str:
        return f"{self.localized_value(projection.expression)} AS {quote_identifier(projection.alias)}"
