"""
Safe query fragments over language-map columns
"""

from .builder import QueryFragmentBuilder
from .fragments import (
    AnyOf,
    ColumnRef,
    ExactMatch,
    FullTextMatch,
    LocalizedValue,
    OrderKey,
    Projection,
    SortDirection,
    SubstringMatch,
    Unsatisfiable,
)
from .renderer import ParameterCollector, PostgresRenderer

__all__ = [
    "QueryFragmentBuilder",
    "AnyOf",
    "ColumnRef",
    "ExactMatch",
    "FullTextMatch",
    "LocalizedValue",
    "OrderKey",
    "Projection",
    "SortDirection",
    "SubstringMatch",
    "Unsatisfiable",
    "ParameterCollector",
    "PostgresRenderer",
]
