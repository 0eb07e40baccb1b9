"""
Domain exception definitions
"""

from .base import DatabaseError, DomainException
from .content import (
    ContentValidationError,
    EntityNotFoundError,
    SchemaContractError,
    UnknownContentTypeError,
)

__all__ = [
    "DomainException",
    "DatabaseError",
    "ContentValidationError",
    "EntityNotFoundError",
    "SchemaContractError",
    "UnknownContentTypeError",
]
