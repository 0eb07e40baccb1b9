"""
Content update exceptions

Only ContentValidationError reaches API consumers; the others flag
programmer mistakes (wrong schema wiring, untyped values).
"""

from typing import Any, Dict, List, Optional

from .base import DomainException


class ContentValidationError(DomainException):
    """An update payload failed validation; nothing was written"""

    def __init__(self, errors: List[Dict[str, str]], content_type: Optional[str] = None):
        fields = ", ".join(error["field"] for error in errors)
        super().__init__(
            message=f"Validation failed: {fields}",
            code="CONTENT_VALIDATION_ERROR",
            details={"content_type": content_type, "errors": errors}
        )
        self.errors = errors


class SchemaContractError(DomainException, TypeError):
    """A value or field name violates the schema a caller declared"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="SCHEMA_CONTRACT_ERROR",
            details=details or {}
        )


class UnknownContentTypeError(DomainException):
    """No field schema is registered under this name"""

    def __init__(self, content_type: str):
        super().__init__(
            message=f"Unknown content type: {content_type}",
            code="UNKNOWN_CONTENT_TYPE",
            details={"content_type": content_type}
        )


class EntityNotFoundError(DomainException):
    """The row targeted by an update does not exist"""

    def __init__(self, content_type: str, entity_id: Any):
        super().__init__(
            message=f"{content_type} not found: {entity_id}",
            code="ENTITY_NOT_FOUND",
            details={"content_type": content_type, "entity_id": entity_id}
        )
