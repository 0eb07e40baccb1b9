"""
Base domain exceptions
"""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base class for catalog errors surfaced to callers"""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class DatabaseError(DomainException):
    """Persistence failure"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Database error: {message}",
            code="DATABASE_ERROR",
            details=details or {}
        )
