"""
Base validator interface for catalog fields
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ValidationResult:
    """Result of validation operation"""

    is_valid: bool
    message: str = ""
    normalized_value: Any = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def error(self) -> Optional[str]:
        """Get error message if validation failed"""
        return self.message if not self.is_valid else None


class BaseValidator(ABC):
    """Abstract base class for validators"""

    @abstractmethod
    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """
        Validate a value against constraints

        Args:
            value: The value to validate
            constraints: Optional constraints to apply

        Returns:
            ValidationResult object
        """
        pass

    def normalize(self, value: Any) -> Any:
        """Normalize a value to standard format"""
        return value

    def get_type_info(self) -> Dict[str, Any]:
        """
        Get information about this validator

        Returns:
            Dictionary with validator metadata
        """
        return {
            "name": self.__class__.__name__,
            "description": self.__class__.__doc__ or "No description available",
        }
