"""
Validators for catalog content fields
"""

from typing import Dict, Optional, Type

from .base_validator import BaseValidator, ValidationResult
from .enum_validator import EnumValidator
from .isbn_validator import IsbnValidator
from .localized_text_validator import LocalizedTextValidator
from .range_validator import RangeValidator, YearValidator

# Registry of validators by rule name
_VALIDATOR_REGISTRY: Dict[str, Type[BaseValidator]] = {
    "range": RangeValidator,
    "year": YearValidator,
    "enum": EnumValidator,
    "isbn": IsbnValidator,
    "localized_text": LocalizedTextValidator,
}


def get_validator(rule: str) -> Optional[BaseValidator]:
    """
    Get validator instance for a rule name

    Args:
        rule: Rule name (range, year, enum, isbn, localized_text)

    Returns:
        Validator instance or None if not found
    """
    validator_class = _VALIDATOR_REGISTRY.get(rule)
    if validator_class:
        return validator_class()
    return None


__all__ = [
    "BaseValidator",
    "ValidationResult",
    "EnumValidator",
    "IsbnValidator",
    "LocalizedTextValidator",
    "RangeValidator",
    "YearValidator",
    "get_validator",
]
