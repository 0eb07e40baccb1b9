"""
Numeric range validators (prices, coordinates, ids, years)
"""

from datetime import date
from typing import Any, Dict, Optional

from .base_validator import BaseValidator, ValidationResult


class RangeValidator(BaseValidator):
    """Validator for numbers within optional [min, max] bounds"""

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Validate numeric range"""
        if constraints is None:
            constraints = {}

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return ValidationResult(
                is_valid=False, message=f"Expected a number, got {type(value).__name__}"
            )

        if constraints.get("integer") and not isinstance(value, int):
            return ValidationResult(is_valid=False, message="Value must be an integer")

        minimum = constraints.get("min")
        maximum = constraints.get("max")

        if minimum is not None and value < minimum:
            message = constraints.get("min_message") or f"Value must be >= {minimum}"
            return ValidationResult(is_valid=False, message=message)

        if maximum is not None and value > maximum:
            message = constraints.get("max_message") or f"Value must be <= {maximum}"
            return ValidationResult(is_valid=False, message=message)

        return ValidationResult(
            is_valid=True,
            message="Valid number",
            normalized_value=value,
            metadata={"min": minimum, "max": maximum},
        )


class YearValidator(RangeValidator):
    """Years between a fixed historical floor and next year"""

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Validate year against [min, current_year + years_ahead]"""
        constraints = dict(constraints or {})
        minimum = constraints.pop("min", 1800)
        years_ahead = constraints.pop("years_ahead", 1)
        maximum = date.today().year + years_ahead
        message = f"Year must be between {minimum} and {maximum}"

        return super().validate(
            value,
            {
                **constraints,
                "integer": True,
                "min": minimum,
                "max": maximum,
                "min_message": message,
                "max_message": message,
            },
        )
