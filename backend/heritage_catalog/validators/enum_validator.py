"""
Enum validator for status and type fields
"""

from typing import Any, Dict, List, Optional

from .base_validator import BaseValidator, ValidationResult


class EnumValidator(BaseValidator):
    """Validator for enum data types"""

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Validate enum value"""
        if constraints is None:
            constraints = {}

        allowed_values = constraints.get("enum", [])
        if not allowed_values:
            return ValidationResult(is_valid=False, message="No enum values defined in constraints")

        if value not in allowed_values:
            return ValidationResult(
                is_valid=False,
                message=f"Invalid value. Accepted values: {', '.join(map(str, allowed_values))}",
            )

        return ValidationResult(
            is_valid=True,
            message="Valid enum value",
            normalized_value=value,
            metadata={
                "type": "enum",
                "allowed_values": allowed_values,
                "value_index": allowed_values.index(value),
            },
        )

    @classmethod
    def create_constraints(cls, allowed_values: List[Any]) -> Dict[str, Any]:
        """
        Create enum constraints

        Args:
            allowed_values: List of allowed values

        Returns:
            Constraints dictionary
        """
        return {"enum": list(allowed_values)}
