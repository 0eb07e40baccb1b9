"""
Validator for multilingual text fields
"""

from typing import Any, Dict, Mapping, Optional, Set

from .base_validator import BaseValidator, ValidationResult


class LocalizedTextValidator(BaseValidator):
    """
    Checks the shape of a multilingual value and, optionally, that it carries
    text.

    Constraints:
        non_empty: at least one language must hold non-blank text
        require_any: at least one of these languages must hold non-blank text
        default_language: language a plain string counts for
        message: error message override
    """

    def _filled(self, value: Any, default_language: Optional[str]) -> Set[str]:
        if isinstance(value, str):
            return {default_language} if value.strip() else set()
        if isinstance(value, Mapping):
            return {
                str(code).strip().lower()
                for code, text in value.items()
                if isinstance(text, str) and text.strip()
            }
        return set()

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Validate a localized text value"""
        if constraints is None:
            constraints = {}

        if value is not None and not isinstance(value, (str, Mapping)):
            return ValidationResult(
                is_valid=False,
                message=f"Expected text or a language map, got {type(value).__name__}",
            )

        filled = self._filled(value, constraints.get("default_language"))
        required = constraints.get("require_any") or []

        if constraints.get("non_empty") and not filled:
            message = constraints.get("message") or "Text is required in at least one language"
            return ValidationResult(is_valid=False, message=message)

        if required and not filled.intersection(required):
            message = constraints.get("message") or (
                f"A value is required in at least one of: {', '.join(required)}"
            )
            return ValidationResult(is_valid=False, message=message)

        return ValidationResult(
            is_valid=True,
            message="Valid localized text",
            normalized_value=value,
            metadata={"languages": sorted(filled)},
        )
