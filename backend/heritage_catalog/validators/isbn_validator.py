"""
ISBN validator
"""

import re
from typing import Any, Dict, Optional

from .base_validator import BaseValidator, ValidationResult

ISBN_PATTERN = re.compile(r"^(\d{10}|\d{13})$")


class IsbnValidator(BaseValidator):
    """ISBN-10 or ISBN-13, hyphens and spaces ignored"""

    def normalize(self, value: Any) -> Any:
        if isinstance(value, str):
            return re.sub(r"[-\s]", "", value)
        return value

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Validate ISBN digits"""
        if not isinstance(value, str):
            return ValidationResult(
                is_valid=False, message=f"Expected string, got {type(value).__name__}"
            )

        digits = self.normalize(value)
        if not ISBN_PATTERN.match(digits):
            return ValidationResult(
                is_valid=False, message="Invalid ISBN (must be 10 or 13 digits)"
            )

        return ValidationResult(is_valid=True, message="Valid ISBN", normalized_value=digits)
