"""
Input validation and sanitization utilities.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

NATIONAL_ID_PATTERN = r"^[0-9]{11}$"
PHONE_PATTERN = r"^[0-9]{10,11}$"
MICROCHIP_PATTERN = r"^[0-9]{15}$"
PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"


def sanitize_string(value: Any, max_length: int = 1000) -> str:
    """
    Sanitize string input.

    Args:
        value: Input value
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)

    # Remove null bytes
    value = value.replace("\x00", "")

    # Truncate to max length
    value = value[:max_length]

    return value.strip()


def validate_national_id(national_id: str) -> bool:
    """Validate an 11-digit national ID (TC Kimlik No)."""
    return bool(re.match(NATIONAL_ID_PATTERN, national_id or ""))


def validate_phone(phone: str) -> bool:
    """Validate a 10-11 digit phone number."""
    return bool(re.match(PHONE_PATTERN, phone or ""))


def validate_microchip(microchip_number: str) -> bool:
    """Validate a 15-digit microchip number."""
    return bool(re.match(MICROCHIP_PATTERN, microchip_number or ""))


def validate_password(password: str) -> bool:
    """Check a password has upper, lower, digit and special characters."""
    return bool(re.match(PASSWORD_PATTERN, password or ""))


@dataclass(frozen=True)
class FieldRule:
    """
    Validation rules for one form field.

    Each rule carries the message shown when it fails. Rules run in the
    order required, min_length, max_length, pattern, min_value, matches,
    and only the first failure is reported.
    """

    required: Optional[str] = None
    min_length: Optional[Tuple[int, str]] = None
    max_length: Optional[Tuple[int, str]] = None
    pattern: Optional[Tuple[str, str]] = None
    min_value: Optional[Tuple[float, str]] = None
    matches: Optional[Tuple[str, str]] = None

    def check(self, value: Any, data: Mapping[str, Any]) -> Optional[str]:
        """
        Check a value against the rules.

        Args:
            value: Submitted value
            data: Whole submitted form, for cross-field rules

        Returns:
            Error message, or None if valid
        """
        text = sanitize_string(value)

        if not text:
            return self.required

        if self.min_length and len(text) < self.min_length[0]:
            return self.min_length[1]

        if self.max_length and len(text) > self.max_length[0]:
            return self.max_length[1]

        if self.pattern and not re.match(self.pattern[0], text):
            return self.pattern[1]

        if self.min_value:
            try:
                number = float(text)
            except ValueError:
                return self.min_value[1]
            if number < self.min_value[0]:
                return self.min_value[1]

        if self.matches and text != sanitize_string(data.get(self.matches[0])):
            return self.matches[1]

        return None


def validate_form(
    data: Mapping[str, Any],
    rules: Mapping[str, FieldRule],
) -> Tuple[bool, Dict[str, str]]:
    """
    Validate submitted form data.

    Args:
        data: Submitted form values keyed by field name
        rules: Rules keyed by field name

    Returns:
        Tuple of (is_valid, errors keyed by field name)
    """
    errors: Dict[str, str] = {}
    for field_name, rule in rules.items():
        message = rule.check(data.get(field_name), data)
        if message:
            errors[field_name] = message
    return not errors, errors
