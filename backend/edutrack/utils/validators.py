"""Validation utilities for the application."""
import re
from datetime import date
from typing import Any, Dict, List, Optional

from edutrack.errors import ValidationError
from edutrack.models.attendance import AttendanceStatus

# Largest id the store accepts (signed 64-bit)
MAX_ID = 2 ** 63 - 1
DIGITS = re.compile(r"[0-9]+")


class Validator:
    """Validation helper class."""

    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format."""
        if not email:
            return False
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return bool(re.match(pattern, email))

    @staticmethod
    def validate_password(password: str) -> Dict[str, Any]:
        """Validate password strength."""
        errors = []

        if not password:
            errors.append("Password is required")
        elif len(password) < 6:
            errors.append("Password must be at least 6 characters long")
        elif len(password) > 128:
            errors.append("Password is too long")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def require_json(data: Optional[Dict]) -> Dict:
        """Reject requests whose body is not a JSON object."""
        if not isinstance(data, dict):
            raise ValidationError("Request body must be JSON")
        return data

    @staticmethod
    def require_fields(data: Dict, required_fields: List[str], message: Optional[str] = None) -> None:
        """Raise ValidationError when any required field is missing or blank."""
        missing = []
        for field in required_fields:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(field)

        if missing:
            raise ValidationError(message or f"Missing required field: {', '.join(missing)}")

    @staticmethod
    def parse_status(value: Optional[str], default: Optional[AttendanceStatus] = None) -> AttendanceStatus:
        """Map a status string onto the closed status enumeration."""
        if value is None or (isinstance(value, str) and not value.strip()):
            if default is None:
                raise ValidationError("Status is required")
            return default

        if isinstance(value, AttendanceStatus):
            return value

        try:
            return AttendanceStatus(str(value).strip().lower())
        except ValueError:
            allowed = ', '.join(s.value for s in AttendanceStatus)
            raise ValidationError(f"Invalid status '{value}'. Allowed: {allowed}")

    @staticmethod
    def parse_date(value: Optional[str], field: str = 'date') -> Optional[date]:
        """Parse an ISO ``YYYY-MM-DD`` date; None passes through."""
        if value is None or value == '':
            return None
        try:
            return date.fromisoformat(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid {field} format. Use YYYY-MM-DD")

    @staticmethod
    def parse_int(value: Any, field: str) -> Optional[int]:
        """Parse an id given as a JSON integer or a digit string; None passes through."""
        if value is None or value == '':
            return None
        if isinstance(value, str) and DIGITS.fullmatch(value.strip()):
            digits = value.strip()
            if len(digits) > len(str(MAX_ID)):
                raise ValidationError(f"{field} is out of range")
            value = int(digits)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field} must be an integer")
        if not -MAX_ID - 1 <= value <= MAX_ID:
            raise ValidationError(f"{field} is out of range")
        return value

    @staticmethod
    def clean_optional(value: Any) -> Optional[str]:
        """Strip a string; blank strings become None."""
        if value is None:
            return None
        value = str(value).strip()
        return value or None
