import re
from typing import Any, Iterable, List, Mapping

from user_service.core.exceptions import ValidationError


class ValidationUtils:
    """
    Validation rules for user payloads

    Features:
    - Required field presence
    - Syntactic email check (no DNS lookups)
    - Password length limits imposed by bcrypt
    """

    # Regex patterns for common validations
    PATTERNS = {
        'email': re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+'),  # local@domain.tld, no whitespace
    }

    # bcrypt only reads the first 72 bytes of a password and rejects longer input
    MAX_PASSWORD_BYTES = 72

    @classmethod
    def is_blank(cls, value: Any) -> bool:
        """Absent, null and whitespace-only strings all count as blank"""
        if value is None:
            return True
        return isinstance(value, str) and not value.strip()

    @classmethod
    def require_fields(cls, payload: Mapping[str, Any], names: Iterable[str]) -> None:
        """
        Ensure every named field is present and non-empty

        Raises:
            ValidationError: Listing each missing field
        """
        missing: List[str] = [name for name in names if cls.is_blank(payload.get(name))]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                field_errors=[{"field": name, "message": "This field is required"} for name in missing],
            )

    @classmethod
    def is_valid_email(cls, email: Any) -> bool:
        """Syntactic check only: local part, '@', a domain with at least one dot"""
        if not isinstance(email, str):
            return False
        return cls.PATTERNS['email'].fullmatch(email) is not None

    @classmethod
    def validate_email(cls, email: Any) -> None:
        if not cls.is_valid_email(email):
            raise ValidationError(
                "Invalid email format",
                field_errors=[{"field": "email", "message": "Must look like name@domain.tld"}],
            )

    @classmethod
    def validate_password(cls, password: str) -> None:
        if len(password.encode("utf-8")) > cls.MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password cannot exceed {cls.MAX_PASSWORD_BYTES} bytes",
                field_errors=[{"field": "password", "message": "Password is too long"}],
            )


require_fields = ValidationUtils.require_fields
is_valid_email = ValidationUtils.is_valid_email
