"""
Turns a sparse update payload into the column/value pairs to persist.

Absent keys never overwrite stored values. Text fields are only taken when
they carry a non-empty value; birthday is taken whenever the key is present,
so an explicit null clears it.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional

from user_service.core.exceptions import NoOpError
from user_service.utils.validators import ValidationUtils

# Order in which changes are emitted
UPDATABLE_FIELDS = ("first_name", "last_name", "email", "password", "birthday")

NULLABLE_FIELDS = frozenset({"birthday"})


@dataclass(frozen=True)
class FieldChange:
    column: str
    value: Any


def resolve_update(
    changes: Mapping[str, Any],
    hash_password: Callable[[str], str],
    now: Optional[datetime] = None,
) -> List[FieldChange]:
    """
    Resolve requested changes into an ordered list of FieldChange pairs

    email is shape-checked and password is length-checked and hashed before
    either is added. A non-empty result always ends with updated_at.

    Raises:
        ValidationError: When a supplied email or password is malformed
        NoOpError: When no recognized field would change
    """
    resolved: List[FieldChange] = []

    for field in UPDATABLE_FIELDS:
        if field not in changes:
            continue

        value = changes[field]
        if field in NULLABLE_FIELDS:
            resolved.append(FieldChange(field, value))
            continue

        if ValidationUtils.is_blank(value):
            continue

        if field == "email":
            ValidationUtils.validate_email(value)
        elif field == "password":
            ValidationUtils.validate_password(value)
            value = hash_password(value)

        resolved.append(FieldChange(field, value))

    if not resolved:
        raise NoOpError()

    resolved.append(FieldChange("updated_at", now or datetime.now(timezone.utc)))
    return resolved


def changed_columns(resolved: List[FieldChange]) -> List[str]:
    return [change.column for change in resolved]
