from dataclasses import dataclass
from typing import Optional, Dict, Any
from datetime import date, datetime


@dataclass
class User:
    """
    Caller-safe view of a user row.

    Carries no password attribute; repositories select only the projected
    columns, so a digest never travels past the store layer.
    """
    id: int
    first_name: str
    last_name: str
    email: str
    created_at: datetime
    updated_at: datetime
    birthday: Optional[date] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "User":
        return cls(
            id=int(row["id"]),
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            birthday=row.get("birthday"),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
