from datetime import datetime, timezone
from typing import List, Optional, Dict, Any, Sequence
from sqlalchemy import insert, text, update
from user_service.repositories.base import BaseRepository
from user_service.models.tables import UserRecord
from user_service.models.user import User
from user_service.core.exceptions import NotFoundError
from user_service.services.update_resolver import FieldChange
import logging

logger = logging.getLogger(__name__)

users_table = UserRecord.__table__

# Every read goes through this projection; the password column is never selected
PROJECTED_COLUMNS = (
    users_table.c.id,
    users_table.c.first_name,
    users_table.c.last_name,
    users_table.c.email,
    users_table.c.birthday,
    users_table.c.created_at,
    users_table.c.updated_at,
)


def _projection_query(where: str = "", order_by: str = ""):
    """
    Build a SELECT over the projected columns.

    The textual query is typed with the table's columns so dates and
    timestamps come back as Python objects on every dialect.
    """
    columns = ", ".join(column.name for column in PROJECTED_COLUMNS)
    query = f"SELECT {columns} FROM users"
    if where:
        query += f" WHERE {where}"
    if order_by:
        query += f" ORDER BY {order_by}"
    return text(query).columns(*PROJECTED_COLUMNS)


class UserRepository(BaseRepository[User]):
    """Repository for the users table"""

    @property
    def table_name(self) -> str:
        return "users"

    def list_all(self) -> List[User]:
        """All users ordered by id; an empty table yields an empty list"""
        rows = self.execute_query(_projection_query(order_by="id"))
        return [User.from_row(row) for row in rows]

    def find_by_id(self, user_id: int) -> Optional[User]:
        if not self.id_in_range(user_id):
            return None
        row = self.execute_single_query(_projection_query(where="id = :id"), {"id": user_id})
        return User.from_row(row) if row else None

    def get_by_id(self, user_id: int) -> User:
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", str(user_id))
        return user

    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """
        Check whether another row already holds this email.

        The comparison is exact; case folding is left to the column collation.
        """
        query = "SELECT 1 FROM users WHERE email = :email"
        params: Dict[str, Any] = {"email": email}

        if exclude_id is not None:
            query += " AND id <> :exclude_id"
            params["exclude_id"] = exclude_id

        return self.execute_scalar(query, params) is not None

    def insert(self, fields: Dict[str, Any]) -> int:
        """
        Insert a user row and return its generated id

        Raises:
            ConflictError: When the UNIQUE(email) constraint rejects the row
        """
        now = datetime.now(timezone.utc)
        statement = insert(users_table).values(
            first_name=fields["first_name"],
            last_name=fields["last_name"],
            email=fields["email"],
            password=fields["password"],
            birthday=fields.get("birthday"),
            created_at=now,
            updated_at=now,
        )

        user_id = self.execute_insert_returning_id(statement)
        logger.info(f"Inserted user {user_id}")
        return user_id

    def update_fields(self, user_id: int, changes: Sequence[FieldChange]) -> int:
        """
        Persist resolved column/value pairs for one user

        Returns:
            Number of affected rows
        """
        if not changes:
            return 0

        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values({change.column: change.value for change in changes})
        )
        return self.execute_command(statement)

    def delete(self, user_id: int) -> int:
        """Hard delete; returns the number of removed rows"""
        return self.execute_command("DELETE FROM users WHERE id = :id", {"id": user_id})

    def count(self) -> int:
        return int(self.execute_scalar("SELECT COUNT(*) FROM users") or 0)
