from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, Date, DateTime, Integer, String

from user_service.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRecord(Base):
    """
    Row layout of the users table.

    email carries a UNIQUE constraint: the service checks for duplicates
    before writing, and the constraint catches whatever slips between that
    check and the write.

    password holds the bcrypt digest, never the plaintext.
    """

    __tablename__ = "users"
    # SQLite would otherwise hand a deleted max id out again
    __table_args__ = {"sqlite_autoincrement": True}

    # BIGINT on server databases; SQLite only autoincrements INTEGER keys
    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    birthday = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        return f"<UserRecord id={self.id} email={self.email!r}>"
