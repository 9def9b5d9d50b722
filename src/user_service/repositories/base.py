from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, List, Any, Dict, Union
from contextlib import contextmanager
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from sqlalchemy.sql import Executable
from user_service.core.exceptions import ConflictError, DatabaseError
import logging

T = TypeVar('T')

# Widest surrogate key any supported dialect stores (signed BIGINT)
MAX_ID = 2 ** 63 - 1

Statement = Union[str, Executable]

logger = logging.getLogger(__name__)


def _as_statement(statement: Statement) -> Executable:
    return text(statement) if isinstance(statement, str) else statement


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.
    Implements Repository Pattern for clean separation of data access logic.

    Every helper runs in its own short transaction on a connection borrowed
    from the engine's pool.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def get_db_connection(self):
        """Database connection context manager with error handling"""
        try:
            with self.engine.connect() as conn:
                yield conn
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database connection error: {str(e)}")
            raise DatabaseError(f"Database connection failed: {str(e)}")

    def execute_query(
        self,
        query: Statement,
        params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """
        Execute SELECT query and return results as list of dictionaries

        Args:
            query: SQL query string or SQLAlchemy statement
            params: Query parameters

        Returns:
            List of row dictionaries

        Raises:
            DatabaseError: When query execution fails
        """
        try:
            with self.get_db_connection() as conn:
                result = conn.execute(_as_statement(query), params or {})
                return [dict(row._mapping) for row in result]
        except SQLAlchemyError as e:
            logger.error(f"Query execution failed: {query}, Error: {str(e)}")
            raise DatabaseError("Query execution failed", "SELECT")

    def execute_single_query(
        self,
        query: Statement,
        params: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Execute query expecting single result

        Returns:
            Single row dictionary or None if not found
        """
        try:
            with self.get_db_connection() as conn:
                result = conn.execute(_as_statement(query), params or {}).first()
                return dict(result._mapping) if result else None
        except SQLAlchemyError as e:
            logger.error(f"Single query execution failed: {query}, Error: {str(e)}")
            raise DatabaseError("Single query execution failed", "SELECT")

    def execute_command(
        self,
        command: Statement,
        params: Optional[Dict[str, Any]] = None
    ) -> int:
        """
        Execute INSERT/UPDATE/DELETE command

        Returns:
            Number of affected rows

        Raises:
            ConflictError: When a constraint such as UNIQUE rejects the write
        """
        try:
            with self.get_db_connection() as conn:
                result = conn.execute(_as_statement(command), params or {})
                conn.commit()
                return result.rowcount
        except IntegrityError as e:
            logger.error(f"Integrity constraint violation: {command}, Error: {str(e)}")
            raise ConflictError("Data conflicts with an existing record")
        except SQLAlchemyError as e:
            logger.error(f"Command execution failed: {command}, Error: {str(e)}")
            raise DatabaseError("Command execution failed", "WRITE")

    def execute_scalar(
        self,
        query: Statement,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Execute query returning single scalar value (COUNT, SUM, etc.)
        """
        try:
            with self.get_db_connection() as conn:
                result = conn.execute(_as_statement(query), params or {}).scalar()
                return result
        except SQLAlchemyError as e:
            logger.error(f"Scalar query execution failed: {query}, Error: {str(e)}")
            raise DatabaseError("Scalar query execution failed", "SELECT")

    def execute_insert_returning_id(self, command: Executable) -> int:
        """
        Execute an INSERT construct and return the generated ID

        PostgreSQL hands the key back through RETURNING, MySQL and SQLite
        through the cursor's lastrowid; SQLAlchemy picks per dialect.
        """
        try:
            with self.get_db_connection() as conn:
                result = conn.execute(command)
                conn.commit()
                return int(result.inserted_primary_key[0])
        except IntegrityError as e:
            logger.error(f"Insert with integrity violation: {command}, Error: {str(e)}")
            raise ConflictError("Data conflicts with an existing record")
        except SQLAlchemyError as e:
            logger.error(f"Insert execution failed: {command}, Error: {str(e)}")
            raise DatabaseError("Insert execution failed", "INSERT")

    # Abstract methods that concrete repositories must implement
    @abstractmethod
    def get_by_id(self, entity_id: int) -> T:
        """Get entity by ID"""
        pass

    def exists(self, entity_id: int) -> bool:
        """Check if entity exists by ID"""
        if not self.id_in_range(entity_id):
            return False
        query = f"SELECT 1 FROM {self.table_name} WHERE id = :id"
        result = self.execute_scalar(query, {"id": entity_id})
        return result is not None

    @staticmethod
    def id_in_range(entity_id: int) -> bool:
        """Ids the driver can bind; anything else cannot match a row"""
        return 1 <= entity_id <= MAX_ID

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Table name for the entity"""
        pass
