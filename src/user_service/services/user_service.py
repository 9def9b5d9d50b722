from typing import Any, Dict, List, Mapping
from user_service.repositories.user_repository import UserRepository
from user_service.models.user import User
from user_service.core.exceptions import ConflictError, NotFoundError
from user_service.core.security import PasswordHasher
from user_service.services.update_resolver import changed_columns, resolve_update
from user_service.utils.validators import ValidationUtils
import logging

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("first_name", "last_name", "email", "password")


class UserService:
    """
    User business logic service

    Responsibilities:
    - Validate payloads before anything reaches the store
    - Keep emails unique across users
    - Hash passwords before they are persisted

    Each operation issues several independent round trips (check, write,
    re-read). Two requests racing on the same email can both pass the
    check; the UNIQUE constraint then rejects the later write and the
    repository reports it as a ConflictError.
    """

    def __init__(self, user_repository: UserRepository, password_hasher: PasswordHasher):
        self.user_repo = user_repository
        self.hasher = password_hasher

    def list_users(self) -> List[User]:
        users = self.user_repo.list_all()
        logger.info(f"Listed {len(users)} users")
        return users

    def get_user(self, user_id: int) -> User:
        try:
            return self.user_repo.get_by_id(user_id)
        except NotFoundError:
            logger.warning(f"User {user_id} not found")
            raise

    def create_user(self, fields: Mapping[str, Any]) -> User:
        """
        Create a user

        Business Rules:
        - first_name, last_name, email and password are required
        - email must be well-formed and not used by any other user
        - only the password digest is stored
        """
        ValidationUtils.require_fields(fields, REQUIRED_FIELDS)
        ValidationUtils.validate_email(fields["email"])
        ValidationUtils.validate_password(fields["password"])

        if self.user_repo.email_exists(fields["email"]):
            logger.warning("Create rejected: email already registered")
            raise ConflictError("Email is already registered", conflict_field="email")

        record: Dict[str, Any] = {
            "first_name": fields["first_name"],
            "last_name": fields["last_name"],
            "email": fields["email"],
            "password": self.hasher.hash(fields["password"]),
            "birthday": fields.get("birthday"),
        }

        user_id = self.user_repo.insert(record)
        logger.info(f"Created user {user_id}")
        return self.user_repo.get_by_id(user_id)

    def update_user(self, user_id: int, changes: Mapping[str, Any]) -> User:
        """
        Apply a sparse update

        Business Rules:
        - the user must exist
        - absent fields keep their stored value
        - a new email must be well-formed and not used by another user
        - a request that changes nothing is rejected
        """
        if not self.user_repo.exists(user_id):
            logger.warning(f"Update rejected: user {user_id} not found")
            raise NotFoundError("User", str(user_id))

        resolved = resolve_update(changes, self.hasher.hash)
        columns = changed_columns(resolved)

        if "email" in columns and self.user_repo.email_exists(changes["email"], exclude_id=user_id):
            logger.warning(f"Update rejected: email already registered to another user than {user_id}")
            raise ConflictError("Email is already registered", conflict_field="email")

        self.user_repo.update_fields(user_id, resolved)
        logger.info(f"Updated user {user_id}: {', '.join(columns)}")
        return self.user_repo.get_by_id(user_id)

    def delete_user(self, user_id: int) -> None:
        if not self.user_repo.exists(user_id):
            logger.warning(f"Delete rejected: user {user_id} not found")
            raise NotFoundError("User", str(user_id))

        self.user_repo.delete(user_id)
        logger.info(f"Deleted user {user_id}")
