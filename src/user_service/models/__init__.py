from .user import User
from .tables import UserRecord

__all__ = ["User", "UserRecord"]
