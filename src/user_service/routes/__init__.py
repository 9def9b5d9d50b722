from user_service.routes.users import users_bp

__all__ = ["users_bp"]
