import logging

from flask import Blueprint

from user_service.routes.schemas import UserPayloadSchema
from user_service.routes.utils import get_user_service, load_json_body, success_response
from user_service.schemas.user_schemas import UserResponse

logger = logging.getLogger(__name__)

users_bp = Blueprint("users", __name__)

_payload_schema = UserPayloadSchema()


def _serialize(user) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


@users_bp.route("", methods=["GET"])
def list_users():
    """List every user ordered by id."""
    users = get_user_service().list_users()
    return success_response([_serialize(u) for u in users], count=len(users))


@users_bp.route("/<int:user_id>", methods=["GET"])
def get_user(user_id: int):
    """Get a single user."""
    user = get_user_service().get_user(user_id)
    return success_response(_serialize(user))


@users_bp.route("", methods=["POST"])
def create_user():
    """Create a user; the response never includes the password."""
    fields = load_json_body(_payload_schema)
    user = get_user_service().create_user(fields)
    return success_response(_serialize(user), status=201)


@users_bp.route("/<int:user_id>", methods=["PUT"])
def update_user(user_id: int):
    """Apply a sparse update; absent fields keep their stored value."""
    changes = load_json_body(_payload_schema)
    user = get_user_service().update_user(user_id, changes)
    return success_response(_serialize(user))


@users_bp.route("/<int:user_id>", methods=["DELETE"])
def delete_user(user_id: int):
    """Remove a user for good."""
    get_user_service().delete_user(user_id)
    return success_response(message=f"User {user_id} deleted")
