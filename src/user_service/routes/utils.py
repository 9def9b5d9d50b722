from typing import Any, Dict, Optional

from flask import jsonify, request
from marshmallow import Schema
from marshmallow import ValidationError as SchemaValidationError

from user_service.core.dependencies import get_container
from user_service.core.exceptions import ValidationError
from user_service.services.user_service import UserService


def success_response(data: Any = None, message: Optional[str] = None, status: int = 200, **extra):
    """Consistent success response envelope."""
    response: Dict[str, Any] = {"success": True}
    if data is not None:
        response["data"] = data
    if message:
        response["message"] = message
    response.update(extra)
    return jsonify(response), status


def load_json_body(schema: Schema) -> Dict[str, Any]:
    """Parse the request body as a JSON object and run it through a schema."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        return schema.load(data)
    except SchemaValidationError as err:
        field_errors = [
            {"field": field, "message": "; ".join(messages) if isinstance(messages, list) else str(messages)}
            for field, messages in err.messages.items()
        ]
        raise ValidationError("Invalid request body", field_errors=field_errors)


def get_user_service() -> UserService:
    return get_container().get(UserService)
