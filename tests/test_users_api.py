import pytest

from user_service.app import build_container, create_app
from user_service.core.security import PasswordHasher
from user_service.services.user_service import UserService
from user_service.db import create_db_engine, dispose_engine


def create(client, payload):
    return client.post("/users", json=payload)


def test_end_to_end_user_lifecycle(client, ana_payload):
    response = create(client, ana_payload)
    assert response.status_code == 201
    body = response.get_json()
    assert body["success"] is True
    user_id = body["data"]["id"]
    assert isinstance(user_id, int)
    assert "password" not in body["data"]

    response = client.get(f"/users/{user_id}")
    assert response.status_code == 200
    assert response.get_json()["data"]["first_name"] == "Ana"
    assert response.get_json()["data"]["email"] == "ana@x.com"

    other = create(client, {**ana_payload, "email": "bea@x.com"}).get_json()["data"]
    response = client.put(f"/users/{other['id']}", json={"email": "ana@x.com"})
    assert response.status_code == 409

    response = client.delete(f"/users/{user_id}")
    assert response.status_code == 200
    assert response.get_json()["success"] is True
    assert response.get_json()["message"]

    assert client.get(f"/users/{user_id}").status_code == 404


def test_list_users_with_count(client, ana_payload):
    assert client.get("/users").get_json() == {"success": True, "data": [], "count": 0}

    create(client, ana_payload)
    create(client, {**ana_payload, "email": "bea@x.com"})

    body = client.get("/users").get_json()
    assert body["count"] == 2
    assert [u["email"] for u in body["data"]] == ["ana@x.com", "bea@x.com"]
    assert all("password" not in u for u in body["data"])


def test_create_with_birthday(client, ana_payload):
    body = create(client, {**ana_payload, "birthday": "1990-05-17"}).get_json()

    assert body["data"]["birthday"] == "1990-05-17"
    assert body["data"]["created_at"]


def test_create_missing_field_is_400(client, ana_payload):
    payload = dict(ana_payload)
    del payload["password"]

    response = create(client, payload)

    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert "password" in body["message"]


def test_create_bad_email_is_400(client, ana_payload):
    response = create(client, {**ana_payload, "email": "ana at x.com"})

    assert response.status_code == 400
    assert client.get("/users").get_json()["count"] == 0


def test_create_bad_birthday_is_400(client, ana_payload):
    response = create(client, {**ana_payload, "birthday": "17/05/1990"})

    assert response.status_code == 400
    assert response.get_json()["details"]["field_errors"][0]["field"] == "birthday"


def test_create_blank_birthday_is_stored_as_null(client, ana_payload):
    body = create(client, {**ana_payload, "birthday": ""}).get_json()

    assert body["data"]["birthday"] is None


def test_create_duplicate_email_is_409(client, ana_payload):
    create(client, ana_payload)

    response = create(client, {**ana_payload, "first_name": "Other"})

    assert response.status_code == 409
    assert response.get_json()["error"] == "CONFLICT"


@pytest.mark.parametrize("data, content_type", [
    ("not json", "text/plain"),
    ("[1, 2]", "application/json"),
    ("{broken", "application/json"),
])
def test_non_object_body_is_400(client, data, content_type):
    response = client.post("/users", data=data, content_type=content_type)

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_update_birthday_null_versus_absent(client, ana_payload):
    user_id = create(client, {**ana_payload, "birthday": "1990-05-17"}).get_json()["data"]["id"]

    body = client.put(f"/users/{user_id}", json={"first_name": "Anita"}).get_json()
    assert body["data"]["first_name"] == "Anita"
    assert body["data"]["birthday"] == "1990-05-17"

    body = client.put(f"/users/{user_id}", json={"birthday": None}).get_json()
    assert body["data"]["birthday"] is None
    assert body["data"]["first_name"] == "Anita"


def test_update_with_nothing_to_change_is_400(client, ana_payload):
    user_id = create(client, ana_payload).get_json()["data"]["id"]

    response = client.put(f"/users/{user_id}", json={"nickname": "ana"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "NOTHING_TO_UPDATE"


def test_update_missing_user_is_404(client):
    response = client.put("/users/999", json={"first_name": "Ana"})

    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_delete_missing_user_is_404(client):
    assert client.delete("/users/999").status_code == 404


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_oversized_id_is_404(client, method):
    response = getattr(client, method)("/users/99999999999999999999", json={"first_name": "Ana"})

    assert response.status_code == 404
    assert response.get_json()["error"] == "NOT_FOUND"


def test_unmatched_route(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.get_json() == {"success": False, "message": "route not found"}


def test_method_not_allowed_is_json(client):
    response = client.patch("/users/1", json={})

    assert response.status_code == 405
    assert response.get_json()["success"] is False


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json()["database"] == "reachable"


def test_store_failure_is_opaque_500(config):
    # No schema on this engine, so every query fails inside the driver
    engine = create_db_engine(config.database)
    client = create_app(config, engine).test_client()
    try:
        response = client.get("/users")
    finally:
        dispose_engine(engine)

    assert response.status_code == 500
    body = response.get_json()
    assert body["success"] is False
    assert "no such table" not in response.get_data(as_text=True)


def test_init_db_command_creates_table(config):
    engine = create_db_engine(config.database)
    app = create_app(config, engine)
    try:
        result = app.test_cli_runner().invoke(args=["init-db"])
        assert "users table ready" in result.output
        assert app.test_client().get("/users").status_code == 200
    finally:
        dispose_engine(engine)


def test_container_builds_the_service_from_config(config, engine):
    container = build_container(config, engine)

    service = container.get(UserService)

    assert service is container.get(UserService)
    assert service.hasher is container.get(PasswordHasher)
    assert container.get(PasswordHasher).rounds == config.security.password_hash_rounds
    assert service.list_users() == []
