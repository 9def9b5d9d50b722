import pytest

from user_service.app import create_app
from user_service.core.config import Config
from user_service.core.security import PasswordHasher
from user_service.db import create_db_engine, dispose_engine, init_schema
from user_service.repositories.user_repository import UserRepository
from user_service.services.user_service import UserService


@pytest.fixture
def config(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'users.db'}")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return Config()


@pytest.fixture
def engine(config):
    engine = create_db_engine(config.database)
    init_schema(engine)
    yield engine
    dispose_engine(engine)


@pytest.fixture
def repository(engine):
    return UserRepository(engine)


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def service(repository, hasher):
    return UserService(repository, hasher)


@pytest.fixture
def app(config, engine):
    return create_app(config, engine)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ana_payload():
    return {
        "first_name": "Ana",
        "last_name": "Lopez",
        "email": "ana@x.com",
        "password": "secret1",
    }
