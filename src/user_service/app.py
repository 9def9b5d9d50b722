import atexit
import logging
import traceback
from typing import Optional

import click
from flask import Flask, jsonify
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from user_service.core.config import Config
from user_service.core.dependencies import CONTAINER_KEY, DependencyContainer
from user_service.core.exceptions import BaseAPIException
from user_service.core.security import PasswordHasher
from user_service.db import create_db_engine, dispose_engine, init_schema, ping
from user_service.repositories.user_repository import UserRepository
from user_service.routes import users_bp
from user_service.services.user_service import UserService

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal server error occurred."


def build_container(config: Config, engine: Engine) -> DependencyContainer:
    container = DependencyContainer()
    container.register_factory(UserRepository, lambda: UserRepository(engine))
    container.register_factory(
        PasswordHasher, lambda: PasswordHasher(config.security.password_hash_rounds)
    )
    container.register_factory(
        UserService,
        lambda: UserService(container.get(UserRepository), container.get(PasswordHasher)),
    )
    return container


def create_app(config: Optional[Config] = None, engine: Optional[Engine] = None) -> Flask:
    """
    Application factory.

    The engine is opened here and handed to repositories through the
    app's container; tests pass their own config or engine to get an
    isolated instance.
    """
    config = config or Config()
    config.validate()

    logging.basicConfig(
        level=config.app.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    if engine is None:
        engine = create_db_engine(config.database)
        atexit.register(dispose_engine, engine)

    app = Flask(__name__)
    app.config["DEBUG"] = config.app.debug
    app.extensions[CONTAINER_KEY] = build_container(config, engine)

    # ------------------------------------------------------------------ #
    # Blueprints                                                           #
    # ------------------------------------------------------------------ #
    app.register_blueprint(users_bp, url_prefix="/users")

    # ------------------------------------------------------------------ #
    # Error handlers: consistent JSON error envelope                      #
    # ------------------------------------------------------------------ #
    @app.errorhandler(BaseAPIException)
    def api_error(e: BaseAPIException):
        if e.status_code >= 500:
            logger.error(f"{e.error_code}: {e.internal_message}\n{e.traceback or ''}")
        else:
            logger.warning(f"{e.error_code}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"success": False, "message": "route not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"success": False, "message": "method not allowed"}), 405

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return jsonify({"success": False, "message": str(e.description)}), e.code

    @app.errorhandler(SQLAlchemyError)
    def db_error(e):
        logger.error(f"Database error: {e}\n{traceback.format_exc()}")
        return jsonify({"success": False, "message": INTERNAL_ERROR_MESSAGE}), 500

    @app.errorhandler(Exception)
    def internal_error(e):
        logger.error(f"Unhandled error: {e}\n{traceback.format_exc()}")
        return jsonify({"success": False, "message": INTERNAL_ERROR_MESSAGE}), 500

    # ------------------------------------------------------------------ #
    # Health check                                                         #
    # ------------------------------------------------------------------ #
    @app.get("/health")
    def health():
        """Liveness + readiness probe. Returns 503 if DB is unreachable."""
        try:
            ping(engine)
            return jsonify({"status": "ok", "database": "reachable"}), 200
        except SQLAlchemyError as exc:
            logger.error(f"Health check failed: {exc}")
            return jsonify({"status": "error", "database": "unreachable"}), 503

    # ------------------------------------------------------------------ #
    # CLI                                                                  #
    # ------------------------------------------------------------------ #
    @app.cli.command("init-db")
    def init_db_command():
        """Create the users table if it does not exist."""
        init_schema(engine)
        click.echo("users table ready")

    return app


if __name__ == "__main__":
    settings = Config()
    application = create_app(settings)
    application.run(debug=settings.app.debug, host=settings.app.host, port=settings.app.port)
