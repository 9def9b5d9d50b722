import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase

from user_service.core.config import DatabaseConfig

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def create_db_engine(config: DatabaseConfig) -> Engine:
    """
    Build the pooled engine shared by every repository of one application.

    SQLite is only used for local runs and tests; it does not take the
    QueuePool sizing options, so those are applied to server databases only.
    """
    options = {"echo": config.echo, "future": True}
    if not config.is_sqlite:
        options.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            pool_pre_ping=config.pool_pre_ping,
        )

    engine = create_engine(config.url, **options)
    logger.info(f"Database engine created for dialect '{engine.dialect.name}'")
    return engine


def init_schema(engine: Engine) -> None:
    """Create the users table if it does not exist yet."""
    # Register the mapped tables on Base.metadata
    from user_service.models import tables  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured")


def ping(engine: Engine) -> None:
    """Round-trip a trivial query; raises SQLAlchemyError when unreachable."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def dispose_engine(engine: Engine) -> None:
    """Close every pooled connection."""
    engine.dispose()
    logger.info("Database engine disposed")
