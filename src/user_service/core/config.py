import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()

DIALECT_DRIVERS = {
    "postgresql": ("postgresql+psycopg2", 5432),
    "mysql": ("mysql+pymysql", 3306),
}


@dataclass
class DatabaseConfig:
    """Database configuration settings"""
    url: str
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 3600
    pool_pre_ping: bool = True
    echo: bool = False  # Log SQL queries

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


@dataclass
class SecurityConfig:
    """Security-related configuration"""
    password_hash_rounds: int = 10


@dataclass
class AppConfig:
    """Application configuration"""
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def build_database_url(
    dialect: str,
    host: str,
    user: Optional[str],
    password: Optional[str],
    name: Optional[str],
    port: Optional[int] = None,
) -> str:
    """Assemble a SQLAlchemy URL from discrete connection settings."""
    if dialect not in DIALECT_DRIVERS:
        raise ValueError(f"Unsupported DB_DIALECT: {dialect}")

    driver, default_port = DIALECT_DRIVERS[dialect]
    url = URL.create(
        drivername=driver,
        username=user or None,
        password=password or None,
        host=host,
        port=port or default_port,
        database=name or None,
    )
    return url.render_as_string(hide_password=False)


class Config:
    def __init__(self):
        self.dialect = os.getenv("DB_DIALECT", "postgresql").lower()

        url = os.getenv("DATABASE_URL")
        if not url:
            port = os.getenv("DB_PORT")
            url = build_database_url(
                dialect=self.dialect,
                host=os.getenv("DB_HOST", "localhost"),
                user=os.getenv("DB_USER"),
                password=os.getenv("DB_PASSWORD"),
                name=os.getenv("DB_NAME", "crud_api"),
                port=int(port) if port else None,
            )

        # Database configuration
        self.database = DatabaseConfig(
            url=url,
            pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
            pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
            pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "3600")),
            pool_pre_ping=_env_bool("DB_POOL_PRE_PING", "true"),
            echo=_env_bool("DB_ECHO"),
        )

        # Security configuration
        self.security = SecurityConfig(
            password_hash_rounds=int(os.getenv("BCRYPT_ROUNDS", "10")),
        )

        # App configuration
        self.app = AppConfig(
            debug=_env_bool("DEBUG"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> None:
        """Validate critical configuration"""
        if not self.database.url:
            raise ValueError("DATABASE_URL is required")

        if self.dialect not in DIALECT_DRIVERS:
            raise ValueError(f"Unsupported DB_DIALECT: {self.dialect}")

        # bcrypt accepts a cost factor between 4 and 31
        if not 4 <= self.security.password_hash_rounds <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")

        if self.database.pool_size < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
