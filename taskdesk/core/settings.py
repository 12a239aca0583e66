"""Application settings and configuration utilities."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.engine import URL

# Load environment variables from .env file
load_dotenv()


def _env(name: str, default: str | None = None):
    return lambda: os.getenv(name, default)


def _env_int(name: str, default: int):
    return lambda: int(os.getenv(name, str(default)))


@dataclass(frozen=True)
class Settings:
    """Immutable application settings derived from environment variables."""

    project_name: str = field(default_factory=_env("PROJECT_NAME", "Taskdesk"))
    version: str = field(default_factory=_env("PROJECT_VERSION", "0.1.0"))
    api_prefix: str = field(default_factory=_env("API_PREFIX", "/api"))
    environment: str = field(default_factory=_env("ENVIRONMENT", "local"))
    log_level: str = field(default_factory=_env("LOG_LEVEL", "INFO"))

    # Local server the desktop front end talks to
    host: str = field(default_factory=_env("HOST", "127.0.0.1"))
    port: int = field(default_factory=_env_int("PORT", 8000))

    # Database: a full URL wins, otherwise PostgreSQL parts, otherwise SQLite
    database_url_override: str | None = field(default_factory=_env("DATABASE_URL"))
    db_host: str | None = field(default_factory=_env("DB_HOST"))
    db_port: int = field(default_factory=_env_int("DB_PORT", 5432))
    db_user: str = field(default_factory=_env("DB_USER", "todo_user"))
    db_password: str = field(default_factory=_env("DB_PASSWORD", ""))
    db_name: str = field(default_factory=_env("DB_NAME", "todo_db"))
    db_sslmode: str = field(default_factory=_env("DB_SSLMODE", "disable"))

    @property
    def database_path(self) -> str:
        """Return path to SQLite database file."""
        db_path = os.getenv("DATABASE_PATH")
        if db_path:
            return db_path
        # Default: taskdesk.db in the project root
        project_dir = Path(__file__).parent.parent.parent
        return str(project_dir / "taskdesk.db")

    @property
    def database_url(self) -> str:
        """Return the SQLAlchemy connection string."""
        if self.database_url_override:
            return self.database_url_override
        if self.db_host:
            url = URL.create(
                "postgresql+psycopg2",
                username=self.db_user,
                password=self.db_password or None,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
                query={"sslmode": self.db_sslmode},
            )
            return url.render_as_string(hide_password=False)
        return f"sqlite:///{self.database_path}"


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()
