"""
Configuration for Canvas Notes.

Settings live in config/settings/*.yaml and are validated against the
schemas in config_schema.py. The only secret, DB_PASSWORD (PostgreSQL),
comes from config/.env. Paths are resolved from the directory holding the
.project_root marker.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from canvasnotes.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    LoggingSchema,
)


def find_project_root() -> Path:
    """Walk up from the working directory to the .project_root marker."""
    for directory in (Path.cwd(), *Path.cwd().parents):
        if (directory / ".project_root").exists():
            return directory
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """find_project_root() for entry scripts: exits with a message instead of raising."""
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    config_path = find_project_root() / "config" / "settings" / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    return yaml.safe_load(config_path.read_text()) or {}


class Settings(BaseSettings):
    """Secrets from config/.env or the environment."""

    db_password: str = ""

    model_config = SettingsConfigDict(env_file_encoding="utf-8", case_sensitive=False, extra="ignore")


def _load_validated(schema_cls: type[BaseModel], filename: str) -> Any:
    try:
        return schema_cls(**load_yaml_config(filename))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """All three settings files, validated when constructed."""

    def __init__(self) -> None:
        self.application: ApplicationSchema = _load_validated(ApplicationSchema, "application.yaml")
        self.database: DatabaseSchema = _load_validated(DatabaseSchema, "database.yaml")
        self.logging: LoggingSchema = _load_validated(LoggingSchema, "logging.yaml")


@lru_cache
def get_settings() -> Settings:
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path)) if env_path.exists() else Settings()


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def get_database_url() -> str:
    """
    SQLAlchemy URL for the configured store.

    SQLite names are paths relative to the project root, except ":memory:".
    PostgreSQL gets user, host and port from database.yaml and the password
    from config/.env.
    """
    db = get_app_config().database

    if db.is_sqlite:
        database = db.name if db.name == ":memory:" else str(find_project_root() / db.name)
        url = URL.create(db.driver, database=database)
    else:
        url = URL.create(
            db.driver,
            username=db.user,
            password=get_settings().db_password,
            host=db.host,
            port=db.port,
            database=db.name,
        )
    return url.render_as_string(hide_password=False)


def get_server_base_url() -> tuple[str, float]:
    """(base URL, timeout in seconds) for clients of the running server."""
    app = get_app_config().application
    return f"http://{app.server.host}:{app.server.port}", float(app.timeouts.external_api)
