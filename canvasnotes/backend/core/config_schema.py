"""
Schemas for the YAML files in config/settings/.

application.yaml -> ApplicationSchema, database.yaml -> DatabaseSchema,
logging.yaml -> LoggingSchema. Unknown keys are rejected so a typo in a
settings file fails at startup.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

Port = Annotated[int, Field(ge=1, le=65535)]
Seconds = Annotated[int, Field(gt=0)]


class _StrictBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ServerSchema(_StrictBase):
    host: str
    port: Port


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    database: Seconds
    external_api: Seconds


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str = Field(pattern=r"^/")
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema


class DatabaseSchema(_StrictBase):
    """
    Connection settings for the note store.

    For SQLite, name is a file path relative to the project root (or
    ":memory:"); host, port and user are ignored.
    """

    driver: Literal["sqlite+aiosqlite", "postgresql+asyncpg"]
    host: str
    port: Port
    name: str
    user: str
    create_tables: bool
    pool_size: int = Field(ge=1)
    max_overflow: int = Field(ge=0)
    pool_timeout: Seconds
    pool_recycle: int
    echo: bool

    @property
    def is_sqlite(self) -> bool:
        return self.driver.startswith("sqlite")


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int = Field(gt=0)
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["json", "console"]
    handlers: HandlersSchema
