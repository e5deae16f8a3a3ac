"""
Logging for Canvas Notes.

structlog renders every record, including those from stdlib loggers such
as uvicorn and sqlalchemy, through the root logger. Settings come from
config/settings/logging.yaml; setup_logging() arguments override them.

JSON records carry timestamp, level, logger, event, func_name and lineno,
plus whatever is bound in structlog contextvars (request_id, frontend,
method and path inside a request) and any keyword context.

Usage:
    from canvasnotes.backend.core.logging import get_logger, log_with_source

    logger = get_logger(__name__)
    logger.info("Note created", extra={"note_id": 3})
    log_with_source(logger, "canvas", "info", "Note dropped", note_id=3)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from canvasnotes.backend.core.config import find_project_root, load_yaml_config
from canvasnotes.backend.core.config_schema import LoggingSchema

# Values for the explicit `source` field; never derived from logger names
VALID_SOURCES = frozenset({"web", "cli", "canvas", "api", "internal", "unknown"})

NOISY_LOGGERS = ("httpx", "uvicorn.access", "sqlalchemy.engine")

_logging_config: LoggingSchema | None = None


def _load_logging_config() -> LoggingSchema:
    """Read logging.yaml once per process."""
    global _logging_config
    if _logging_config is None:
        _logging_config = LoggingSchema(**load_yaml_config("logging.yaml"))
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and replace the root logger's handlers.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: "console" (coloured) or "json" for the console handler
        enable_console: Write to stdout
        enable_file_logging: Write JSON lines to the rotating log file

    Any argument left as None falls back to logging.yaml.
    """
    config = _load_logging_config()
    level = level or config.level
    format_type = format_type or config.format
    if enable_console is None:
        enable_console = config.handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = config.handlers.file.enabled

    processors = _shared_processors()
    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    def formatter(renderer: Processor) -> logging.Formatter:
        return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)

    json_formatter = formatter(structlog.processors.JSONRenderer())

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if enable_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(
            formatter(structlog.dev.ConsoleRenderer(colors=True))
            if format_type == "console"
            else json_formatter
        )
        root.addHandler(console)

    if enable_file_logging:
        file_config = config.handlers.file
        log_path = _resolve_log_path(file_config.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=file_config.max_bytes,
            backupCount=file_config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log with an explicit `source` field, for code outside a request.

    Raises:
        AttributeError: If level is not a logger method
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
