"""Loguru setup for the book catalog process.

Every record carries the service name and the request id bound by the HTTP
middleware. Store failures from ``BookRepository`` and request summaries add
the fields in :data:`CONTEXT_FIELDS`, which the console shows after the
message and the JSON file sink writes as top-level keys.
"""

import json
import logging
import sys
from pathlib import Path

from loguru import logger

from book_catalog.runtime.config.config_data import ConfigData, LoggingConfig
from book_catalog.runtime.context import get_config

SERVICE_NAME = "book-catalog"

CONTEXT_FIELDS = ("status_code", "duration_ms", "operation", "error_type")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level> <dim>{extra[context]}</dim>"
)

_LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    # requests are logged by the HTTP middleware
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records (uvicorn, SQLAlchemy) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _add_context(record) -> None:
    extra = record["extra"]
    extra.setdefault("request_id", "-")
    fields = {key: extra[key] for key in CONTEXT_FIELDS if key in extra}
    extra["context"] = " ".join(f"{key}={value}" for key, value in fields.items())

    entry = {
        "time": record["time"].isoformat(),
        "level": record["level"].name,
        "service": extra.get("service", SERVICE_NAME),
        "request_id": extra["request_id"],
        "logger": extra.get("logger_name", record["name"]),
        "message": record["message"],
        **fields,
    }
    if record["exception"] is not None:
        entry["exception"] = repr(record["exception"].value)
    extra["json"] = json.dumps(entry, default=str)


def _json_line(record) -> str:
    return "{extra[json]}\n"


def _add_file_sink(settings: LoggingConfig, verbose: bool) -> None:
    path = Path(settings.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(path),
        level=settings.level,
        format=_json_line if settings.format == "json" else CONSOLE_FORMAT,
        colorize=False,
        rotation=f"{settings.max_size_mb} MB",
        retention=settings.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose,
        diagnose=verbose,
    )


def configure_logging(config: ConfigData | None = None) -> None:
    """Install the console sink, the optional file sink and the stdlib bridge."""
    config = config or get_config()
    settings = config.logging
    verbose = config.app.environment != "production"

    logger.remove()
    logger.configure(
        extra={"request_id": "-", "service": SERVICE_NAME},
        patcher=_add_context,
    )
    logger.add(
        sys.stderr,
        level=settings.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        backtrace=verbose,
        diagnose=verbose,
    )
    if settings.file:
        _add_file_sink(settings, verbose)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name, level in _LIBRARY_LEVELS.items():
        library_logger = logging.getLogger(name)
        library_logger.handlers = []
        library_logger.propagate = True
        library_logger.setLevel(level)

    logger.info(
        "Logging configured for {} (level {}, file {})",
        SERVICE_NAME,
        settings.level,
        settings.file or "none",
    )
