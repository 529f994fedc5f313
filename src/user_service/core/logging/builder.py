# src/user_service/core/logging/builder.py
"""
Logging builder: create and apply a dictConfig logging configuration.

 - `make_dict_config(settings)` builds a dictConfig-compatible mapping.
 - `setup_logging(settings)` applies it once at startup (app factory, test session).

Handler selection:

| LOG_TO_STDOUT | LOG_DIR set | Active handlers                 |
| ------------- | ----------- | ------------------------------- |
| true          | any         | console + error_console         |
| false         | no          | console + error_console         |
| false         | yes         | console + file + error_file     |
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config

from user_service.utils.logging import get_project_name

from . import levels  # noqa: F401 - registers the TRACE level name before dictConfig parses levels
from .formatters import JsonFormatter, ColorFormatter
from .filters import RequestIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)

# Settings type only; calling get_settings() here would read the environment at import time.
from user_service.config.settings import Settings


def _writes_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping for the given settings.

    Loggers configured:
      - root: every active handler at LOG_LEVEL
      - uvicorn.error / uvicorn.access: server logs, not propagated
      - sqlalchemy.engine: WARNING unless ENABLE_SQL_LOGGING (SQL may contain user data)
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "uvicorn.error": {
                "level": settings.LOG_LEVEL,
                "handlers": list(handlers.keys()),
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Initialize logging from settings.

    Creates LOG_DIR when file logging is active, applies the dictConfig and adds a
    RequestIdFilter to the root logger so `%(request_id)s` is always resolvable.
    """
    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger().addFilter(RequestIdFilter())
