# src/user_service/core/logging/filters.py
"""
Logging filters.

- RequestIdFilter: guarantees every LogRecord has a `request_id` attribute, taken
  from (in order) an explicit `extra={"request_id": ...}`, the per-request
  contextvar set by RequestIDMiddleware, or the sentinel "-".
- RedactFilter: masks record attributes whose names look sensitive before any
  handler/formatter sees them.

The request id lives in a `contextvars.ContextVar` so it follows a request across
awaits and tasks spawned from it, which `threading.local()` would not.
"""

import logging
from logging import LogRecord
import contextvars

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """
    Set the request id in the current context and return the token to allow reset.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token) -> None:
    """
    Restore the contextvar to the value it had before the matching set_request_id().
    """
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Annotate records with `request_id`; never drops a record.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    """
    Replace the value of sensitive record attributes (usually coming from `extra`)
    with a fixed marker.
    """

    SENSITIVE = {
        "password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "connection_string",
    }
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
