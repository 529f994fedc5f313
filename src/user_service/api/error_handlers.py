# user_service/api/error_handlers.py
"""
Global exception middleware: the single place where failures become HTTP responses.

How it works:
    - Wraps the downstream app (routers, dependencies, services).
    - On success the downstream response is returned untouched.
    - On any exception it asks the translator for the matching rule and ErrorResponse,
      logs once at the rule's level, and writes the JSON body. It never re-raises.

Log levels per failure category:

| Category                                                    | Level               |
| ----------------------------------------------------------- | ------------------- |
| not found                                                   | TRACE               |
| validation, conflict, domain, business rule, argument, auth | WARNING             |
| timeout, service, repository, database, infra, unknown      | ERROR (+ traceback) |

Register it in the app factory, passing the logger to use:

    app.add_middleware(GlobalExceptionMiddleware, logger=logging.getLogger("user_service.errors"))

Framework-level errors handled inside FastAPI itself (HTTPException, request body
validation -> 422) never reach this middleware.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from user_service.exceptions.translator import (
    TRANSLATION_RULES,
    TranslationRule,
    classify,
    match_rule,
    translate_exception,
)

JSON_MEDIA_TYPE = "application/json"


class GlobalExceptionMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, logger: logging.Logger | None = None,
                 rules: tuple[TranslationRule, ...] = TRANSLATION_RULES):
        super().__init__(app)
        self.logger = logger or logging.getLogger(__name__)
        self.rules = rules

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return self.handle_exception(request, exc)

    def handle_exception(self, request: Request, exc: Exception) -> Response:
        """
        Translate, log and serialize `exc`. Pure apart from the single log call, so
        calling it twice for the same failure yields identical bodies.
        """
        rule = match_rule(exc, self.rules)
        error = translate_exception(exc, request.url.path, self.rules)

        self.logger.log(
            rule.log_level,
            "Request %s %s failed with %s (%s): %s",
            request.method,
            request.url.path,
            error.status,
            error.code,
            exc,
            exc_info=exc if rule.logs_traceback else None,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": error.status,
                "error_code": error.code,
                "exception_code": getattr(exc, "error_code", None),
                "failure_kind": classify(exc).value,
                "rule": rule.name,
            },
        )

        return Response(content=error.to_json_bytes(), status_code=error.status, media_type=JSON_MEDIA_TYPE)
