# src/user_service/core/logging/middleware.py
"""
Request ID middleware for FastAPI / Starlette.

Every request gets a correlation id that ends up on each LogRecord (through
RequestIdFilter and the contextvar in filters.py) and on the response as the
`X-Request-ID` header.

 - An incoming `X-Request-ID` is reused when it parses as a UUID; anything else
   is replaced by a fresh uuid4 so clients cannot inject arbitrary text into logs.
 - The contextvar is reset in `finally` so nothing leaks into the next request
   handled by the same task.

Register it outermost so error responses written by GlobalExceptionMiddleware
also carry the header:

    app.add_middleware(GlobalExceptionMiddleware)
    app.add_middleware(RequestIDMiddleware)  # added last = runs first
"""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import set_request_id, reset_request_id

REQUEST_ID_HEADER = "X-Request-ID"


def _resolve_request_id(incoming: str | None) -> str:
    if incoming:
        try:
            uuid.UUID(incoming)
            return incoming
        except ValueError:
            pass
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Set a request id for each incoming request and echo it on the response.
    """

    async def dispatch(self, request: Request, call_next):
        rid = _resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
