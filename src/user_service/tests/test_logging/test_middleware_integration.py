# src/user_service/tests/test_logging/test_middleware_integration.py
import json
import logging
import uuid

from fastapi import FastAPI
from starlette.testclient import TestClient

from user_service.api.error_handlers import GlobalExceptionMiddleware
from user_service.config.settings import Settings
from user_service.core.logging.builder import setup_logging
from user_service.core.logging.middleware import RequestIDMiddleware
from user_service.exceptions import UserNotFoundError


def make_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(GlobalExceptionMiddleware, logger=logging.getLogger("user_service.errors"))
    app.add_middleware(RequestIDMiddleware)

    @app.get("/hello")
    def hello():
        logging.getLogger("user_service").info("handling hello")
        return {"ok": True}

    @app.get("/missing")
    def missing():
        raise UserNotFoundError("123")

    return app


def test_request_id_in_response_and_logs(tmp_path, capsys):
    setup_logging(Settings(LOG_FORMAT="json", LOG_LEVEL="INFO", LOG_TO_STDOUT=True, LOG_DIR=tmp_path, ENV="production"))

    resp = TestClient(make_app()).get("/hello")
    assert resp.status_code == 200

    rid = resp.headers.get("X-Request-ID")
    assert rid is not None

    stderr = capsys.readouterr().err.strip()
    assert stderr, "Expected logs on stderr but nothing was captured."

    found = False
    for line in stderr.splitlines():
        try:
            rec = json.loads(line)
        except ValueError:
            continue
        if rec.get("request_id") == rid and rec.get("message") == "handling hello":
            found = True
            break

    assert found, "No log line in stderr with matching request_id"


def test_incoming_request_id_is_reused():
    rid = str(uuid.uuid4())

    resp = TestClient(make_app()).get("/hello", headers={"X-Request-ID": rid})

    assert resp.headers["X-Request-ID"] == rid


def test_malformed_incoming_request_id_is_replaced():
    resp = TestClient(make_app()).get("/hello", headers={"X-Request-ID": "not-a-uuid; DROP TABLE users"})

    assert resp.headers["X-Request-ID"] != "not-a-uuid; DROP TABLE users"
    assert uuid.UUID(resp.headers["X-Request-ID"])


def test_error_responses_carry_request_id():
    resp = TestClient(make_app()).get("/missing")

    assert resp.status_code == 404
    assert uuid.UUID(resp.headers["X-Request-ID"])
