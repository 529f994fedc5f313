"""
Application factory.

    uvicorn user_service.main:create_app --factory

Middleware order matters: Starlette runs the middleware added last first, so
RequestIDMiddleware wraps GlobalExceptionMiddleware and error responses carry
`X-Request-ID` too.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from user_service import __version__
from user_service.api.error_handlers import GlobalExceptionMiddleware
from user_service.api.v1 import api_router
from user_service.config.settings import Settings, get_settings
from user_service.core.logging import RequestIDMiddleware, setup_logging
from user_service.database.base import Base
from user_service.database.session import dispose_engine, get_engine

logger = logging.getLogger(__name__)

ERROR_LOGGER_NAME = "user_service.errors"


def create_app(settings: Settings | None = None, *, configure_logging: bool = True,
               create_tables: bool = True) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        settings: defaults to the cached environment settings
        configure_logging: apply dictConfig (tests that rely on caplog pass False)
        create_tables: create missing tables on startup (local SQLite convenience)
    """
    settings = settings or get_settings()

    if configure_logging:
        setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if create_tables:
            async with get_engine().begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("app.startup", extra={"env": settings.ENV})
        yield
        await dispose_engine()
        logger.info("app.shutdown")

    app = FastAPI(title="User Service", version=__version__, lifespan=lifespan)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    app.add_middleware(GlobalExceptionMiddleware, logger=logging.getLogger(ERROR_LOGGER_NAME))
    app.add_middleware(RequestIDMiddleware)

    return app

