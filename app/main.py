import logging
from collections.abc import Mapping
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from app.cache import cache
from app.config import settings
from app.database import create_schema, engine
from app.errors import ErrorMapper
from app.middleware import RequestTimingMiddleware
from app.routers import posts

VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configure_logging()
    if settings.CREATE_SCHEMA_ON_STARTUP:
        await create_schema(engine)
    await cache.connect()
    logger.info("Blog API started (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    await cache.disconnect()
    await engine.dispose()


def create_app(error_statuses: Mapping[type[Exception], int] | None = None) -> FastAPI:
    """
    Build the application.

    *error_statuses* maps exception classes to HTTP status codes for the
    routers' error responses; ``None`` selects ``DEFAULT_ERROR_STATUSES``.
    """
    app = FastAPI(
        title="Blog Posts API",
        description="Blog posts with comments, backed by a relational store",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.error_mapper = ErrorMapper(error_statuses)

    app.add_middleware(RequestTimingMiddleware)
    app.include_router(posts.router)

    @app.get("/ping", response_class=PlainTextResponse)
    async def ping():
        return "pong"

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION, "cache": cache.stats}

    return app


app = create_app()
