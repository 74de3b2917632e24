"""FastAPI application factory for the pool cascade API."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from config.settings import settings
from poolcascade.api.errors import pool_cascade_error_handler
from poolcascade.core.errors import PoolCascadeError
from poolcascade.core.notifier import MonitorNotifier, Publisher, RedisPublisher

# Rate limiter (shared instance)
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.api_rate_limit])


def create_app(*, publisher: Publisher | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    ``publisher`` overrides the Redis publisher used for monitor
    notifications (tests pass a fake).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        notifier = app.state.notifier
        if notifier is not None and notifier.pending:
            logger.info(f"Waiting for {notifier.pending} monitor notifications")
            await notifier.drain()

    app = FastAPI(
        title="Pool Cascade API",
        version="0.1.0",
        docs_url="/api/docs" if settings.api_debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
    )

    if publisher is None and settings.enable_monitor_publish:
        publisher = RedisPublisher()
    app.state.notifier = MonitorNotifier(publisher) if publisher is not None else None

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_exception_handler(PoolCascadeError, pool_cascade_error_handler)

    # Import and include routers
    from poolcascade.api.routers.health import router as health_router
    from poolcascade.api.routers.holders import router as holders_router
    from poolcascade.api.routers.pools import router as pools_router
    from poolcascade.api.routers.projects import router as projects_router

    app.include_router(health_router)
    app.include_router(projects_router)
    app.include_router(pools_router)
    app.include_router(holders_router)

    return app
