"""API server: runs uvicorn inside the existing asyncio event loop."""

from __future__ import annotations

import uvicorn
from loguru import logger

from config.settings import settings


async def run_api_server() -> None:
    """Start uvicorn serving the FastAPI app.

    Uses ``uvicorn.Server.serve()`` so it can run as a task next to
    shutdown handling in ``poolcascade.main``.
    """
    from poolcascade.api.app import create_app

    app = create_app()
    config = uvicorn.Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.api_debug else "warning",
        access_log=settings.api_debug,
        log_config=None,  # keep the loguru intercept from setup_logger
        loop="none",  # use the existing event loop
    )
    server = uvicorn.Server(config)
    logger.info(f"Pool cascade API starting on http://{settings.api_host}:{settings.api_port}")
    await server.serve()
