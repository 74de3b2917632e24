"""Map engine errors onto HTTP responses."""

from __future__ import annotations

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from poolcascade.core.errors import (
    CreateFailed,
    DependencyExists,
    InvalidPlatform,
    NotMigratable,
    PoolCascadeError,
    PoolNotFound,
    ProjectNotFound,
    TokenNotFound,
    UpdateFailed,
)

_STATUS_BY_ERROR: tuple[tuple[type[PoolCascadeError], int], ...] = (
    (InvalidPlatform, status.HTTP_400_BAD_REQUEST),
    (NotMigratable, status.HTTP_400_BAD_REQUEST),
    (PoolNotFound, status.HTTP_404_NOT_FOUND),
    (ProjectNotFound, status.HTTP_404_NOT_FOUND),
    (TokenNotFound, status.HTTP_404_NOT_FOUND),
    (DependencyExists, status.HTTP_409_CONFLICT),
    (UpdateFailed, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (CreateFailed, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: PoolCascadeError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def pool_cascade_error_handler(request: Request, exc: PoolCascadeError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error(f"[API] {request.method} {request.url.path}: {exc}")
    else:
        logger.info(f"[API] {request.method} {request.url.path} -> {code}: {exc}")
    body: dict = {"error": str(exc), "type": type(exc).__name__}
    if isinstance(exc, DependencyExists):
        body.update(exc.counts)
    return JSONResponse(status_code=code, content=body)
