"""FastAPI dependency injection: DB session, notifier, project service."""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from poolcascade.core.notifier import MonitorNotifier
from poolcascade.core.projects import ProjectService
from poolcascade.db.database import async_session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session (auto-closes)."""
    async with async_session_factory() as session:
        yield session


def get_notifier(request: Request) -> MonitorNotifier | None:
    """Notifier created at app startup (None when publishing is disabled)."""
    return getattr(request.app.state, "notifier", None)


def get_project_service(
    session: AsyncSession = Depends(get_session),
    notifier: MonitorNotifier | None = Depends(get_notifier),
) -> ProjectService:
    return ProjectService(session, notifier=notifier)
