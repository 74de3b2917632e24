"""API client wired to the per-test database session."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from poolcascade.api.app import create_app, limiter
from poolcascade.api.dependencies import get_session


class FakePublisher:
    def __init__(self):
        self.sent: list[tuple[str, dict]] = []

    async def publish(self, topic, payload):
        self.sent.append((topic, payload))


@pytest_asyncio.fixture
async def publisher():
    return FakePublisher()


@pytest_asyncio.fixture
async def app(db_session, publisher):
    app = create_app(publisher=publisher)

    async def _session_override():
        yield db_session

    app.dependency_overrides[get_session] = _session_override
    limiter.reset()
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
