"""Test fixtures — a fresh app, store and registry per test.

Learn: Testing pattern for FastAPI + in-memory state:

1. Each test builds its own app via create_app() and attaches fresh
   components with init_state() (the same code the lifespan runs), so
   nothing leaks between tests.
2. `client` overrides get_current_user so protected routes work without
   real JWTs; `unauthenticated_client` leaves the real auth pipeline on.
3. After the test, close_state() stops every reminder task the registry
   owns — a leaked timer would surface as a pending-task warning.

FakeChannel stands in for a WebSocket in registry/scheduler unit tests.
"""

import asyncio
import json

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from carepoint.main import close_state, create_app, init_state
from carepoint.realtime.dispatcher import EventDispatcher
from carepoint.realtime.registry import ConnectionRegistry

TEST_USER_ID = 7


class FakeChannel:
    """In-memory Channel: records decoded JSON frames."""

    def __init__(self, *, open: bool = True, fail: bool = False, delay: float = 0.0):
        self.open = open
        self.fail = fail
        self.delay = delay
        self.sent: list[dict] = []

    @property
    def is_open(self) -> bool:
        return self.open

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise ConnectionResetError("socket gone")
        if self.delay:
            await asyncio.sleep(self.delay)
        self.sent.append(json.loads(data))

    def types(self) -> list[str]:
        return [m["type"] for m in self.sent]


class RecordingDispatcher:
    """Dispatcher double: records (user_id, event) and reports delivery."""

    def __init__(self, delivered: bool = True):
        self.delivered = delivered
        self.calls = []

    async def dispatch(self, user_id, event) -> bool:
        self.calls.append((user_id, event))
        return self.delivered


@pytest.fixture()
def channel_factory():
    return FakeChannel


@pytest.fixture()
def recording_dispatcher():
    return RecordingDispatcher()


@pytest_asyncio.fixture()
async def registry():
    reg = ConnectionRegistry()
    reg.init()
    try:
        yield reg
    finally:
        await reg.shutdown()


@pytest_asyncio.fixture()
async def dispatcher(registry):
    return EventDispatcher(registry)


@pytest_asyncio.fixture()
async def app():
    """App with fresh state (the lifespan does not run under ASGITransport)."""
    application = create_app()
    init_state(application)
    try:
        yield application
    finally:
        await close_state(application)


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client with get_current_user overridden for testing.

    Learn: All protected routes see user TEST_USER_ID without a real JWT.
    """
    from carepoint.auth.dependencies import CurrentUser, get_current_user

    def override_get_current_user():
        return CurrentUser(user_id=TEST_USER_ID)

    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauthenticated_client(app):
    """HTTP client WITHOUT auth override — for testing real JWT flows."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
