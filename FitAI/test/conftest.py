"""
Test configuration and fixtures for the FitAI client tests.

Provides:
- A fake identity service client returning canned ApiResults
- In-memory session store and recording navigator
- A manually advanced scheduler for the delayed tab switch
- An in-process aiohttp identity service for HTTP client tests
"""

import asyncio
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from FitAI.api.client import ApiResult, close_session
from FitAI.core.client.auth import AuthDispatcher, AuthFormController
from FitAI.core.client.services import MemorySessionStore, RecordingNavigator, ScheduledTask
from FitAI.core.client.utils import ServiceError, TransportError
from FitAI.core.logging import configure_logging, profile_config


class FakeIdentityClient:
    """Stands in for IdentityServiceClient; replies with queued results."""

    def __init__(self):
        self.login_result: ApiResult = ApiResult.success({"token": "T1"})
        self.register_result: ApiResult = ApiResult.success({"token": "T2"})
        self.calls: List[Tuple[str, Dict[str, str]]] = []
        self.gate: Optional[asyncio.Event] = None
        self.raises: Optional[BaseException] = None

    async def _reply(self, name: str, payload: Dict[str, str], result: ApiResult) -> ApiResult:
        self.calls.append((name, payload))
        if self.gate is not None:
            await self.gate.wait()
        if self.raises is not None:
            raise self.raises
        return result

    async def login(self, email: str, password: str) -> ApiResult:
        return await self._reply("login", {"email": email, "password": password}, self.login_result)

    async def register(self, username: str, email: str, password: str) -> ApiResult:
        payload = {"username": username, "email": email, "password": password}
        return await self._reply("register", payload, self.register_result)


class ManualScheduler:
    """Scheduler whose clock only moves when a test advances it."""

    def __init__(self):
        self.now = 0.0
        self.tasks: List[Tuple[float, ScheduledTask]] = []

    def call_later(self, delay: float, callback) -> ScheduledTask:
        task = ScheduledTask(callback, delay)
        self.tasks.append((self.now + delay, task))
        return task

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [(at, task) for at, task in self.tasks if at <= self.now]
        for entry in due:
            self.tasks.remove(entry)
            entry[1].run()


def service_error(status: int, message: Optional[str] = None) -> ApiResult:
    return ApiResult.failure(ServiceError(status, message))


def transport_error() -> ApiResult:
    return ApiResult.failure(TransportError("Could not reach identity service"))


def quiet_logging_config():
    """Testing profile without a console handler; pytest captures records itself."""
    return replace(profile_config("testing"), console_output=False)


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    configure_logging(quiet_logging_config())


@pytest.fixture
def fake_api() -> FakeIdentityClient:
    return FakeIdentityClient()


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def dispatcher(fake_api, session_store, navigator) -> AuthDispatcher:
    return AuthDispatcher(fake_api, session_store, navigator)


@pytest.fixture
def controller(dispatcher, scheduler) -> AuthFormController:
    form = AuthFormController(dispatcher, scheduler=scheduler)
    yield form
    form.dispose()


Reply = Tuple[int, Union[Dict[str, Any], str, None]]


class IdentityService:
    """In-process identity service whose replies are set per test."""

    def __init__(self):
        self.replies: Dict[str, Reply] = {
            "/api/auth/login": (200, {"token": "T1"}),
            "/api/auth/register": (201, {"token": "T2"}),
        }
        self.requests: List[Dict[str, Any]] = []
        self.server: Optional[TestServer] = None

    @property
    def base_url(self) -> str:
        return f"http://{self.server.host}:{self.server.port}"

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append({
            "path": request.path,
            "content_type": request.headers.get("Content-Type", ""),
            "body": await request.json(),
        })
        status, body = self.replies[request.path]
        if isinstance(body, str):
            return web.Response(status=status, text=body, content_type="text/html")
        if body is None:
            return web.Response(status=status)
        return web.json_response(body, status=status)


@pytest_asyncio.fixture
async def identity_service():
    """Start an identity service on a free local port."""
    service = IdentityService()
    app = web.Application()
    app.router.add_post("/api/auth/login", service.handle)
    app.router.add_post("/api/auth/register", service.handle)

    service.server = TestServer(app)
    await service.server.start_server()

    yield service

    await close_session()
    await service.server.close()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as talking to a local HTTP server"
    )
