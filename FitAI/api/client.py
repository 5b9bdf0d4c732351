"""
HTTP client for the FitAI identity service.
Uses a shared aiohttp.ClientSession so repeated submissions reuse connections.

Calls never raise for network or service failures; they return an ApiResult
that is either ``ok`` with the decoded body or carries a ClientError.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import aiohttp

from FitAI.config import config
from FitAI.core.client.utils import ClientError, ServiceError, TransportError
from FitAI.core.logging import get_logger
from FitAI.core.logging.utils import LogTimer, RequestLogger

logger = get_logger(__name__)

JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class SessionManager:
    """
    Singleton manager for aiohttp.ClientSession.

    Provides a shared session across all client instances,
    enabling connection pooling and reducing overhead. The session and
    its lock belong to the event loop that created them; a call from
    another loop gets a fresh pair.
    """

    _instance: Optional['SessionManager'] = None
    _session: Optional[aiohttp.ClientSession] = None
    _lock: Optional[asyncio.Lock] = None
    _loop: Optional[asyncio.AbstractEventLoop] = None

    def __new__(cls) -> 'SessionManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _bind(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._loop is not loop:
            # A session bound to another loop can be neither used nor closed here
            self._session = None
            self._lock = asyncio.Lock()
            self._loop = loop

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create the shared aiohttp session for the running loop."""
        self._bind(asyncio.get_running_loop())
        if self._session is None or self._session.closed:
            async with self._lock:
                if self._session is None or self._session.closed:
                    connector = aiohttp.TCPConnector(
                        limit_per_host=4,
                        ttl_dns_cache=300,
                    )
                    timeout = aiohttp.ClientTimeout(
                        total=config.REQUEST_TIMEOUT,
                        connect=config.CONNECT_TIMEOUT,
                    )
                    self._session = aiohttp.ClientSession(
                        connector=connector,
                        timeout=timeout,
                        headers=JSON_HEADERS,
                    )
        return self._session

    async def close(self) -> None:
        """Close the shared session if it belongs to the running loop."""
        if self._loop is asyncio.get_running_loop():
            async with self._lock:
                if self._session and not self._session.closed:
                    await self._session.close()
        self._session = None
        self._lock = None
        self._loop = None


_session_manager = SessionManager()


@dataclass(frozen=True)
class ApiResult:
    """Outcome of one call: either ``ok`` with ``value`` or failed with ``error``."""
    ok: bool
    value: Dict[str, Any] = field(default_factory=dict)
    error: Optional[ClientError] = None

    @classmethod
    def success(cls, value: Dict[str, Any]) -> 'ApiResult':
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ClientError) -> 'ApiResult':
        return cls(ok=False, error=error)

    @property
    def token(self) -> Optional[str]:
        return self.value.get("token") if self.ok else None


class IdentityServiceClient:
    """
    Client for the login and registration endpoints.
    """

    def __init__(self, base_url: Optional[str] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Args:
            base_url: Service origin; defaults to the configured FITAI_API_URL
            session: Session to use instead of the shared one
        """
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self._session = session
        self._request_logger = RequestLogger(logger)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None:
            return self._session
        return await _session_manager.get_session()

    async def login(self, email: str, password: str) -> ApiResult:
        """
        Exchange credentials for a session token.

        Returns:
            ApiResult whose value holds ``token`` on success
        """
        logger.info("Login attempt for email: %s", email)
        return await self._post_json(
            config.LOGIN_PATH,
            {"email": email, "password": password},
            user=email,
        )

    async def register(self, username: str, email: str, password: str) -> ApiResult:
        """
        Create an account; the service logs the new user in immediately.

        Returns:
            ApiResult whose value holds ``token`` on success
        """
        logger.info("Registration attempt for email: %s", email)
        return await self._post_json(
            config.REGISTER_PATH,
            {"username": username, "email": email, "password": password},
            user=email,
        )

    async def _post_json(self, path: str, payload: Dict[str, Any],
                         user: Optional[str] = None) -> ApiResult:
        url = f"{self.base_url}{path}"
        timer = LogTimer(f"POST {path}", logger)
        malformed = False
        data: Any = None

        try:
            session = await self._get_session()
            with timer:
                async with session.post(url, json=payload, headers=JSON_HEADERS) as response:
                    status = response.status
                    try:
                        data = await response.json(content_type=None)
                    except ValueError:
                        malformed = True
        except (aiohttp.ClientError, asyncio.TimeoutError, RuntimeError) as e:
            return ApiResult.failure(
                TransportError(f"Could not reach identity service: {e!r}", {"url": url})
            )

        self._request_logger.log_request("POST", url, status, timer.duration or 0.0, user=user)

        if malformed or data is None:
            return ApiResult.failure(
                TransportError("Identity service sent an unreadable response", {"status": status})
            )
        return classify_response(status, data)


def classify_response(status: int, data: Any) -> ApiResult:
    """
    Turn a decoded response into an ApiResult.

    2xx bodies must carry a string ``token``; other statuses become a
    ServiceError holding the body's ``error`` text when there is one.
    """
    if 200 <= status < 300:
        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            return ApiResult.failure(
                TransportError("Identity service response did not include a session token",
                               {"status": status})
            )
        return ApiResult.success(data)

    server_message = data.get("error") if isinstance(data, dict) else None
    if not isinstance(server_message, str) or not server_message.strip():
        server_message = None
    return ApiResult.failure(ServiceError(status, server_message))


async def close_session() -> None:
    """
    Close the shared aiohttp session.

    Should be called when the client shuts down
    to properly release resources.
    """
    await _session_manager.close()


__all__ = ["ApiResult", "IdentityServiceClient", "classify_response", "close_session"]
