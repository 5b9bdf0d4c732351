"""
Session token storage.

The form only ever writes the token; reading it back is for whoever opens
the authenticated part of the client. File storage uses async I/O so the
event loop is not blocked while a login completes.
"""
import asyncio
import json
import os
from typing import Optional, Protocol

import aiofiles
import aiofiles.os

from FitAI.core.client.utils import SessionStoreError
from FitAI.core.logging import get_logger

logger = get_logger(__name__)


class SessionStore(Protocol):
    """Single slot holding the bearer token of the current session."""

    async def set(self, token: str) -> None:
        ...

    async def get(self) -> Optional[str]:
        ...


class MemorySessionStore:
    """Keeps the token in memory for the lifetime of the process."""

    def __init__(self, token: Optional[str] = None):
        self._token = token
        self.writes = 0

    async def set(self, token: str) -> None:
        self._token = token
        self.writes += 1

    async def get(self) -> Optional[str]:
        return self._token


class FileSessionStore:
    """Persists the token as JSON so it survives restarts."""

    def __init__(self, path: str):
        self._path = os.path.abspath(os.path.expanduser(path))
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> str:
        return self._path

    async def set(self, token: str) -> None:
        """
        Write ``token`` to the session file, replacing any previous one.

        Raises:
            SessionStoreError: if the file could not be written
        """
        directory = os.path.dirname(self._path)
        try:
            async with self._write_lock:
                if directory:
                    await aiofiles.os.makedirs(directory, exist_ok=True)
                async with aiofiles.open(self._path, "w", encoding="utf-8") as f:
                    await f.write(json.dumps({"token": token}))
        except OSError as e:
            raise SessionStoreError(f"Could not write session file: {e}", {"path": self._path}) from e
        logger.debug("Session token stored at %s", self._path)

    async def get(self) -> Optional[str]:
        """Return the stored token, or None when there is none."""
        try:
            async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                data = json.loads(await f.read())
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self._path, e)
            return None

        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) else None


__all__ = ['SessionStore', 'MemorySessionStore', 'FileSessionStore']
