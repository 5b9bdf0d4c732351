"""
Navigation triggers used after a successful login.
"""
from typing import Callable, List, Optional, Protocol

from FitAI.core.logging import get_logger

logger = get_logger(__name__)


class Navigator(Protocol):
    """Moves the user to another page of the client."""

    def go_to(self, path: str) -> None:
        ...


class RecordingNavigator:
    """Remembers every destination instead of moving anywhere."""

    def __init__(self):
        self.visited: List[str] = []

    def go_to(self, path: str) -> None:
        self.visited.append(path)

    @property
    def current(self) -> Optional[str]:
        return self.visited[-1] if self.visited else None


class ConsoleNavigator:
    """
    Reports the destination on the terminal and notifies a callback.

    ``app_url`` is the origin of the client pages; without one the bare
    path is shown.
    """

    def __init__(self, app_url: str = "", on_navigate: Optional[Callable[[str], None]] = None,
                 output: Callable[[str], None] = print):
        self._app_url = app_url.rstrip("/")
        self._on_navigate = on_navigate
        self._output = output
        self.destination: Optional[str] = None

    def go_to(self, path: str) -> None:
        self.destination = f"{self._app_url}{path}"
        logger.info("Navigating to %s", self.destination)
        self._output(f"Signed in. Continue at {self.destination}")
        if self._on_navigate:
            self._on_navigate(path)


__all__ = ['Navigator', 'RecordingNavigator', 'ConsoleNavigator']
