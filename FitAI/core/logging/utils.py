"""
Timing and per-request log lines for the identity service client.
"""

import logging
import time
from typing import Optional


class LogTimer:
    """
    Measures a block and logs how long it took.

    A block that raises is logged at ERROR together with the exception,
    which still propagates.

        with LogTimer("POST /api/auth/login", logger) as timer:
            ...
        timer.duration  # seconds
    """

    def __init__(self, operation: str, logger: logging.Logger, level: int = logging.DEBUG):
        self.operation = operation
        self.logger = logger
        self.level = level
        self.duration: Optional[float] = None
        self._started = 0.0

    def __enter__(self) -> 'LogTimer':
        self.duration = None
        self._started = time.monotonic()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.duration = time.monotonic() - self._started
        if exc is None:
            self.logger.log(self.level, "%s took %.3fs", self.operation, self.duration)
        else:
            self.logger.error("%s failed after %.3fs: %r", self.operation, self.duration, exc)
        return False


class RequestLogger:
    """One line per exchange; statuses of 400 and up log at WARNING."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_request(self, method: str, url: str, status_code: int, duration: float,
                    user: Optional[str] = None) -> None:
        level = logging.WARNING if status_code >= 400 else logging.INFO
        who = f" as {user}" if user else ""
        self.logger.log(level, "%s %s%s -> %d in %.3fs", method, url, who, status_code, duration)


__all__ = [
    'LogTimer',
    'RequestLogger',
]
