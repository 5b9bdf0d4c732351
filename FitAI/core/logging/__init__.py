"""
Logging setup for the FitAI client.

Every module logs through ``get_logger(__name__)``. ``configure_logging``
puts the client's handlers on the root logger: a colored console stream,
a rotating ``fitai.log`` and a rotating ``fitai_errors.log`` holding only
errors. ``auto_configure`` picks a profile by FITAI_ENV name.

    from FitAI.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Login attempt for email: %s", email)

Passwords and tokens are never logged; emails are.
"""

import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional

BRIEF_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
TRACE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d]: %(message)s"

LOG_FILE = "fitai.log"
ERROR_LOG_FILE = "fitai_errors.log"


@dataclass
class LogConfig:
    """
    Where client logs go and how verbose they are.

    Attributes:
        level: Root level name (DEBUG, INFO, ...)
        log_dir: Directory holding fitai.log and fitai_errors.log
        format_string: Overrides both the console and the file format
        library_levels: Levels for third-party loggers such as aiohttp
    """
    level: str = "INFO"
    log_dir: str = "./logs"
    console_output: bool = True
    file_output: bool = True
    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3
    format_string: Optional[str] = None
    date_format: str = "%Y-%m-%d %H:%M:%S"
    library_levels: Dict[str, str] = field(default_factory=dict)


class ColoredFormatter(logging.Formatter):
    """Colors the level name when writing to an ANSI terminal."""

    PALETTE = {
        logging.DEBUG: "36",
        logging.INFO: "32",
        logging.WARNING: "33",
        logging.ERROR: "31",
        logging.CRITICAL: "35",
    }

    def __init__(self, fmt: str, datefmt: Optional[str] = None, stream=None):
        super().__init__(fmt, datefmt)
        stream = stream or sys.stdout
        self.use_colors = sys.platform != "win32" and getattr(stream, "isatty", lambda: False)()

    def format(self, record: logging.LogRecord) -> str:
        code = self.PALETTE.get(record.levelno)
        if not self.use_colors or code is None:
            return super().format(record)

        # The record is shared with the file handlers
        plain = record.levelname
        record.levelname = f"\033[{code}m{plain}\033[0m"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


class LoggingManager:
    """
    Owns the handlers the client adds to the root logger.

    Re-configuring replaces only those handlers; anything else on the
    root logger (pytest's capture handler, for one) is left alone.
    """

    _instance: Optional['LoggingManager'] = None
    _handlers: List[logging.Handler]

    def __new__(cls) -> 'LoggingManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._handlers = []
        return cls._instance

    def configure(self, config: LogConfig) -> None:
        level = getattr(logging, config.level.upper())
        self.shutdown()
        logging.getLogger().setLevel(level)

        if config.console_output:
            console = logging.StreamHandler(sys.stdout)
            console.setLevel(level)
            console.setFormatter(ColoredFormatter(
                config.format_string or BRIEF_FORMAT, config.date_format, sys.stdout
            ))
            self._install(console)

        if config.file_output:
            Path(config.log_dir).mkdir(parents=True, exist_ok=True)
            formatter = logging.Formatter(config.format_string or TRACE_FORMAT, config.date_format)
            self._install(self._rotating(config, LOG_FILE, level, formatter))
            self._install(self._rotating(config, ERROR_LOG_FILE, logging.ERROR, formatter))

        for name, name_level in config.library_levels.items():
            logging.getLogger(name).setLevel(getattr(logging, name_level.upper()))

        logging.getLogger(__name__).debug("Logging configured at %s", config.level)

    @staticmethod
    def _rotating(config: LogConfig, filename: str, level: int,
                  formatter: logging.Formatter) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            os.path.join(config.log_dir, filename),
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(formatter)
        return handler

    def _install(self, handler: logging.Handler) -> None:
        logging.getLogger().addHandler(handler)
        self._handlers.append(handler)

    def shutdown(self) -> None:
        """Flush, detach and close the client's handlers."""
        root = logging.getLogger()
        for handler in self._handlers:
            handler.flush()
            root.removeHandler(handler)
            handler.close()
        self._handlers = []


_logging_manager = LoggingManager()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(config: LogConfig) -> None:
    _logging_manager.configure(config)


def get_logging_manager() -> LoggingManager:
    return _logging_manager


# Named profiles; the CLI's --env and FITAI_ENV select one
PROFILES: Dict[str, LogConfig] = {
    "development": LogConfig(
        level="DEBUG",
        log_dir="./logs/dev",
        format_string=TRACE_FORMAT,
        library_levels={"aiohttp": "WARNING", "asyncio": "WARNING"},
    ),
    # Installed clients keep the terminal for the form itself
    "production": LogConfig(
        level="INFO",
        console_output=False,
        backup_count=5,
        library_levels={"aiohttp": "ERROR", "asyncio": "ERROR"},
    ),
    "testing": LogConfig(
        level="DEBUG",
        file_output=False,
        format_string="%(levelname)s %(name)s: %(message)s",
        library_levels={"aiohttp": "ERROR"},
    ),
}

PROFILE_ALIASES = {"dev": "development", "prod": "production", "test": "testing"}


def profile_config(env: str) -> LogConfig:
    """Copy of the profile named ``env``; unknown names get development."""
    name = PROFILE_ALIASES.get(env, env)
    profile = PROFILES.get(name, PROFILES["development"])
    return replace(profile, library_levels=dict(profile.library_levels))


def auto_configure(env: Optional[str] = None) -> None:
    """
    Configure logging from a profile name.

    Args:
        env: Profile name; FITAI_ENV (default development) when omitted
    """
    env = (env or os.environ.get("FITAI_ENV", "development")).lower()
    configure_logging(profile_config(env))
    get_logger(__name__).info("Logging profile: %s", env)


__all__ = [
    'LogConfig',
    'LoggingManager',
    'ColoredFormatter',
    'get_logger',
    'configure_logging',
    'get_logging_manager',
    'profile_config',
    'auto_configure',
    'PROFILES',
]
