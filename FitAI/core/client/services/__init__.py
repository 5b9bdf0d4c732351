"""
Services the authentication form depends on: session storage,
navigation and deferred callbacks.
"""

from .navigation import ConsoleNavigator, Navigator, RecordingNavigator
from .scheduler import ScheduledTask, Scheduler
from .session_store import FileSessionStore, MemorySessionStore, SessionStore

__all__ = [
    'ConsoleNavigator',
    'Navigator',
    'RecordingNavigator',
    'ScheduledTask',
    'Scheduler',
    'FileSessionStore',
    'MemorySessionStore',
    'SessionStore',
]
