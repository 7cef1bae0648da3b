from .barriers import BARRIERS, handle_barriers
from .session import BrowserSession, BrowserSessionManager, SessionStore

__all__ = [
    "BARRIERS",
    "BrowserSession",
    "BrowserSessionManager",
    "SessionStore",
    "handle_barriers",
]
