from taskboard.clients.api_client import TaskboardClient
from taskboard.clients.session_client import (
    AuthRequestError,
    NotAuthenticated,
    SessionClient,
    SessionError,
    SessionExpired,
)
from taskboard.clients.session_store import (
    FileSessionStore,
    MemorySessionStore,
    SessionRecord,
    SessionStore,
    SessionUser,
)

__all__ = [
    "AuthRequestError",
    "FileSessionStore",
    "MemorySessionStore",
    "NotAuthenticated",
    "SessionClient",
    "SessionError",
    "SessionExpired",
    "SessionRecord",
    "SessionStore",
    "SessionUser",
    "TaskboardClient",
]
