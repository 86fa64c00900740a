import logging
from typing import Any, Callable, Dict, Optional

import httpx

from taskboard.clients.session_store import MemorySessionStore, SessionRecord, SessionStore, SessionUser

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Base class for client-side session failures."""


class NotAuthenticated(SessionError):
    """No stored session to authenticate with."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class SessionExpired(SessionError):
    """The refresh token was rejected; the stored session has been cleared."""

    def __init__(self, message: str = "Session expired"):
        super().__init__(message)


class AuthRequestError(SessionError):
    """Login or registration was refused by the API."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class SessionClient:
    """
    HTTP client that authenticates every request with the stored access token.

    A 401 triggers exactly one refresh call followed by exactly one retry of
    the original request. Concurrent 401s each refresh on their own.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5175",
        store: Optional[SessionStore] = None,
        on_login_required: Optional[Callable[[], None]] = None,
        api_prefix: str = "/api",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.store = store or MemorySessionStore()
        self.on_login_required = on_login_required
        self.api_prefix = api_prefix
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "SessionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def is_authenticated(self) -> bool:
        record = self.store.get()
        return bool(record and record.access_token and record.refresh_token)

    @property
    def user(self) -> Optional[SessionUser]:
        record = self.store.get()
        return record.user if record else None

    def _login_required(self) -> None:
        if self.on_login_required is not None:
            self.on_login_required()

    async def _authenticate(self, path: str, body: Dict[str, Any]) -> SessionRecord:
        response = await self.client.post(f"{self.api_prefix}{path}", json=body)
        if response.is_error:
            try:
                message = response.json().get("error")
            except ValueError:
                message = None
            raise AuthRequestError(message or f"{path.strip('/').capitalize()} failed", response.status_code)

        data = response.json()
        record = SessionRecord(
            access_token=data["accessToken"],
            refresh_token=data["refreshToken"],
            user=SessionUser(email=data["email"], username=data.get("username")),
        )
        self.store.set(record)
        return record

    async def login(self, email: str, password: Optional[str] = None, username: Optional[str] = None) -> SessionRecord:
        """Sign in and persist the returned token pair."""
        return await self._authenticate("/login", {"email": email, "password": password, "username": username})

    async def register(self, email: str, password: Optional[str], username: str) -> SessionRecord:
        """Create an account and persist the returned token pair."""
        return await self._authenticate("/register", {"email": email, "password": password, "username": username})

    def logout(self) -> None:
        self.store.clear()

    async def _refresh(self, refresh_token: str) -> Optional[str]:
        """Return a new access token, or None when the API refuses the refresh token
        or answers without one."""
        response = await self.client.post(
            f"{self.api_prefix}/refresh", json={"refreshToken": refresh_token}
        )
        if not response.is_success:
            logger.info("Token refresh refused with status %s", response.status_code)
            return None
        try:
            access_token = response.json().get("accessToken")
        except (ValueError, AttributeError):
            access_token = None
        if not isinstance(access_token, str) or not access_token:
            logger.warning("Token refresh returned no access token")
            return None
        return access_token

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send an authenticated request, refreshing the access token once on a 401."""
        record = self.store.get()
        if record is None:
            self._login_required()
            raise NotAuthenticated()

        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {record.access_token}"
        response = await self.client.request(method, url, headers=headers, **kwargs)
        if response.status_code != 401:
            return response

        new_access_token = await self._refresh(record.refresh_token)
        if new_access_token is None:
            self.store.clear()
            self._login_required()
            raise SessionExpired()

        # Re-read so a concurrent write to the record is not lost
        current = self.store.get()
        if current is not None:
            current.access_token = new_access_token
            self.store.set(current)

        headers["Authorization"] = f"Bearer {new_access_token}"
        return await self.client.request(method, url, headers=headers, **kwargs)

    authenticated_request = request

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
