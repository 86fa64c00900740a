import asyncio
import json
from datetime import timedelta

import httpx
import pytest

from taskboard.clients import (
    AuthRequestError,
    MemorySessionStore,
    NotAuthenticated,
    SessionClient,
    SessionExpired,
    SessionRecord,
    SessionUser,
    TaskboardClient,
)
from taskboard.core.security import ACCESS, create_token
from taskboard.main import app

BASE_URL = "http://taskboard.test"


def stored_session(access="old-access", refresh="refresh-1"):
    return MemorySessionStore(
        SessionRecord(
            access_token=access,
            refresh_token=refresh,
            user=SessionUser(email="hal@example.com", username="hal"),
        )
    )


class FakeApi:
    """Scripted API: /api/tasks answers from `task_statuses`, /api/refresh from `refresh_status`."""

    def __init__(self, task_statuses, refresh_status=200, new_access="new-access"):
        self.task_statuses = list(task_statuses)
        self.refresh_status = refresh_status
        self.new_access = new_access
        self.calls = []
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.calls.append((request.url.path, request.headers.get("Authorization"), request.content))
        if request.url.path == "/api/refresh":
            if self.refresh_status == 200:
                return httpx.Response(200, json={"accessToken": self.new_access})
            return httpx.Response(self.refresh_status, json={"error": "Invalid or expired token"})
        status = self.task_statuses.pop(0)
        return httpx.Response(status, json={"status": status})

    @property
    def paths(self):
        return [path for path, _, _ in self.calls]


def make_client(api, store, on_login_required=None):
    http = httpx.AsyncClient(transport=httpx.MockTransport(api), base_url=BASE_URL)
    return SessionClient(store=store, on_login_required=on_login_required, client=http)


@pytest.mark.asyncio
async def test_success_passes_through_without_refresh():
    api = FakeApi([200])
    async with make_client(api, stored_session()) as client:
        response = await client.get("/api/tasks")
    assert response.status_code == 200
    assert api.calls == [("/api/tasks", "Bearer old-access", b"")]


@pytest.mark.asyncio
async def test_other_errors_returned_as_is():
    api = FakeApi([500])
    async with make_client(api, stored_session()) as client:
        response = await client.get("/api/tasks")
    assert response.status_code == 500
    assert api.paths == ["/api/tasks"]


@pytest.mark.asyncio
async def test_401_refreshes_once_and_retries_with_new_token():
    api = FakeApi([401, 200])
    store = stored_session()
    async with make_client(api, store) as client:
        response = await client.get("/api/tasks")

    assert response.status_code == 200
    assert api.paths == ["/api/tasks", "/api/refresh", "/api/tasks"]
    assert json.loads(api.calls[1][2]) == {"refreshToken": "refresh-1"}
    assert api.calls[2][1] == "Bearer new-access"
    # Only the access token changes
    record = store.get()
    assert record.access_token == "new-access"
    assert record.refresh_token == "refresh-1"
    assert record.user.email == "hal@example.com"


@pytest.mark.asyncio
async def test_retry_result_returned_even_if_401():
    api = FakeApi([401, 401])
    async with make_client(api, stored_session()) as client:
        response = await client.get("/api/tasks")
    assert response.status_code == 401
    assert api.paths.count("/api/refresh") == 1
    assert api.paths.count("/api/tasks") == 2


@pytest.mark.asyncio
async def test_failed_refresh_clears_session_and_raises():
    api = FakeApi([401], refresh_status=401)
    store = stored_session()
    redirects = []
    async with make_client(api, store, on_login_required=lambda: redirects.append("/login")) as client:
        with pytest.raises(SessionExpired):
            await client.get("/api/tasks")

    assert store.get() is None
    assert redirects == ["/login"]
    assert api.paths == ["/api/tasks", "/api/refresh"]


@pytest.mark.asyncio
async def test_no_session_fails_closed():
    api = FakeApi([])
    redirects = []
    async with make_client(api, MemorySessionStore(), on_login_required=lambda: redirects.append("/login")) as client:
        with pytest.raises(NotAuthenticated):
            await client.get("/api/tasks")
        assert client.is_authenticated is False
    assert api.calls == []
    assert redirects == ["/login"]


@pytest.mark.asyncio
async def test_caller_headers_are_kept():
    api = FakeApi([200])
    async with make_client(api, stored_session()) as client:
        await client.get("/api/tasks", headers={"X-Trace": "abc"})
    assert api.requests[0].headers["X-Trace"] == "abc"
    assert api.requests[0].headers["Authorization"] == "Bearer old-access"


@pytest.mark.asyncio
async def test_login_failure_surfaces_api_error():
    def handler(request):
        return httpx.Response(401, json={"error": "User not found"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    store = MemorySessionStore()
    async with SessionClient(store=store, client=http) as client:
        with pytest.raises(AuthRequestError) as exc:
            await client.login("nobody@example.com")
    assert str(exc.value) == "User not found"
    assert exc.value.status_code == 401
    assert store.get() is None


@pytest.mark.asyncio
async def test_end_to_end_against_app(client):
    """Register, let the access token expire, and read tasks through a transparent refresh."""
    http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BASE_URL)
    store = MemorySessionStore()
    async with SessionClient(store=store, client=http) as session:
        record = await session.register("ivy@example.com", "pw", "ivy")
        assert session.is_authenticated
        assert session.user.username == "ivy"

        api = TaskboardClient(session)
        created = await api.create_task("Ship it")

        expired = create_token(ACCESS, {"sub": 1, "email": "ivy@example.com"}, timedelta(seconds=-1))
        store.set(record.model_copy(update={"access_token": expired}))

        tasks = await api.list_tasks(page=1, limit=10)
        assert [task.title for task in tasks.tasks] == ["Ship it"]
        assert tasks.pagination.total_items == 1
        assert store.get().access_token != expired
        assert store.get().refresh_token == record.refresh_token

        users = await api.list_users()
        assert [user.email for user in users.users] == ["ivy@example.com"]

        updated = await api.update_task(created.id, done=True)
        assert updated.done is True
        await api.delete_task(created.id)
        assert (await api.list_tasks()).tasks == []

        session.logout()
        assert not session.is_authenticated


@pytest.mark.asyncio
async def test_concurrent_401s_each_refresh_and_retry():
    refreshes = []
    arrived = 0
    both_arrived = asyncio.Event()

    async def handler(request):
        nonlocal arrived
        if request.url.path == "/api/refresh":
            refreshes.append(json.loads(request.content))
            return httpx.Response(200, json={"accessToken": "new-access"})
        if request.headers["Authorization"] == "Bearer old-access":
            # Hold both requests until each has read the old token
            arrived += 1
            if arrived == 2:
                both_arrived.set()
            await both_arrived.wait()
            return httpx.Response(401, json={"error": "Invalid or expired token"})
        return httpx.Response(200, json={"ok": True})

    store = stored_session()
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    async with SessionClient(store=store, client=http) as client:
        responses = await asyncio.gather(client.get("/api/tasks"), client.get("/api/users"))

    assert [response.status_code for response in responses] == [200, 200]
    assert refreshes == [{"refreshToken": "refresh-1"}, {"refreshToken": "refresh-1"}]
    assert store.get().access_token == "new-access"


@pytest.mark.asyncio
async def test_session_cleared_during_refresh_is_not_recreated():
    store = stored_session()

    def handler(request):
        if request.url.path == "/api/refresh":
            store.clear()  # e.g. logout while the refresh is in flight
            return httpx.Response(200, json={"accessToken": "new-access"})
        if request.headers["Authorization"] == "Bearer old-access":
            return httpx.Response(401)
        return httpx.Response(200, json={"ok": True})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    async with SessionClient(store=store, client=http) as client:
        response = await client.get("/api/tasks")

    assert response.status_code == 200
    assert store.get() is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "refresh_response",
    [
        httpx.Response(200, json={}),
        httpx.Response(200, json={"accessToken": None}),
        httpx.Response(200, json=["new-access"]),
        httpx.Response(200, text="not json"),
    ],
)
async def test_refresh_without_access_token_expires_session(refresh_response):
    paths = []

    def handler(request):
        paths.append(request.url.path)
        if request.url.path == "/api/refresh":
            return refresh_response
        return httpx.Response(401)

    store = stored_session()
    redirects = []
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    async with SessionClient(store=store, on_login_required=lambda: redirects.append("/login"), client=http) as client:
        with pytest.raises(SessionExpired):
            await client.get("/api/tasks")

    assert store.get() is None
    assert redirects == ["/login"]
    assert paths == ["/api/tasks", "/api/refresh"]
