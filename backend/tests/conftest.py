"""Test fixtures: in-memory Supabase behind httpx.MockTransport and a FastAPI test client."""

import json
import uuid
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.main import create_app
from app.services import get_auth_client, get_storage_bucket, get_todo_table
from app.services.auth_service import AuthClient
from app.services.storage_service import StorageBucket
from app.services.todo_service import TodoTable

SUPABASE_URL = "http://supabase.test"
ANON_KEY = "anon-key"
BUCKET = "temp_1"

_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _error(status: int, **body) -> httpx.Response:
    return httpx.Response(status, json=body)


class FakeSupabase:
    """Just enough of GoTrue, PostgREST and Storage for the service clients."""

    def __init__(self):
        self.passwords: dict[str, str] = {}
        self.user_ids: dict[str, str] = {}
        self.access_tokens: dict[str, str] = {}  # token -> email
        self.refresh_tokens: dict[str, str] = {}
        self.confirm_email = False
        self.todos: list[dict] = []
        self.objects: dict[str, dict] = {}
        self.failing: set[str] = set()
        self.requests: list[httpx.Request] = []
        self._clock = 0

    # --- helpers -------------------------------------------------------

    def _now(self) -> str:
        self._clock += 1
        return (_EPOCH + timedelta(seconds=self._clock)).isoformat()

    def add_user(self, email: str = "alice@example.com", password: str = "secret") -> str:
        self.passwords[email] = password
        self.user_ids[email] = str(uuid.uuid4())
        return email

    def issue_session(self, email: str) -> dict:
        access = f"access-{uuid.uuid4().hex}"
        refresh = f"refresh-{uuid.uuid4().hex}"
        self.access_tokens[access] = email
        self.refresh_tokens[refresh] = email
        return {
            "access_token": access,
            "refresh_token": refresh,
            "token_type": "bearer",
            "expires_in": 3600,
            "user": self._user(email),
        }

    def _user(self, email: str) -> dict:
        return {"id": self.user_ids[email], "email": email, "aud": "authenticated"}

    def add_todo(self, title: str, completed: bool = False) -> dict:
        now = self._now()
        row = {
            "id": str(uuid.uuid4()),
            "title": title,
            "completed": completed,
            "created_at": now,
            "updated_at": now,
        }
        self.todos.append(row)
        return row

    def add_object(self, name: str, data: bytes = b"data") -> None:
        self.objects[name] = {
            "id": str(uuid.uuid4()),
            "data": data,
            "mimetype": "application/octet-stream",
            "created_at": self._now(),
        }

    # --- dispatch ------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        body = None
        if request.content and request.headers.get("content-type") == "application/json":
            body = json.loads(request.content)

        if path.startswith("/auth/v1/"):
            return self._auth(request, path[len("/auth/v1/"):], body)
        if path.startswith("/rest/v1/todos"):
            return self._todos(request, body)
        if path.startswith(f"/storage/v1/object/list/{BUCKET}"):
            return self._list(body)
        if path.startswith("/storage/v1/object/"):
            return self._object(request, path[len("/storage/v1/object/"):], body)
        return _error(404, message="not found")

    def _auth(self, request: httpx.Request, action: str, body: dict | None) -> httpx.Response:
        if action == "token":
            grant = request.url.params.get("grant_type")
            if grant == "password":
                email = body["email"]
                if self.passwords.get(email) != body["password"]:
                    return _error(400, error="invalid_grant", error_description="Invalid login credentials")
                return httpx.Response(200, json=self.issue_session(email))
            email = self.refresh_tokens.pop(body["refresh_token"], None)
            if email is None:
                return _error(400, error="invalid_grant", error_description="Invalid Refresh Token")
            return httpx.Response(200, json=self.issue_session(email))
        if action == "signup":
            if body["email"] in self.passwords:
                return _error(422, msg="User already registered")
            self.add_user(body["email"], body["password"])
            if self.confirm_email:
                return httpx.Response(200, json=self._user(body["email"]))
            return httpx.Response(200, json=self.issue_session(body["email"]))
        token = request.headers["Authorization"].removeprefix("Bearer ")
        email = self.access_tokens.get(token)
        if action == "user":
            if email is None:
                return _error(401, msg="invalid JWT")
            return httpx.Response(200, json=self._user(email))
        if action == "logout":
            self.access_tokens.pop(token, None)
            return httpx.Response(204)
        return _error(404, message="not found")

    def _todos(self, request: httpx.Request, body) -> httpx.Response:
        op = {"GET": "select", "POST": "insert", "PATCH": "update", "DELETE": "delete"}[request.method]
        if op in self.failing:
            return _error(500, message=f"{op} failed", code="XX000")
        row_filter = request.url.params.get("id", "").removeprefix("eq.")

        if op == "select":
            column, _, direction = request.url.params.get("order", "created_at.desc").partition(".")
            rows = sorted(self.todos, key=lambda r: r[column], reverse=direction == "desc")
            return httpx.Response(200, json=rows)
        if op == "insert":
            rows = [self.add_todo(r["title"]) for r in (body if isinstance(body, list) else [body])]
            return httpx.Response(201, json=rows)
        if op == "update":
            updated = []
            for row in self.todos:
                if row["id"] == row_filter:
                    row.update(body, updated_at=self._now())
                    updated.append(row)
            return httpx.Response(200, json=updated)
        self.todos = [r for r in self.todos if r["id"] != row_filter]
        return httpx.Response(204)

    def _list(self, body: dict) -> httpx.Response:
        if "list" in self.failing:
            return _error(400, statusCode="404", error="Bucket not found", message="Bucket not found")
        names = sorted(self.objects)
        page = names[body["offset"]:body["offset"] + body["limit"]]
        return httpx.Response(200, json=[
            {
                "name": name,
                "id": self.objects[name]["id"],
                "created_at": self.objects[name]["created_at"],
                "updated_at": self.objects[name]["created_at"],
                "metadata": {
                    "size": len(self.objects[name]["data"]),
                    "mimetype": self.objects[name]["mimetype"],
                },
            }
            for name in page
        ])

    def _object(self, request: httpx.Request, rest: str, body) -> httpx.Response:
        bucket, _, key = rest.partition("/")
        if bucket != BUCKET:
            return _error(400, statusCode="404", error="Bucket not found", message="Bucket not found")
        if request.method == "DELETE":
            if "remove" in self.failing:
                return _error(403, statusCode="403", error="Unauthorized", message="Access denied")
            removed = [{"name": k} for k in body["prefixes"] if self.objects.pop(k, None)]
            return httpx.Response(200, json=removed)
        if "upload" in self.failing:
            return _error(400, statusCode="413", error="Payload too large", message="The object exceeded the maximum allowed size")
        if key in self.objects and request.headers.get("x-upsert") != "true":
            return _error(400, statusCode="409", error="Duplicate", message="The resource already exists")
        self.add_object(key, request.content)
        self.objects[key]["mimetype"] = request.headers.get("content-type")
        return httpx.Response(200, json={"Key": f"{bucket}/{key}", "Id": self.objects[key]["id"]})


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def transport(supabase: FakeSupabase) -> httpx.MockTransport:
    return httpx.MockTransport(supabase.handle)


@pytest.fixture
def auth_client(transport) -> AuthClient:
    return AuthClient(base_url=SUPABASE_URL, api_key=ANON_KEY, transport=transport)


@pytest.fixture
def todo_table(transport) -> TodoTable:
    return TodoTable(base_url=SUPABASE_URL, api_key=ANON_KEY, transport=transport)


@pytest.fixture
def bucket(transport) -> StorageBucket:
    return StorageBucket(bucket=BUCKET, base_url=SUPABASE_URL, api_key=ANON_KEY, transport=transport)


@pytest.fixture
def session_cookie(supabase: FakeSupabase) -> dict[str, str]:
    """Cookie header of a signed-in user."""
    email = supabase.add_user()
    session = supabase.issue_session(email)
    return {"Cookie": f"{settings.access_cookie_name}={session['access_token']}"}


@pytest_asyncio.fixture
async def client(auth_client, todo_table, bucket):
    """Provide an async test client wired to the fake Supabase."""
    app = create_app()

    app.dependency_overrides[get_auth_client] = lambda: auth_client
    app.dependency_overrides[get_todo_table] = lambda: todo_table
    app.dependency_overrides[get_storage_bucket] = lambda: bucket

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
