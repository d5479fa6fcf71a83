# tests/conftest.py
import os
import asyncio
import json
from urllib.parse import urlencode

import pytest

# must be set before main builds its module-level app
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from contactdesk.core import Settings
from contactdesk.database import get_db
from main import create_app


TEST_SETTINGS = dict(
    DATABASE_URL="sqlite:///:memory:",
    SECRET_KEY="test-secret",
    LOG_LEVEL="WARNING",
)


@pytest.fixture()
def settings():
    return Settings(**TEST_SETTINGS)


@pytest.fixture()
def app(settings):
    # a fresh app owns a fresh in-memory database
    application = create_app(settings)
    yield application
    application.dependency_overrides.clear()
    application.state.database.dispose()


@pytest.fixture()
def db_session(app):
    session = app.state.database.session()
    try:
        yield session
    finally:
        session.close()


# One event loop for the WHOLE pytest session
@pytest.fixture(scope="session")
def session_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


# Simple ASGI response/client
class SimpleResponse:
    def __init__(
        self, status_code: int, body: bytes, headers: list[tuple[bytes, bytes]]
    ):
        self.status_code = status_code
        self._body = body
        self.headers = {k.decode(): v.decode() for k, v in headers}

    def json(self):
        return json.loads(self._body.decode())


class SimpleClient:
    """
    Drives the ASGI app in-process.

    - uses ONE shared session loop (passed from fixture)
    - does NOT call asyncio.run()
    - does NOT close the loop
    """

    def __init__(self, app, loop):
        self.app = app
        self.loop = loop

    def close(self):
        # do not close the loop here (session fixture closes it)
        pass

    def request(
        self,
        method: str,
        path: str,
        json_body=None,
        data=None,
        headers=None,
        params=None,
    ):
        headers = dict(headers or {})
        body_bytes = b""

        path, _, query_string = path.partition("?")
        if params:
            extra = urlencode(params, doseq=True)
            query_string = f"{query_string}&{extra}" if query_string else extra

        if json_body is not None:
            body_bytes = json.dumps(json_body).encode()
            headers.setdefault("content-type", "application/json")

        elif data is not None:
            if isinstance(data, bytes):
                body_bytes = data
            else:
                body_bytes = str(data).encode()
            headers.setdefault("content-type", "application/json")

        raw_headers = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
        scope = {
            "type": "http",
            "method": method.upper(),
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "scheme": "http",
            "server": ("testserver", 80),
            "headers": raw_headers,
            "query_string": query_string.encode(),
            "client": ("testclient", 5000),
            "http_version": "1.1",
            "asgi": {"version": "3.0"},
        }

        async def receive():
            nonlocal body_bytes
            chunk, body_bytes = body_bytes, b""
            return {"type": "http.request", "body": chunk, "more_body": False}

        response_body = bytearray()
        response_status = 500
        response_headers: list[tuple[bytes, bytes]] = []

        async def send(message):
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = message.get("headers", [])
            elif message["type"] == "http.response.body":
                response_body.extend(message.get("body", b""))

        # ensure the loop is the current one
        asyncio.set_event_loop(self.loop)
        self.loop.run_until_complete(self.app(scope, receive, send))
        return SimpleResponse(response_status, bytes(response_body), response_headers)

    def get(self, path: str, headers=None, params=None):
        return self.request("GET", path, headers=headers, params=params)

    def post(self, path: str, json=None, data=None, headers=None):
        return self.request("POST", path, json_body=json, data=data, headers=headers)

    def put(self, path: str, json=None, data=None, headers=None):
        return self.request("PUT", path, json_body=json, data=data, headers=headers)

    def delete(self, path: str, headers=None):
        return self.request("DELETE", path, headers=headers)


# Client fixture: share the test's DB session with the app
@pytest.fixture()
def client(app, db_session, session_loop):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    c = SimpleClient(app, loop=session_loop)
    try:
        yield c
    finally:
        app.dependency_overrides.clear()
        c.close()


def register(client, email="a@x.com", phone="9000000001", password="password1", **extra):
    payload = {
        "first_name": extra.pop("first_name", "Asha"),
        "last_name": extra.pop("last_name", "Rao"),
        "email": email,
        "phone": phone,
        "password": password,
    }
    payload.update(extra)
    return client.post("/api/auth/register", json=payload)


def login(client, email="a@x.com", password="password1"):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.json()
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture()
def user_a(client):
    assert register(client).status_code == 201
    return login(client)


@pytest.fixture()
def user_b(client):
    assert register(client, email="b@x.com", phone="9000000002").status_code == 201
    return login(client, email="b@x.com")
