"""Pytest shared fixtures for the user sync tests."""
import json
import pathlib
import sys
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from usersync.config.settings import AppConfig
from usersync.core.delivery import SyncClient
from usersync.core.resolver import UserRecord


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _no_outbound_http(monkeypatch, request):
    """
    Prevent unit tests from reaching real services through requests.

    Tests marked with @pytest.mark.integration talk to local sockets they
    start themselves and skip this guard.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _blocked(*args, **kwargs):
        raise AssertionError(f"Unexpected outbound HTTP call: args={args} kwargs={kwargs}")

    monkeypatch.setattr(requests, "post", _blocked)
    monkeypatch.setattr(requests.Session, "request", _blocked)


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: test opens real local sockets")


# ─────────────────────────────────────────────────────────────────────────────
# Fakes
# ─────────────────────────────────────────────────────────────────────────────
class FakeResponse:
    """Minimal stand-in for requests.Response, usable as a context manager."""

    def __init__(self, status_code: int = 200, body: Optional[object] = None, url: str = ""):
        self.status_code = status_code
        self._body = body
        self.url = url
        self.closed = False

    @property
    def text(self) -> str:
        if self._body is None:
            return ""
        if isinstance(self._body, str):
            return self._body
        return json.dumps(self._body)

    def json(self):
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class RecordingPost:
    """Replacement for requests.post that records calls and returns canned responses."""

    def __init__(self, response=None, error: Optional[Exception] = None):
        self.response = response if response is not None else FakeResponse(201)
        self.error = error
        self.calls = []

    def __call__(self, url, data=None, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "data": data, "headers": headers or {}, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last_json(self) -> dict:
        return json.loads(self.calls[-1]["data"].decode("utf-8"))


class FakeResolver:
    """In-memory user store keyed by (realm, user id)."""

    def __init__(self, users: Optional[dict] = None, error: Optional[Exception] = None):
        self.users = users or {}
        self.error = error
        self.lookups = []

    def resolve(self, realm, subject_id):
        self.lookups.append((realm, subject_id))
        if self.error is not None:
            raise self.error
        return self.users.get((realm, subject_id))


class FakeSession:
    """Stands in for requests.Session against Keycloak; GET responses keyed by URL."""

    def __init__(self, get_responses=None, token_response=None):
        self.get_responses = get_responses or {}
        self.token_response = token_response or FakeResponse(200, {"access_token": "tok-1", "expires_in": 300})
        self.token_calls = []
        self.get_calls = []

    def post(self, url, data=None, timeout=None):
        self.token_calls.append({"url": url, "data": data, "timeout": timeout})
        return self.token_response

    def get(self, url, params=None, headers=None, timeout=None):
        self.get_calls.append({"url": url, "headers": headers, "timeout": timeout})
        return self.get_responses.get(url, FakeResponse(404, {"error": "User not found"}, url=url))


@pytest.fixture
def recording_post(monkeypatch):
    """Patch requests.post as seen by the delivery module."""
    recorder = RecordingPost()
    monkeypatch.setattr("usersync.core.delivery.requests.post", recorder)
    return recorder


@pytest.fixture
def sync_client():
    return SyncClient("http://users.test", secret="shared-secret")


@pytest.fixture
def alice():
    return UserRecord(
        id="u1",
        username="alice",
        email="a@x.com",
        first_name="Alice",
        last_name="A",
        attributes={},
    )


def make_config(**overrides) -> AppConfig:
    base = dict(
        user_service_url="http://users.test",
        sync_secret="shared-secret",
        keycloak_url="http://keycloak.test",
        keycloak_realm="demo",
        keycloak_service_realm="demo",
        keycloak_service_client_id="user-sync",
        keycloak_service_client_secret="kc-secret",
    )
    base.update(overrides)
    return AppConfig(**base)


@pytest.fixture
def config_factory():
    return make_config
