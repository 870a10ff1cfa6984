import io
import json
import sys

import pytest

import scripts.user_sync as cli
from usersync.core.events import EventFormatError
from usersync.core.listener import SyncResult


@pytest.fixture(autouse=True)
def restore_sys_argv():
    """Make sure every test sees a clean CLI invocation."""
    original = sys.argv[:]
    yield
    sys.argv = original


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("USER_SERVICE_URL", "http://users.test")
    monkeypatch.setenv("KEYCLOAK_SYNC_SECRET", "shared-secret")


class StubListener:
    def __init__(self, result=SyncResult.DELIVERED):
        self.result = result
        self.events = []

    def on_raw_event(self, raw):
        self.events.append(raw)
        return self.result


def test_missing_service_url_aborts(monkeypatch):
    monkeypatch.delenv("USER_SERVICE_URL", raising=False)
    sys.argv = ["user_sync.py", "show-config"]
    with pytest.raises(SystemExit):
        cli.main()


def test_show_config_masks_secret(env, capsys):
    sys.argv = ["user_sync.py", "show-config"]
    cli.main()
    shown = json.loads(capsys.readouterr().out)
    assert shown["sync_secret"] == "***"
    assert shown["sync_endpoint"] == "http://users.test/api/users/internal/keycloak-sync"


def test_handle_event_from_file(env, monkeypatch, tmp_path, capsys):
    stub = StubListener()
    monkeypatch.setattr(cli, "create_listener", lambda cfg: stub)
    event_file = tmp_path / "event.json"
    event_file.write_text(json.dumps({"type": "REGISTER", "userId": "u1"}))

    sys.argv = ["user_sync.py", "handle-event", "--file", str(event_file)]
    cli.main()

    assert stub.events == [{"type": "REGISTER", "userId": "u1"}]
    assert capsys.readouterr().out.strip() == "delivered"


def test_handle_event_from_stdin(env, monkeypatch, capsys):
    stub = StubListener(SyncResult.IGNORED)
    monkeypatch.setattr(cli, "create_listener", lambda cfg: stub)
    monkeypatch.setattr(sys, "stdin", io.StringIO('{"type": "LOGOUT", "userId": "u1"}'))

    sys.argv = ["user_sync.py", "handle-event", "--file", "-"]
    cli.main()

    assert capsys.readouterr().out.strip() == "ignored"


def test_handle_event_unreadable_file(env, tmp_path):
    sys.argv = ["user_sync.py", "handle-event", "--file", str(tmp_path / "missing.json")]
    with pytest.raises(SystemExit):
        cli.main()


class RejectingListener:
    def on_raw_event(self, raw):
        raise EventFormatError("Event document must be a JSON object")


def test_handle_event_invalid_document(env, monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "create_listener", lambda cfg: RejectingListener())
    event_file = tmp_path / "event.json"
    event_file.write_text("[1, 2]")

    sys.argv = ["user_sync.py", "handle-event", "--file", str(event_file)]
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 2
