from types import SimpleNamespace

import pytest
from flask import Flask, abort

from usersync.api.errors import register_error_handlers


@pytest.fixture()
def flask_client():
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.logger = SimpleNamespace(error=lambda *args, **kwargs: None)

    register_error_handlers(app)

    @app.route("/bad")
    def bad():
        abort(400, "invalid payload")

    @app.route("/crash")
    def crash():
        raise RuntimeError("boom")

    with app.test_client() as client:
        yield client


def test_http_error_returns_json(flask_client):
    response = flask_client.get("/bad")
    assert response.status_code == 400
    assert response.get_json() == {"error": "Bad Request", "message": "invalid payload"}


def test_unknown_route_returns_json(flask_client):
    response = flask_client.get("/nope")
    assert response.status_code == 404
    assert response.get_json()["error"] == "Not Found"


def test_unhandled_exception_hides_details(flask_client):
    response = flask_client.get("/crash")
    assert response.status_code == 500
    payload = response.get_json()
    assert payload["error"] == "Internal Server Error"
    assert "boom" not in payload["message"]
