"""Keycloak event ingress.

Keycloak's webhook event forwarder POSTs one event document per request.
The event is handled synchronously on the request thread; the response
reports the terminal state for observability only. Sync failures are never
turned into HTTP errors, so the forwarder does not replay events.
"""
from __future__ import annotations
import hmac
import logging

from flask import Blueprint, abort, current_app, jsonify, request

from usersync.core.events import EventFormatError

logger = logging.getLogger(__name__)

bp = Blueprint("events", __name__)

WEBHOOK_SECRET_HEADER = "X-Webhook-Secret"


def _check_webhook_secret() -> None:
    """Reject the request unless it carries the configured webhook secret."""
    expected = current_app.config["APP_CONFIG"].event_webhook_secret
    if not expected:
        return
    submitted = request.headers.get(WEBHOOK_SECRET_HEADER, "")
    if not submitted or not hmac.compare_digest(submitted.encode("utf-8"), expected.encode("utf-8")):
        logger.warning(f"Event request from {request.remote_addr} with missing or invalid {WEBHOOK_SECRET_HEADER}")
        abort(401, description="Invalid webhook secret")


@bp.route("/events", methods=["POST"])
def receive_event():
    """Run one Keycloak event through the sync listener."""
    _check_webhook_secret()

    raw = request.get_json(silent=True)
    if raw is None:
        abort(400, description="Request body must be a JSON event document")

    listener = current_app.extensions["user_sync_listener"]
    try:
        result = listener.on_raw_event(raw)
    except EventFormatError as exc:
        abort(400, description=str(exc))

    return jsonify({"result": result.value}), 202
