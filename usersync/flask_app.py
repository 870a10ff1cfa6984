"""Flask application factory and bootstrap.

This module provides the create_app() factory function that loads the
configuration, builds the sync listener and registers the event ingress.
"""
from __future__ import annotations
import logging
from typing import Optional

from flask import Flask

from usersync.config import AppConfig, load_settings
from usersync.core.listener import UserSyncListener, create_listener

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(
    cfg: Optional[AppConfig] = None,
    listener: Optional[UserSyncListener] = None,
) -> Flask:
    """Create and configure Flask application.

    Args:
        cfg: Configuration (loaded from the environment when omitted)
        listener: Pre-built listener (built from cfg when omitted)

    Raises:
        RuntimeError: If required configuration is missing
    """
    # Fail at startup, not on the first event
    cfg = cfg or load_settings()

    app = Flask(__name__)
    app.config["APP_CONFIG"] = cfg
    app.extensions["user_sync_listener"] = listener or create_listener(cfg)

    from usersync.api import errors, events, health

    app.register_blueprint(health.bp)
    app.register_blueprint(events.bp)

    errors.register_error_handlers(app)

    logger.info(f"User sync ingress ready: POST /events -> {cfg.sync_endpoint}")
    if not cfg.event_webhook_secret:
        logger.warning("EVENT_WEBHOOK_SECRET not set, /events accepts unauthenticated requests")

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    create_app().run(host="0.0.0.0", port=5000)
