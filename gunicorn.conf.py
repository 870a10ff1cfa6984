"""Gunicorn configuration for the user sync ingress.

Each event is handled inline on a worker thread, including the outbound
POST to the user service (up to connect + read timeout). Worker timeout
and thread count are sized for that blocking call.

Secrets (KEYCLOAK_SYNC_SECRET, KEYCLOAK_SERVICE_CLIENT_SECRET,
EVENT_WEBHOOK_SECRET) are read by usersync.config.settings from
/run/secrets first, then from the environment.
"""
import logging
import os

wsgi_app = "usersync.flask_app:create_app()"
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:5000")
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
threads = int(os.environ.get("GUNICORN_THREADS", "8"))
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"


def post_fork(server, worker):
    """
    Called just after a worker has been forked.

    Routes the usersync.* loggers through Gunicorn's error log handlers so
    sync outcomes appear next to request logs.
    """
    app_logger = logging.getLogger("usersync")
    app_logger.setLevel(loglevel.upper())
    for handler in worker.log.error_log.handlers:
        app_logger.addHandler(handler)
    app_logger.propagate = False
