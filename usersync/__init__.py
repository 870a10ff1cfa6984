"""Keycloak user-event sync bridge.

To serve the HTTP event ingress:
    from usersync.flask_app import app

To run the sync pipeline from other hosts (CLI, tests):
    from usersync.core.listener import UserSyncListener, create_listener
"""
# Note: We don't import flask_app by default to avoid Flask dependency
# for CLI scripts that only use usersync.core
