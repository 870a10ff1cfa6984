"""Core sync logic.

This module holds the event-to-webhook pipeline, independent of HTTP
frameworks (Flask). The HTTP ingress and the CLI both call into it.

Module Structure:
    - events.py     : Event classification and parsing of raw event documents
    - keycloak/     : Keycloak Admin API client (user lookup)
    - resolver.py   : UserRecord snapshots and resource path handling
    - roles.py      : app_role attribute to application role
    - validators.py : Required identity fields
    - payload.py    : Sync payload JSON encoding
    - delivery.py   : POST to the user service, outcome logging
    - listener.py   : Pipeline wiring (UserSyncListener, create_listener)

Usage Pattern:
    Import explicitly when needed:
        from usersync.core.listener import create_listener
        listener = create_listener(load_settings())
        listener.on_event("REGISTER", user_id)
"""
