"""Keycloak Admin API access for user lookups.

Architecture:
- client.py: HTTP client with service-account authentication and auto-refresh
- users.py: User lookup by id
- exceptions.py: Typed exceptions for error handling

Usage:
    from usersync.core.keycloak import KeycloakClient, UserService

    client = KeycloakClient("http://keycloak:8080")
    client.configure_service_account("demo", "user-sync", "secret")

    user_service = UserService(client)
    rep = user_service.get_user_by_id("demo", "7c1e...")
"""
from .client import KeycloakClient, REQUEST_TIMEOUT
from .exceptions import KeycloakError, KeycloakAPIError, AuthenticationError
from .users import UserService

__all__ = [
    "KeycloakClient",
    "REQUEST_TIMEOUT",
    "KeycloakError",
    "KeycloakAPIError",
    "AuthenticationError",
    "UserService",
]
