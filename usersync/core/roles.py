"""Application role derivation from Keycloak user attributes."""
from __future__ import annotations

ROLE_ATTRIBUTE = "app_role"
DEFAULT_ROLE = "USER"


def derive_role(user) -> str:
    """Return the upper-cased ``app_role`` attribute, or USER when absent or blank."""
    app_role = user.first_attribute(ROLE_ATTRIBUTE)
    if app_role is not None and app_role.strip():
        return app_role.upper()
    return DEFAULT_ROLE
