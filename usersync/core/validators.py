"""Required-field checks run before a user is synced."""
from __future__ import annotations
from typing import Optional

# (payload field name, UserRecord attribute)
REQUIRED_FIELDS = (
    ("username", "username"),
    ("email", "email"),
    ("firstName", "first_name"),
    ("lastName", "last_name"),
)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def missing_required_fields(user) -> list[str]:
    """Return the required fields that are absent or contain only whitespace.
    
    Args:
        user: UserRecord to check
        
    Returns:
        Payload field names that failed, in declaration order (empty when valid)
    """
    return [name for name, attr in REQUIRED_FIELDS if _is_blank(getattr(user, attr))]


def is_syncable(user) -> bool:
    return not missing_required_fields(user)
