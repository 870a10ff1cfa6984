"""Keycloak event classification.

Decides whether an incoming event notification represents a user creation
worth syncing and turns raw event documents into ``EventNotification``
values. Pure functions; nothing here talks to Keycloak or the user service.

Event documents follow the Keycloak event representation:

    user event:  {"type": "REGISTER", "userId": "...", "realmName": "demo"}
    admin event: {"operationType": "CREATE", "resourceType": "USER",
                  "resourcePath": "users/<id>", "realmName": "demo"}
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class EventKind(str, Enum):
    SELF_REGISTRATION = "SelfRegistration"
    FIRST_LOGIN = "FirstLogin"
    ADMIN_CREATE = "AdminCreate"


class EventFormatError(ValueError):
    """Raised when an inbound event document cannot be interpreted."""
    pass


@dataclass(frozen=True)
class EventNotification:
    """One lifecycle occurrence reported by Keycloak.

    ``subject_id`` is set for user events, ``resource_path`` for admin events.
    """
    kind: EventKind
    subject_id: Optional[str] = None
    resource_path: Optional[str] = None
    realm: Optional[str] = None

    def __post_init__(self):
        if self.kind is EventKind.ADMIN_CREATE:
            if self.subject_id is not None or self.resource_path is None:
                raise EventFormatError("Admin events carry a resource path and no subject id")
        elif self.resource_path is not None or not (self.subject_id or "").strip():
            raise EventFormatError(f"{self.kind.value} events carry a subject id and no resource path")


_USER_EVENT_KINDS = {
    "REGISTER": EventKind.SELF_REGISTRATION,
    "LOGIN": EventKind.FIRST_LOGIN,
}


def classify_user_event(event_type: Optional[str], *, sync_on_login: bool = True) -> Optional[EventKind]:
    """Map a Keycloak user event type to an event kind, or None to ignore it."""
    kind = _USER_EVENT_KINDS.get((event_type or "").upper())
    if kind is EventKind.FIRST_LOGIN and not sync_on_login:
        return None
    return kind


def classify_admin_event(resource_type: Optional[str], operation_type: Optional[str]) -> Optional[EventKind]:
    """Only user creations are synced; other admin operations are ignored."""
    if (resource_type or "").upper() == "USER" and (operation_type or "").upper() == "CREATE":
        return EventKind.ADMIN_CREATE
    return None


def _optional_str(raw: dict[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise EventFormatError(f"'{key}' must be a string")
    return value


def parse_notification(
    raw: Any,
    *,
    default_realm: Optional[str] = None,
    sync_on_login: bool = True,
) -> Optional[EventNotification]:
    """Build an EventNotification from a raw Keycloak event document.

    Args:
        raw: Decoded JSON event document
        default_realm: Realm used when the document does not name one
        sync_on_login: Whether LOGIN events are synced

    Returns:
        EventNotification, or None when the event is not worth syncing

    Raises:
        EventFormatError: If the document is not an event object
    """
    if not isinstance(raw, dict):
        raise EventFormatError("Event document must be a JSON object")

    realm = _optional_str(raw, "realmName") or default_realm

    if "operationType" in raw:
        kind = classify_admin_event(
            _optional_str(raw, "resourceType"),
            _optional_str(raw, "operationType"),
        )
        if kind is None:
            return None
        resource_path = _optional_str(raw, "resourcePath")
        if resource_path is None:
            raise EventFormatError("Admin user creation without 'resourcePath'")
        return EventNotification(kind, resource_path=resource_path, realm=realm)

    if "type" not in raw:
        raise EventFormatError("Event document has neither 'type' nor 'operationType'")

    kind = classify_user_event(_optional_str(raw, "type"), sync_on_login=sync_on_login)
    if kind is None:
        return None
    subject_id = _optional_str(raw, "userId")
    if not subject_id:
        raise EventFormatError(f"{kind.value} event without 'userId'")
    return EventNotification(kind, subject_id=subject_id, realm=realm)
