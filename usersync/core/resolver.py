"""User record snapshots resolved from Keycloak."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from usersync.core.keycloak import UserService

USERS_PATH_PREFIX = "users/"


@dataclass(frozen=True)
class UserRecord:
    """Read-only snapshot of a Keycloak user, fetched once per event."""
    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    attributes: dict[str, list[str]] = field(default_factory=dict)

    def first_attribute(self, name: str) -> Optional[str]:
        values = self.attributes.get(name) or []
        return values[0] if values else None

    @classmethod
    def from_representation(cls, rep: dict) -> "UserRecord":
        """Build a record from a Keycloak UserRepresentation."""
        attributes = {}
        for name, values in (rep.get("attributes") or {}).items():
            # Keycloak stores attribute values as lists; tolerate scalars
            if isinstance(values, list):
                attributes[name] = [str(v) for v in values if v is not None]
            elif values is not None:
                attributes[name] = [str(values)]
        return cls(
            id=rep.get("id"),
            username=rep.get("username"),
            email=rep.get("email"),
            first_name=rep.get("firstName"),
            last_name=rep.get("lastName"),
            attributes=attributes,
        )


def subject_from_resource_path(resource_path: Optional[str]) -> Optional[str]:
    """Extract the user id from an admin event resource path ("users/<id>")."""
    if not resource_path or not resource_path.startswith(USERS_PATH_PREFIX):
        return None
    return resource_path[len(USERS_PATH_PREFIX):] or None


class UserResolver:
    """Look up users through the Keycloak Admin API."""

    def __init__(self, user_service: UserService):
        self.user_service = user_service

    def resolve(self, realm: str, subject_id: str) -> Optional[UserRecord]:
        """Return the current snapshot of the user, or None if it does not exist.

        Raises:
            KeycloakError: If Keycloak cannot be queried
            requests.RequestException: On transport errors
        """
        rep = self.user_service.get_user_by_id(realm, subject_id)
        if rep is None:
            return None
        return UserRecord.from_representation(rep)
