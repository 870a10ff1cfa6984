"""Sync payload construction.

The user service decodes a flat JSON object with the fields
``id, username, email, firstName, lastName, role``. Field order is kept
stable so bodies can be compared byte for byte.
"""
from __future__ import annotations
import json
from dataclasses import dataclass


@dataclass(frozen=True)
class SyncPayload:
    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    role: str

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role,
        }

    def to_json(self) -> str:
        """Compact JSON text, non-ASCII characters kept as-is (sent as UTF-8)."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    def to_bytes(self) -> bytes:
        return self.to_json().encode("utf-8")


def build_payload(user, role: str) -> SyncPayload:
    """Build the payload for a validated UserRecord.

    Values are sent as stored in Keycloak (not trimmed). A missing id is
    sent as an empty string.
    """
    return SyncPayload(
        id=user.id or "",
        username=user.username or "",
        email=user.email or "",
        first_name=user.first_name or "",
        last_name=user.last_name or "",
        role=role,
    )

