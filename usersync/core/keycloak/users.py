"""Keycloak user lookup operations."""
from __future__ import annotations
from typing import Optional
from urllib.parse import quote

from .client import KeycloakClient
from .exceptions import KeycloakAPIError


class UserService:
    """Service for reading Keycloak users."""
    
    def __init__(self, client: KeycloakClient):
        """Initialize user service.
        
        Args:
            client: Keycloak client with a configured service account
        """
        self.client = client
    
    def get_user_by_id(self, realm: str, user_id: str) -> Optional[dict]:
        """Return the user representation for the given id.
        
        Args:
            realm: Realm name
            user_id: Keycloak user id
            
        Returns:
            User representation or None if not found
            
        Raises:
            KeycloakAPIError: On any HTTP error other than 404
        """
        path = f"/admin/realms/{quote(realm, safe='')}/users/{quote(user_id, safe='')}"
        try:
            resp = self.client.get(path)
        except KeycloakAPIError as exc:
            if exc.status_code == 404:
                return None
            raise
        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise KeycloakAPIError(resp.status_code, "User representation is not a JSON object", resp.url)
        return body
