"""Low-level HTTP client for Keycloak Admin API.

Handles service-account authentication, token management, and GET requests.
"""
from __future__ import annotations
from typing import Optional, Dict, Any
from datetime import datetime, timedelta

import requests

from .exceptions import AuthenticationError, KeycloakAPIError

REQUEST_TIMEOUT = 5


class KeycloakClient:
    """HTTP client for Keycloak Admin API with automatic token management.

    Usage:
        client = KeycloakClient("http://keycloak:8080")
        client.configure_service_account("demo", "user-sync", "secret")
        response = client.get("/admin/realms/demo/users/7c1e...")
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None):
        """Initialize Keycloak client.

        Args:
            base_url: Keycloak base URL (e.g. http://keycloak:8080)
            session: Optional requests session (shared connection pool)
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None
        self._auth_params: Dict[str, Any] = {}

    def configure_service_account(self, auth_realm: str, client_id: str, client_secret: str) -> None:
        """Store service account credentials; the token is fetched on first request."""
        self._auth_params = {
            "auth_realm": auth_realm,
            "client_id": client_id,
            "client_secret": client_secret,
        }
        self._token = None
        self._token_expires_at = None

    def _refresh_token(self) -> None:
        token, expires_in = self._get_service_account_token(**self._auth_params)
        self._token = token
        # Refresh a little before Keycloak considers the token expired
        self._token_expires_at = datetime.now() + timedelta(seconds=max(expires_in - 10, 0))

    def _ensure_authenticated(self) -> None:
        """Ensure we have a valid token, refreshing if necessary."""
        if not self._auth_params:
            raise AuthenticationError("Not authenticated - configure a service account first")
        if not self._token or not self._token_expires_at or datetime.now() >= self._token_expires_at:
            self._refresh_token()

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute GET request with automatic authentication.

        Args:
            path: API endpoint path (e.g., "/admin/realms/demo/users/{id}")
            params: Query parameters
            **kwargs: Additional arguments for requests.Session.get

        Returns:
            Response object

        Raises:
            KeycloakAPIError: On HTTP error
        """
        self._ensure_authenticated()
        url = f"{self.base_url}{path}"
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {self._token}"

        resp = self.session.get(url, params=params, headers=headers, timeout=REQUEST_TIMEOUT, **kwargs)
        self._handle_error(resp)
        return resp

    def _get_service_account_token(self, auth_realm: str, client_id: str, client_secret: str) -> tuple[str, int]:
        """Fetch a service account token using client credentials flow.

        Raises:
            KeycloakAPIError: If the token endpoint answers with an error status
            AuthenticationError: If the reply carries no access token
        """
        url = f"{self.base_url}/realms/{auth_realm}/protocol/openid-connect/token"
        data = {
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": client_secret,
        }
        resp = self.session.post(url, data=data, timeout=REQUEST_TIMEOUT)
        if resp.status_code != 200:
            raise KeycloakAPIError(resp.status_code, resp.text, url)
        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict) or not body.get("access_token"):
            raise AuthenticationError(f"Token response from {url} has no access_token")
        try:
            expires_in = int(body.get("expires_in", 60))
        except (TypeError, ValueError):
            expires_in = 60
        return body["access_token"], expires_in

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            KeycloakAPIError: If response status indicates error
        """
        if resp.status_code >= 400:
            raise KeycloakAPIError(resp.status_code, resp.text, resp.url)
