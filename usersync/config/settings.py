"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

DEFAULT_SYNC_PATH = "/api/users/internal/keycloak-sync"
DEFAULT_TIMEOUT_SECONDS = 5.0


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    # Priority 1: Read from /run/secrets
    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                print(f"[settings] ✓ Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            print(f"[settings] ✗ Failed to read /run/secrets/{secret_name}: {e}")

    # Priority 2: Fallback to environment variable
    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


@dataclass(frozen=True)
class AppConfig:
    """Process configuration, captured once at startup and shared read-only."""
    # External user service
    user_service_url: str
    sync_secret: str = ""
    sync_path: str = DEFAULT_SYNC_PATH
    connect_timeout: float = DEFAULT_TIMEOUT_SECONDS
    read_timeout: float = DEFAULT_TIMEOUT_SECONDS

    # Event handling
    sync_on_login: bool = True
    event_webhook_secret: str = ""

    # Keycloak Admin API (user lookup)
    keycloak_url: str = "http://keycloak:8080"
    keycloak_realm: str = "demo"
    keycloak_service_realm: str = "demo"
    keycloak_service_client_id: str = "user-sync"
    keycloak_service_client_secret: str = ""

    @property
    def sync_endpoint(self) -> str:
        """Full URL the sync payload is POSTed to."""
        return f"{self.user_service_url.rstrip('/')}{self.sync_path}"

    def redacted(self) -> dict:
        """Return the configuration as a dict with secrets masked."""
        values = asdict(self)
        for key in ("sync_secret", "event_webhook_secret", "keycloak_service_client_secret"):
            values[key] = "***" if values[key] else ""
        values["sync_endpoint"] = self.sync_endpoint
        return values


def _require(var_name: str) -> str:
    """Get a required environment variable or fail initialization."""
    value = os.environ.get(var_name, "").strip()
    if not value:
        raise RuntimeError(f"{var_name} environment variable is not set")
    return value


def _get_bool(var_name: str, default: bool) -> bool:
    raw = os.environ.get(var_name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"{var_name} must be true or false, got {raw!r}")


def _get_seconds(var_name: str, default: float) -> float:
    raw = os.environ.get(var_name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{var_name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise RuntimeError(f"{var_name} must be positive, got {raw!r}")
    return value


def _normalize_path(path: Optional[str]) -> str:
    path = (path or "").strip() or DEFAULT_SYNC_PATH
    if not path.startswith("/"):
        path = f"/{path}"
    return path


def load_settings() -> AppConfig:
    """Load settings from environment and /run/secrets.

    Raises:
        RuntimeError: If USER_SERVICE_URL is missing or a value is malformed
    """
    user_service_url = _require("USER_SERVICE_URL")

    sync_secret = _load_secret_from_file("keycloak_sync_secret", "KEYCLOAK_SYNC_SECRET") or ""
    webhook_secret = _load_secret_from_file("event_webhook_secret", "EVENT_WEBHOOK_SECRET") or ""
    service_client_secret = _load_secret_from_file(
        "keycloak_service_client_secret",
        "KEYCLOAK_SERVICE_CLIENT_SECRET",
    ) or ""

    realm = os.environ.get("KEYCLOAK_REALM", "demo")

    return AppConfig(
        user_service_url=user_service_url.rstrip("/"),
        sync_secret=sync_secret,
        sync_path=_normalize_path(os.environ.get("USER_SERVICE_SYNC_PATH")),
        connect_timeout=_get_seconds("SYNC_CONNECT_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        read_timeout=_get_seconds("SYNC_READ_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        sync_on_login=_get_bool("SYNC_ON_LOGIN", True),
        event_webhook_secret=webhook_secret,
        keycloak_url=os.environ.get("KEYCLOAK_INTERNAL_URL", "http://keycloak:8080").rstrip("/"),
        keycloak_realm=realm,
        keycloak_service_realm=os.environ.get("KEYCLOAK_SERVICE_REALM", realm),
        keycloak_service_client_id=os.environ.get("KEYCLOAK_SERVICE_CLIENT_ID", "user-sync"),
        keycloak_service_client_secret=service_client_secret,
    )
