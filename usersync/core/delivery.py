"""HTTP delivery of sync payloads to the external user service.

Delivery is fire-and-forget: one POST per payload, outcome logged, never
retried. No exception leaves ``SyncClient.deliver``.
"""
from __future__ import annotations
import logging
from enum import Enum
from typing import Optional

import requests

from usersync.config.settings import DEFAULT_SYNC_PATH, DEFAULT_TIMEOUT_SECONDS
from usersync.core.payload import SyncPayload

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Keycloak-Secret"
CONTENT_TYPE = "application/json; charset=UTF-8"


class DeliveryOutcome(str, Enum):
    SUCCESS = "success"
    SERVICE_REJECTED = "service_rejected"
    TRANSPORT_FAILURE = "transport_failure"


class SyncClient:
    """Client for the user service's Keycloak sync endpoint.

    Usage:
        client = SyncClient("http://users:8081", secret="s3cret")
        client.deliver(payload)
    """

    def __init__(
        self,
        service_url: str,
        secret: Optional[str] = None,
        *,
        sync_path: str = DEFAULT_SYNC_PATH,
        connect_timeout: float = DEFAULT_TIMEOUT_SECONDS,
        read_timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize sync client.

        Args:
            service_url: Base URL of the user service
            secret: Shared secret sent as X-Keycloak-Secret (optional)
            sync_path: Path of the sync endpoint on the user service
            connect_timeout: Connection timeout in seconds
            read_timeout: Read timeout in seconds
        """
        self.url = f"{service_url.rstrip('/')}{sync_path}"
        self.secret = secret or ""
        self.timeout = (connect_timeout, read_timeout)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": CONTENT_TYPE}
        if self.secret:
            headers[SECRET_HEADER] = self.secret
        else:
            logger.warning("KEYCLOAK_SYNC_SECRET not set, sync may fail")
        return headers

    def deliver(self, payload: SyncPayload) -> DeliveryOutcome:
        """POST the payload to the user service and log the outcome.

        Args:
            payload: Sync payload for one user

        Returns:
            DeliveryOutcome, for logging only
        """
        body = payload.to_bytes()
        headers = self._headers()
        logger.info(f"Attempting to sync user {payload.id or payload.username} to {self.url}")
        logger.debug(f"Sync payload: {payload.to_json()}")

        try:
            with requests.post(self.url, data=body, headers=headers, timeout=self.timeout) as resp:
                return self._classify(resp)
        except requests.exceptions.RequestException as exc:
            logger.error(f"Error syncing user to service: {exc}", exc_info=True)
            return DeliveryOutcome.TRANSPORT_FAILURE
        except Exception as exc:
            # urllib3 can surface URL parsing errors outside RequestException
            logger.error(f"Unexpected error syncing user to service: {exc}", exc_info=True)
            return DeliveryOutcome.TRANSPORT_FAILURE

    def _classify(self, resp: requests.Response) -> DeliveryOutcome:
        if 200 <= resp.status_code < 300:
            logger.info(f"Successfully synced user to service. Response code: {resp.status_code}")
            return DeliveryOutcome.SUCCESS

        logger.warning(f"Failed to sync user to service. Response code: {resp.status_code}")
        error_body = _read_error_body(resp)
        if error_body:
            logger.error(f"User service error body ({resp.status_code}): {error_body}")
        return DeliveryOutcome.SERVICE_REJECTED


def _read_error_body(resp: requests.Response) -> Optional[str]:
    """Best-effort read of a rejection body; never raises."""
    try:
        return resp.text
    except (requests.exceptions.RequestException, UnicodeDecodeError, LookupError) as exc:
        logger.debug(f"Could not read error body: {exc}")
        return None
