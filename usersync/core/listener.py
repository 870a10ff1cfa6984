"""User sync listener: the event-to-webhook pipeline.

    Event ──> classify ──> resolve user ──> derive role ──> validate
                                                              │
                             user service <── deliver <── encode

Each stage may stop the pipeline after logging. Every path returns a
``SyncResult``; nothing raises out of ``handle``. The listener keeps no
state between events apart from the collaborators given at construction.
"""
from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Optional

import requests

from usersync.config.settings import AppConfig
from usersync.core.delivery import DeliveryOutcome, SyncClient
from usersync.core.events import (
    EventKind,
    EventNotification,
    classify_admin_event,
    classify_user_event,
    parse_notification,
)
from usersync.core.keycloak import KeycloakClient, KeycloakError, UserService
from usersync.core.payload import build_payload
from usersync.core.resolver import UserRecord, UserResolver, subject_from_resource_path
from usersync.core.roles import derive_role
from usersync.core.validators import missing_required_fields

logger = logging.getLogger(__name__)


class SyncResult(str, Enum):
    """Terminal state reached while handling one event."""
    IGNORED = "ignored"
    NOT_FOUND = "not_found"
    LOOKUP_FAILED = "lookup_failed"
    VALIDATION_FAILED = "validation_failed"
    DELIVERED = "delivered"
    DELIVERY_FAILED = "delivery_failed"


class UserSyncListener:
    """Forward user creations seen in Keycloak events to the user service."""

    def __init__(
        self,
        resolver: UserResolver,
        client: SyncClient,
        *,
        default_realm: str,
        sync_on_login: bool = True,
    ):
        self.resolver = resolver
        self.client = client
        self.default_realm = default_realm
        self.sync_on_login = sync_on_login

    # ─────────────────────────────────────────────────────────────────────
    # Entry points
    # ─────────────────────────────────────────────────────────────────────
    def on_event(self, event_type: str, user_id: str, realm: Optional[str] = None) -> SyncResult:
        """Handle a Keycloak user event (REGISTER, LOGIN)."""
        kind = classify_user_event(event_type, sync_on_login=self.sync_on_login)
        if kind is None:
            return SyncResult.IGNORED
        if not (user_id or "").strip():
            logger.warning(f"{kind.value} event without a user id, nothing to sync")
            return SyncResult.IGNORED
        return self.handle(EventNotification(kind, subject_id=user_id, realm=realm))

    def on_admin_event(
        self,
        resource_type: str,
        operation_type: str,
        resource_path: Optional[str],
        realm: Optional[str] = None,
    ) -> SyncResult:
        """Handle a Keycloak admin event; only USER/CREATE is synced."""
        if classify_admin_event(resource_type, operation_type) is None or resource_path is None:
            return SyncResult.IGNORED
        return self.handle(EventNotification(EventKind.ADMIN_CREATE, resource_path=resource_path, realm=realm))

    def on_raw_event(self, raw: Any) -> SyncResult:
        """Handle a raw Keycloak event document.

        Raises:
            EventFormatError: If the document cannot be interpreted
        """
        notification = parse_notification(
            raw,
            default_realm=self.default_realm,
            sync_on_login=self.sync_on_login,
        )
        if notification is None:
            return SyncResult.IGNORED
        return self.handle(notification)

    # ─────────────────────────────────────────────────────────────────────
    # Pipeline
    # ─────────────────────────────────────────────────────────────────────
    def handle(self, notification: EventNotification) -> SyncResult:
        """Resolve the affected user and sync it."""
        if notification.kind is EventKind.ADMIN_CREATE:
            subject_id = subject_from_resource_path(notification.resource_path)
            if subject_id is None:
                # Not a user resource; nothing to sync
                return SyncResult.IGNORED
        else:
            subject_id = notification.subject_id

        realm = notification.realm or self.default_realm
        try:
            user = self.resolver.resolve(realm, subject_id)
        except (KeycloakError, requests.exceptions.RequestException, ValueError) as exc:
            logger.error(
                f"Could not look up user {subject_id} in realm {realm} "
                f"for event {notification.kind.value}: {exc}"
            )
            return SyncResult.LOOKUP_FAILED
        except Exception:
            logger.exception(f"Unexpected error looking up user {subject_id} in realm {realm}")
            return SyncResult.LOOKUP_FAILED

        if user is None:
            logger.warning(f"User not found for event {notification.kind.value}: {subject_id}")
            return SyncResult.NOT_FOUND

        return self.sync_user(user)

    def sync_user(self, user: UserRecord) -> SyncResult:
        """Validate, encode and deliver one resolved user."""
        role = derive_role(user)

        missing = missing_required_fields(user)
        if missing:
            logger.warning(
                f"User missing required fields or fields contain only whitespace "
                f"({', '.join(missing)}), skipping sync for Keycloak ID: {user.id}"
            )
            return SyncResult.VALIDATION_FAILED

        outcome = self.client.deliver(build_payload(user, role))
        if outcome is DeliveryOutcome.SUCCESS:
            return SyncResult.DELIVERED
        return SyncResult.DELIVERY_FAILED


def create_listener(cfg: AppConfig, session: Optional[requests.Session] = None) -> UserSyncListener:
    """Build a listener from configuration.

    Args:
        cfg: Loaded application configuration
        session: Optional requests session for Keycloak Admin API calls

    Returns:
        UserSyncListener ready to handle events
    """
    if not cfg.sync_secret:
        logger.warning("KEYCLOAK_SYNC_SECRET not set, the user service may reject sync requests")
    if not cfg.keycloak_service_client_secret:
        logger.warning("KEYCLOAK_SERVICE_CLIENT_SECRET not set, user lookups will fail to authenticate")

    kc_client = KeycloakClient(cfg.keycloak_url, session=session)
    kc_client.configure_service_account(
        cfg.keycloak_service_realm,
        cfg.keycloak_service_client_id,
        cfg.keycloak_service_client_secret,
    )
    resolver = UserResolver(UserService(kc_client))
    client = SyncClient(
        cfg.user_service_url,
        cfg.sync_secret,
        sync_path=cfg.sync_path,
        connect_timeout=cfg.connect_timeout,
        read_timeout=cfg.read_timeout,
    )
    return UserSyncListener(
        resolver,
        client,
        default_realm=cfg.keycloak_realm,
        sync_on_login=cfg.sync_on_login,
    )
