"""
Firebase implementation of the remote data gateway.

Thin wrappers over firebase_admin that translate SDK exceptions into the
dashboard's error types.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import firebase_admin
from firebase_admin import auth, credentials, firestore
from firebase_admin.exceptions import FirebaseError
from google.api_core.exceptions import GoogleAPIError

from arrogance.credentials import activate, check_service_account
from arrogance.errors import AuthError, CredentialError, InitError, StoreError
from arrogance.providers import Gateway, Services

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication operations bound to one Firebase app."""

    def __init__(self, app: firebase_admin.App | None) -> None:
        self._app = app

    def _require_app(self) -> firebase_admin.App:
        if self._app is None:
            raise AuthError("auth client not initialized")
        return self._app

    def list_users(
        self, page_size: int, page_token: str | None = None
    ) -> Iterator[auth.ExportedUserRecord]:
        """Yield every user, fetching further pages on demand."""
        app = self._require_app()
        logger.debug("Listing users (page size %d)", page_size)
        try:
            page = auth.list_users(page_token=page_token, max_results=page_size, app=app)
            yield from page.iterate_all()
        except (FirebaseError, ValueError) as e:
            raise AuthError(f"error iterating users: {e}") from e

    def get_user(self, uid: str) -> auth.UserRecord:
        app = self._require_app()
        try:
            return auth.get_user(uid, app=app)
        except (FirebaseError, ValueError) as e:
            raise AuthError(str(e)) from e


class FirestoreService:
    """Document operations on a Firestore client."""

    def __init__(self, client: Any | None) -> None:
        self._client = client

    def _require_client(self) -> Any:
        if self._client is None:
            raise StoreError("firestore client not initialized")
        return self._client

    def list_documents(self, collection: str) -> Iterator[Any]:
        """Yield document snapshots of a collection."""
        client = self._require_client()
        logger.debug("Listing documents in %s", collection)
        try:
            yield from client.collection(collection).stream()
        except GoogleAPIError as e:
            raise StoreError(f"error listing {collection}: {e}") from e

    def get(self, collection: str, document_id: str) -> dict:
        client = self._require_client()
        try:
            snapshot = client.collection(collection).document(document_id).get()
        except GoogleAPIError as e:
            raise StoreError(str(e)) from e
        if not snapshot.exists:
            raise StoreError("document not found")
        return snapshot.to_dict() or {}


class FirebaseGateway:
    """Owns the Firebase app and Firestore client for one session."""

    def __init__(
        self,
        resolve: Callable[[], tuple[Path, dict]] = check_service_account,
    ) -> None:
        self._resolve = resolve
        self._lock = threading.Lock()
        self._app: firebase_admin.App | None = None
        self._firestore: Any | None = None

    def initialize(self) -> Services:
        """Validate credentials and connect. Raises InitError."""
        try:
            path, account = self._resolve()
        except CredentialError as e:
            raise InitError(str(e)) from e

        activate(path)
        try:
            app = firebase_admin.initialize_app(
                credentials.Certificate(str(path)),
                {"projectId": account["project_id"]},
            )
        except (FirebaseError, GoogleAPIError, ValueError) as e:
            raise InitError(str(e)) from e

        try:
            client = firestore.client(app)
        except (FirebaseError, GoogleAPIError, ValueError) as e:
            firebase_admin.delete_app(app)
            raise InitError(str(e)) from e

        with self._lock:
            self._app = app
            self._firestore = client

        logger.info("Firebase initialized with service account: %s", path)
        return Services(auth=AuthService(app), store=FirestoreService(client))

    def close(self) -> None:
        """Close the Firestore client and delete the app."""
        with self._lock:
            client, app = self._firestore, self._app
            self._firestore = None
            self._app = None

        if client is not None:
            client.close()
        if app is not None:
            firebase_admin.delete_app(app)
            logger.info("Firebase connections closed")


def close_quietly(gateway: Gateway) -> None:
    """Best-effort close used on shutdown paths."""
    try:
        gateway.close()
    except Exception:
        logger.exception("Failed to close gateway")
