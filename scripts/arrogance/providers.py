"""
Data providers for the dashboard.

Protocols define the gateway interface; the Firebase implementation in
gateway.py can be swapped for testing or alternative backends.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class UserRecord:
    """Immutable snapshot of an authentication user."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    disabled: bool = False
    created_at: int = 0
    last_login_at: int | None = None
    last_activity_at: int | None = None


@dataclass(frozen=True)
class RoutineRecord:
    """Immutable snapshot of one document in the routines collection."""

    id: str
    data: dict = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Document fields with the injected ``id`` field."""
        return {**self.data, "id": self.id}


class AuthGateway(Protocol):
    """Protocol for the authentication service."""

    def list_users(
        self, page_size: int, page_token: str | None = None
    ) -> Iterator[Any]:
        """Lazily iterate raw user records, page by page."""
        ...

    def get_user(self, uid: str) -> Any:
        """Fetch one raw user record."""
        ...


class StoreGateway(Protocol):
    """Protocol for the document store."""

    def list_documents(self, collection: str) -> Iterator[Any]:
        """Iterate raw document snapshots of a collection."""
        ...

    def get(self, collection: str, document_id: str) -> dict:
        """Fetch the fields of one document."""
        ...


@dataclass(frozen=True)
class Services:
    """Service handles available once the gateway is initialized."""

    auth: AuthGateway | None
    store: StoreGateway | None


class Gateway(Protocol):
    """Protocol for the remote data gateway."""

    def initialize(self) -> Services:
        """Connect and return service handles. Raises InitError."""
        ...

    def close(self) -> None:
        """Release connections. Safe to call more than once."""
        ...
