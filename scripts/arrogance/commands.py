"""
Fetch commands executed on worker threads.

Every function here returns exactly one completion message and never
raises: gateway and decode failures become the matching *Failed message.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from arrogance.config import ROUTINES_COLLECTION, USERS_PAGE_SIZE
from arrogance.errors import AuthError, DecodeError, InitError, StoreError
from arrogance.messages import (
    FetchRoutine,
    FetchRoutines,
    FetchUser,
    FetchUsers,
    GatewayFailed,
    GatewayReady,
    InitializeGateway,
    RoutineDetailFailed,
    RoutineDetailLoaded,
    RoutinesFailed,
    RoutinesLoaded,
    UserDetailFailed,
    UserDetailLoaded,
    UsersFailed,
    UsersLoaded,
)
from arrogance.providers import AuthGateway, Gateway, RoutineRecord, StoreGateway, UserRecord


def _optional_millis(value: Any) -> int | None:
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise DecodeError(f"invalid timestamp: {value!r}")
    if value <= 0:
        return None
    try:
        datetime.fromtimestamp(value / 1000)
    except (OverflowError, OSError, ValueError) as e:
        raise DecodeError(f"timestamp out of range: {value}") from e
    return value


def decode_user(raw: Any) -> UserRecord:
    """Convert an SDK user record into a UserRecord."""
    try:
        uid = raw.uid
        metadata = raw.user_metadata
        created = metadata.creation_timestamp
        last_login = metadata.last_sign_in_timestamp
        last_refresh = metadata.last_refresh_timestamp
    except AttributeError as e:
        raise DecodeError(f"malformed user record: {e}") from e

    if not isinstance(uid, str) or not uid:
        raise DecodeError(f"user record without uid: {uid!r}")

    return UserRecord(
        uid=uid,
        email=getattr(raw, "email", None),
        display_name=getattr(raw, "display_name", None),
        disabled=bool(getattr(raw, "disabled", False)),
        created_at=_optional_millis(created) or 0,
        last_login_at=_optional_millis(last_login),
        last_activity_at=_optional_millis(last_refresh),
    )


def decode_routine(snapshot: Any) -> RoutineRecord:
    """Convert a document snapshot into a RoutineRecord."""
    try:
        doc_id = snapshot.id
        data = snapshot.to_dict()
    except AttributeError as e:
        raise DecodeError(f"malformed document: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DecodeError(f"document {doc_id} is not a mapping")
    return RoutineRecord(id=doc_id, data=dict(data))


# Decoders per collection name
DOCUMENT_DECODERS: dict[str, Callable[[Any], Any]] = {
    ROUTINES_COLLECTION: decode_routine,
}


def initialize_gateway(gateway: Gateway) -> GatewayReady | GatewayFailed:
    try:
        return GatewayReady(services=gateway.initialize())
    except InitError as e:
        return GatewayFailed(error=e)
    except Exception as e:
        return GatewayFailed(error=InitError(str(e)))


def fetch_users(
    auth: AuthGateway | None,
    page_size: int = USERS_PAGE_SIZE,
    page_token: str | None = None,
) -> UsersLoaded | UsersFailed:
    """Drain the user listing; any failure fails the whole fetch."""
    if auth is None:
        return UsersFailed(error=AuthError("auth service not initialized"))

    try:
        users = tuple(decode_user(raw) for raw in auth.list_users(page_size, page_token))
    except Exception as e:
        return UsersFailed(error=e)
    return UsersLoaded(users=users)


def fetch_documents(store: StoreGateway, collection: str) -> tuple[Any, ...]:
    """Drain and decode a collection. Raises StoreError or DecodeError."""
    decode = DOCUMENT_DECODERS.get(collection)
    if decode is None:
        raise StoreError(f"no decoder registered for {collection}")
    return tuple(decode(snapshot) for snapshot in store.list_documents(collection))


def fetch_routines(store: StoreGateway | None) -> RoutinesLoaded | RoutinesFailed:
    if store is None:
        return RoutinesFailed(error=StoreError("firestore service not initialized"))

    try:
        routines = fetch_documents(store, ROUTINES_COLLECTION)
    except Exception as e:
        return RoutinesFailed(error=e)
    return RoutinesLoaded(routines=routines)


def fetch_user(auth: AuthGateway | None, uid: str) -> UserDetailLoaded | UserDetailFailed:
    """Look up a single user for the detail view."""
    if auth is None:
        return UserDetailFailed(uid=uid, error=AuthError("auth service not initialized"))

    try:
        user = decode_user(auth.get_user(uid))
    except Exception as e:
        return UserDetailFailed(uid=uid, error=e)
    return UserDetailLoaded(user=user)


def fetch_routine(
    store: StoreGateway | None, routine_id: str
) -> RoutineDetailLoaded | RoutineDetailFailed:
    if store is None:
        return RoutineDetailFailed(
            routine_id=routine_id, error=StoreError("firestore service not initialized")
        )

    try:
        data = store.get(ROUTINES_COLLECTION, routine_id)
        if not isinstance(data, dict):
            raise DecodeError(f"document {routine_id} is not a mapping")
    except Exception as e:
        return RoutineDetailFailed(routine_id=routine_id, error=e)
    return RoutineDetailLoaded(routine=RoutineRecord(id=routine_id, data=dict(data)))


WorkerCommand = InitializeGateway | FetchUsers | FetchRoutines | FetchUser | FetchRoutine


def execute(command: WorkerCommand) -> Any:
    """Run a worker command and return its completion message."""
    if isinstance(command, InitializeGateway):
        return initialize_gateway(command.gateway)
    if isinstance(command, FetchUsers):
        return fetch_users(command.auth)
    if isinstance(command, FetchRoutines):
        return fetch_routines(command.store)
    if isinstance(command, FetchUser):
        return fetch_user(command.auth, command.uid)
    if isinstance(command, FetchRoutine):
        return fetch_routine(command.store, command.routine_id)
    raise TypeError(f"not a worker command: {command!r}")
