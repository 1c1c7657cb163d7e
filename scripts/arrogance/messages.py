"""
Messages consumed by the state machine and commands it emits.

Messages flow into transition(); commands flow out of it and are executed
by the runtime. Completion messages are the only way worker results reach
the session.
"""

from __future__ import annotations

from dataclasses import dataclass

from arrogance.providers import (
    AuthGateway,
    Gateway,
    RoutineRecord,
    Services,
    StoreGateway,
    UserRecord,
)

# =============================================================================
# Input messages
# =============================================================================


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    pass


# =============================================================================
# Completion messages
# =============================================================================


@dataclass(frozen=True)
class GatewayReady:
    services: Services


@dataclass(frozen=True)
class GatewayFailed:
    error: Exception


@dataclass(frozen=True)
class UsersLoaded:
    users: tuple[UserRecord, ...]


@dataclass(frozen=True)
class UsersFailed:
    error: Exception


@dataclass(frozen=True)
class RoutinesLoaded:
    routines: tuple[RoutineRecord, ...]


@dataclass(frozen=True)
class RoutinesFailed:
    error: Exception


@dataclass(frozen=True)
class UserDetailLoaded:
    user: UserRecord


@dataclass(frozen=True)
class UserDetailFailed:
    uid: str
    error: Exception


@dataclass(frozen=True)
class RoutineDetailLoaded:
    routine: RoutineRecord


@dataclass(frozen=True)
class RoutineDetailFailed:
    routine_id: str
    error: Exception


Message = (
    KeyPressed
    | Resized
    | Tick
    | GatewayReady
    | GatewayFailed
    | UsersLoaded
    | UsersFailed
    | RoutinesLoaded
    | RoutinesFailed
    | UserDetailLoaded
    | UserDetailFailed
    | RoutineDetailLoaded
    | RoutineDetailFailed
)


# =============================================================================
# Commands
# =============================================================================


@dataclass(frozen=True)
class InitializeGateway:
    gateway: Gateway


@dataclass(frozen=True)
class FetchUsers:
    auth: AuthGateway | None


@dataclass(frozen=True)
class FetchRoutines:
    store: StoreGateway | None


@dataclass(frozen=True)
class FetchUser:
    auth: AuthGateway | None
    uid: str


@dataclass(frozen=True)
class FetchRoutine:
    store: StoreGateway | None
    routine_id: str


@dataclass(frozen=True)
class ScheduleTick:
    pass


@dataclass(frozen=True)
class Quit:
    exit_code: int = 0


Command = (
    InitializeGateway
    | FetchUsers
    | FetchRoutines
    | FetchUser
    | FetchRoutine
    | ScheduleTick
    | Quit
)
