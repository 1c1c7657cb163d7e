"""
Application state machine.

``transition(session, message)`` returns the next Session snapshot and the
commands the runtime must execute. It never performs I/O itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from arrogance import spinner
from arrogance.config import (
    DEFAULT_TABLE_HEIGHT,
    ROUTINES_TAB,
    TABLE_CHROME_MARGIN,
    TABS,
    TITLE,
    USERS_TAB,
)
from arrogance.messages import (
    Command,
    FetchRoutine,
    FetchRoutines,
    FetchUser,
    FetchUsers,
    GatewayFailed,
    GatewayReady,
    InitializeGateway,
    KeyPressed,
    Message,
    Quit,
    Resized,
    RoutineDetailFailed,
    RoutineDetailLoaded,
    RoutinesFailed,
    RoutinesLoaded,
    ScheduleTick,
    Tick,
    UserDetailFailed,
    UserDetailLoaded,
    UsersFailed,
    UsersLoaded,
)
from arrogance.providers import Gateway, RoutineRecord, Services, UserRecord
from arrogance.router import View, route
from arrogance.table import Column, USER_COLUMNS, routine_columns, routine_rows, user_rows

QUIT_KEYS = frozenset({"q", "ctrl+c"})
NEXT_KEYS = frozenset({"tab", "right", "l"})
PREV_KEYS = frozenset({"shift+tab", "left", "h"})
UP_KEYS = frozenset({"up", "k"})
DOWN_KEYS = frozenset({"down", "j"})
OPEN_KEYS = frozenset({"enter"})
BACK_KEYS = frozenset({"escape", "backspace", "delete"})


@dataclass(frozen=True)
class UsersPanel:
    loading: bool = False
    error: str | None = None
    users: tuple[UserRecord, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()
    cursor: int = 0

    @property
    def columns(self) -> tuple[Column, ...]:
        return USER_COLUMNS


@dataclass(frozen=True)
class RoutinesPanel:
    loading: bool = False
    error: str | None = None
    routines: tuple[RoutineRecord, ...] = ()
    columns: tuple[Column, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()
    cursor: int = 0


@dataclass(frozen=True)
class DetailPanel:
    """A single user or routine opened from its tab's table."""

    tab: int
    key: str
    loading: bool = True
    error: str | None = None
    user: UserRecord | None = None
    routine: RoutineRecord | None = None


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of everything the dashboard shows."""

    gateway: Gateway | None = None
    services: Services | None = None
    title: str = TITLE
    message: str = "Initializing Firebase..."
    tabs: tuple[str, ...] = TABS
    active_tab: int = 0
    loading: bool = True
    error: str | None = None
    spinner_index: int = 0
    clock_running: bool = False
    width: int = 0
    height: int = 0
    table_height: int = DEFAULT_TABLE_HEIGHT
    users: UsersPanel = field(default_factory=UsersPanel)
    routines: RoutinesPanel = field(default_factory=RoutinesPanel)
    detail: DetailPanel | None = None

    @property
    def view(self) -> View:
        """Current view, always derived through the router."""
        return route(self.loading, bool(self.error), self.active_tab, self.detail is not None)

    @property
    def animating(self) -> bool:
        detail_loading = self.detail is not None and self.detail.loading
        return self.loading or self.users.loading or self.routines.loading or detail_loading


def new_session(gateway: Gateway, width: int = 0, height: int = 0) -> Session:
    session = Session(gateway=gateway)
    if width or height:
        session = _resize(session, width, height)
    return session


def start(session: Session) -> tuple[Session, list[Command]]:
    """Startup commands: connect the gateway and start the spinner clock."""
    return replace(session, clock_running=True), [
        InitializeGateway(session.gateway),
        ScheduleTick(),
    ]


def transition(session: Session, message: Message) -> tuple[Session, list[Command]]:
    if isinstance(message, KeyPressed):
        return _on_key(session, message.key)

    if isinstance(message, Resized):
        return _resize(session, message.width, message.height), []

    if isinstance(message, Tick):
        return _on_tick(session)

    if isinstance(message, GatewayReady):
        session = replace(
            session,
            services=message.services,
            loading=False,
            message="Firebase initialized successfully!",
        )
        return _begin_fetch(session)

    if isinstance(message, GatewayFailed):
        session = replace(
            session,
            loading=False,
            error=f"Failed to initialize Firebase: {message.error}",
        )
        return session, []

    if isinstance(message, UsersLoaded):
        users = tuple(sorted(message.users, key=lambda u: u.created_at))
        rows = user_rows(users)
        panel = replace(
            session.users,
            loading=False,
            error=None,
            users=users,
            rows=rows,
            cursor=_clamp(session.users.cursor, len(rows)),
        )
        return replace(session, users=panel), []

    if isinstance(message, UsersFailed):
        panel = replace(
            session.users,
            loading=False,
            error=f"Failed to load users: {message.error}",
        )
        return replace(session, users=panel), []

    if isinstance(message, RoutinesLoaded):
        routines = tuple(message.routines)
        columns = routine_columns(routines)
        rows = routine_rows(routines, columns)
        panel = replace(
            session.routines,
            loading=False,
            error=None,
            routines=routines,
            columns=columns,
            rows=rows,
            cursor=_clamp(session.routines.cursor, len(rows)),
        )
        return replace(session, routines=panel), []

    if isinstance(message, RoutinesFailed):
        panel = replace(
            session.routines,
            loading=False,
            error=f"Failed to load routines: {message.error}",
        )
        return replace(session, routines=panel), []

    # Detail results for anything but the open detail are stale
    if isinstance(message, UserDetailLoaded):
        if not _detail_is(session, USERS_TAB, message.user.uid):
            return session, []
        detail = replace(session.detail, loading=False, error=None, user=message.user)
        return replace(session, detail=detail), []

    if isinstance(message, UserDetailFailed):
        if not _detail_is(session, USERS_TAB, message.uid):
            return session, []
        detail = replace(
            session.detail,
            loading=False,
            error=f"Failed to load user: {message.error}",
        )
        return replace(session, detail=detail), []

    if isinstance(message, RoutineDetailLoaded):
        if not _detail_is(session, ROUTINES_TAB, message.routine.id):
            return session, []
        detail = replace(session.detail, loading=False, error=None, routine=message.routine)
        return replace(session, detail=detail), []

    if isinstance(message, RoutineDetailFailed):
        if not _detail_is(session, ROUTINES_TAB, message.routine_id):
            return session, []
        detail = replace(
            session.detail,
            loading=False,
            error=f"Failed to load routine: {message.error}",
        )
        return replace(session, detail=detail), []

    return session, []


def _on_key(session: Session, key: str) -> tuple[Session, list[Command]]:
    if key in QUIT_KEYS:
        return session, [Quit(exit_code=1 if session.error else 0)]
    if key in NEXT_KEYS:
        return _switch_tab(session, 1)
    if key in PREV_KEYS:
        return _switch_tab(session, -1)
    if key in UP_KEYS:
        return _move_cursor(session, -1), []
    if key in DOWN_KEYS:
        return _move_cursor(session, 1), []
    if key in OPEN_KEYS:
        return _open_detail(session)
    if key in BACK_KEYS and session.detail is not None:
        return replace(session, detail=None), []
    return session, []


def _switch_tab(session: Session, step: int) -> tuple[Session, list[Command]]:
    active = (session.active_tab + step) % len(session.tabs)
    return _begin_fetch(replace(session, active_tab=active, detail=None))


def _begin_fetch(session: Session) -> tuple[Session, list[Command]]:
    """Start loading the active panel when its view is showing."""
    services = session.services
    view = session.view

    if view == View.USERS:
        panel = replace(session.users, loading=True, error=None)
        session = replace(session, users=panel)
        command = FetchUsers(services.auth if services else None)
    elif view == View.ROUTINES:
        panel = replace(session.routines, loading=True, error=None)
        session = replace(session, routines=panel)
        command = FetchRoutines(services.store if services else None)
    else:
        return session, []

    return _with_clock(session, [command])


def _open_detail(session: Session) -> tuple[Session, list[Command]]:
    """Open the row under the cursor and fetch its full record."""
    services = session.services
    view = session.view

    if view == View.USERS:
        panel = session.users
        if panel.loading or not panel.users:
            return session, []
        uid = panel.users[panel.cursor].uid
        session = replace(session, detail=DetailPanel(tab=USERS_TAB, key=uid))
        command = FetchUser(services.auth if services else None, uid)
    elif view == View.ROUTINES:
        panel = session.routines
        if panel.loading or not panel.routines:
            return session, []
        routine_id = panel.routines[panel.cursor].id
        session = replace(session, detail=DetailPanel(tab=ROUTINES_TAB, key=routine_id))
        command = FetchRoutine(services.store if services else None, routine_id)
    else:
        return session, []

    return _with_clock(session, [command])


def _with_clock(session: Session, commands: list[Command]) -> tuple[Session, list[Command]]:
    """Restart the spinner clock if it has stopped."""
    if not session.clock_running:
        session = replace(session, clock_running=True)
        commands = commands + [ScheduleTick()]
    return session, commands


def _detail_is(session: Session, tab: int, key: str) -> bool:
    detail = session.detail
    return detail is not None and detail.tab == tab and detail.key == key


def _on_tick(session: Session) -> tuple[Session, list[Command]]:
    session = replace(session, spinner_index=spinner.advance(session.spinner_index))
    if session.animating:
        return replace(session, clock_running=True), [ScheduleTick()]
    return replace(session, clock_running=False), []


def _resize(session: Session, width: int, height: int) -> Session:
    return replace(
        session,
        width=width,
        height=height,
        table_height=max(height - TABLE_CHROME_MARGIN, 1),
    )


def _move_cursor(session: Session, step: int) -> Session:
    if session.view == View.USERS:
        panel = session.users
        cursor = _clamp(panel.cursor + step, len(panel.rows))
        return replace(session, users=replace(panel, cursor=cursor))
    if session.view == View.ROUTINES:
        panel = session.routines
        cursor = _clamp(panel.cursor + step, len(panel.rows))
        return replace(session, routines=replace(panel, cursor=cursor))
    return session


def _clamp(cursor: int, count: int) -> int:
    if count <= 0:
        return 0
    return min(max(cursor, 0), count - 1)
