"""
Projects fetched records into fixed-width table rows.

Rows keep the order of the input records; sorting is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from arrogance.providers import RoutineRecord, UserRecord

TIMESTAMP_FORMAT = "%d %b %Y, %H:%M"
PLACEHOLDER = "-"

# Routines carry no schema; only the first few fields get a column
MAX_ROUTINE_FIELDS = 5


@dataclass(frozen=True)
class Column:
    title: str
    width: int


USER_COLUMNS = (
    Column("UID", 25),
    Column("Email", 30),
    Column("Display Name", 20),
    Column("Created", 20),
    Column("Last Sign In", 20),
    Column("Last Activity", 20),
)

ROUTINE_ID_COLUMN = Column("ID", 25)
ROUTINE_FIELD_WIDTH = 20


def format_timestamp(millis: int | None) -> str:
    """Format epoch milliseconds; missing or zero values become a dash."""
    if not millis or millis <= 0:
        return PLACEHOLDER
    return datetime.fromtimestamp(millis / 1000).strftime(TIMESTAMP_FORMAT)


def format_value(value: object) -> str:
    """Render an arbitrary document value as a single table cell."""
    if value is None:
        return PLACEHOLDER
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    if isinstance(value, bool):
        return "yes" if value else "no"
    return " ".join(str(value).split())


def user_row(user: UserRecord) -> tuple[str, ...]:
    return (
        user.uid,
        user.email or "",
        user.display_name or "",
        format_timestamp(user.created_at),
        format_timestamp(user.last_login_at),
        format_timestamp(user.last_activity_at),
    )


def user_rows(users: tuple[UserRecord, ...] | list[UserRecord]) -> tuple[tuple[str, ...], ...]:
    return tuple(user_row(u) for u in users)


def routine_columns(routines: tuple[RoutineRecord, ...] | list[RoutineRecord]) -> tuple[Column, ...]:
    """ID column followed by the sorted union of field names."""
    names = sorted({name for r in routines for name in r.data if name != "id"})
    fields = tuple(Column(name, ROUTINE_FIELD_WIDTH) for name in names[:MAX_ROUTINE_FIELDS])
    return (ROUTINE_ID_COLUMN,) + fields


def routine_rows(
    routines: tuple[RoutineRecord, ...] | list[RoutineRecord],
    columns: tuple[Column, ...],
) -> tuple[tuple[str, ...], ...]:
    rows = []
    for routine in routines:
        cells = [routine.id]
        for column in columns[1:]:
            cells.append(format_value(routine.data.get(column.title)))
        rows.append(tuple(cells))
    return tuple(rows)


def fit_columns(widths: list[int] | tuple[int, ...], available: int) -> list[int]:
    """Scale all widths by one ratio when they exceed the available width.

    >>> fit_columns([25, 30, 20, 20, 20, 20], 90)
    [17, 20, 13, 13, 13, 13]
    """
    total = sum(widths)
    if total <= available or total == 0:
        return list(widths)
    ratio = max(available, 0) / total
    return [round(w * ratio) for w in widths]


def fit_cell(text: str, width: int) -> str:
    """Pad or truncate text to exactly ``width`` characters."""
    if width <= 0:
        return ""
    if len(text) > width:
        return text[: width - 1] + "…"
    return text.ljust(width)


def format_row(cells: tuple[str, ...] | list[str], widths: list[int]) -> str:
    return " ".join(fit_cell(cell, w) for cell, w in zip(cells, widths))


def visible_window(row_count: int, cursor: int, height: int) -> tuple[int, int]:
    """Start/end indices of the rows shown so the cursor stays visible."""
    height = max(height, 1)
    start = max(0, cursor - height + 1)
    end = min(row_count, start + height)
    return start, end
