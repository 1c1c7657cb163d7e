"""
Frame renderer.

Turns a Session snapshot into the frame shown by the TUI. Every view
shares the same chrome: a boxed tab bar, a rounded content box and a
footer hint line.

Each frame line is a list of (text, style) segments. ``render`` joins the
text only; ``render_text`` builds a rich Text with the styles applied.
"""

from __future__ import annotations

from collections.abc import Callable

from rich.text import Text

from arrogance import spinner
from arrogance.router import View
from arrogance.state import Session
from arrogance.table import fit_columns, format_row, format_timestamp, format_value, visible_window

# Box drawing characters
BOX_H = "─"
BOX_V = "│"
BOX_TL = "┌"
BOX_TR = "┐"
BOX_BL = "└"
BOX_BR = "┘"

# Rounded corners for the content box
ROUND_TL = "╭"
ROUND_TR = "╮"
ROUND_BL = "╰"
ROUND_BR = "╯"

# Rich style names
HIGHLIGHT = "bright_blue"
MUTED = "bright_black"
SUCCESS = "bright_green"
FAILURE = "bright_red"
LOADING = "bright_yellow"
SELECTED = "reverse"
BOLD = "bold"

MIN_FRAME_WIDTH = 20
# Rows taken by tab bar, content box borders and footer
CONTENT_MARGIN = 8

QUIT_HINT = "Press 'q' to quit, tab/arrow keys to navigate"
BACK_HINT = "Press 'q' to quit, esc to go back"

Segment = tuple[str, str]
Line = list[Segment]
Styled = tuple[str, str]


def box_line(left: str, fill: str, right: str, width: int) -> str:
    """Create a box line."""
    return left + fill * (width - 2) + right


def box_text(text: str, width: int, align: str = "left", style: str = "") -> Line:
    """Create a box line with text; only the padded content carries the style."""
    content_width = width - 4  # Account for borders and padding
    if len(text) > content_width:
        text = text[: content_width - 1] + "…"

    if align == "center":
        padded = text.center(content_width)
    elif align == "right":
        padded = text.rjust(content_width)
    else:
        padded = text.ljust(content_width)

    return [(f"{BOX_V} ", ""), (padded, style), (f" {BOX_V}", "")]


def plain(line: Line) -> str:
    return "".join(text for text, _ in line)


def render_tabs(session: Session, width: int) -> list[Line]:
    """Boxed tab bar; the active tab is bracketed."""
    labels = []
    for i, tab in enumerate(session.tabs):
        if i == session.active_tab:
            labels.append(f"[ {tab} ]")
        else:
            labels.append(f"  {tab}  ")
    return [
        [(box_line(BOX_TL, BOX_H, BOX_TR, width), "")],
        box_text(" ".join(labels), width, style=HIGHLIGHT),
        [(box_line(BOX_BL, BOX_H, BOX_BR, width), "")],
    ]


# =============================================================================
# View bodies
# =============================================================================


def _loading_body(session: Session) -> list[Styled]:
    return [
        (session.title, BOLD),
        ("", ""),
        (f"{spinner.frame(session.spinner_index)} Loading Firebase... Please wait.", LOADING),
    ]


def _error_body(session: Session) -> list[Styled]:
    return [
        (session.title, BOLD),
        ("", ""),
        (f"Error: {session.error}", FAILURE),
        ("", ""),
        ("Press 'q' to quit.", ""),
    ]


def _home_body(session: Session) -> list[Styled]:
    lines: list[Styled] = [(f"Welcome to {session.title}!", BOLD), ("", "")]
    services = session.services
    if services is None:
        lines.append(("Firebase initialization failed.", FAILURE))
        lines.append(("", ""))
        lines.append(("Please check your configuration and restart the application.", ""))
        return lines

    lines.append(("Firebase is initialized and ready to use.", ""))
    lines.append(("", ""))
    if services.auth is not None:
        lines.append(("✓ Auth service ready", SUCCESS))
    else:
        lines.append(("✗ Auth service not available", FAILURE))
    if services.store is not None:
        lines.append(("✓ Firestore service ready", SUCCESS))
    else:
        lines.append(("✗ Firestore service not available", FAILURE))
    lines.append(("", ""))
    lines.append(("Use the tabs above to navigate.", ""))
    return lines


def _table_body(
    session: Session,
    columns,
    rows: tuple[tuple[str, ...], ...],
    cursor: int,
    width: int,
    noun: str,
) -> list[Styled]:
    # Box padding plus one separator between cells
    available = width - 4 - (len(columns) - 1)
    widths = fit_columns([c.width for c in columns], available)
    lines: list[Styled] = [
        (format_row([c.title for c in columns], widths), BOLD),
        (format_row([BOX_H * w for w in widths], widths), MUTED),
    ]
    start, end = visible_window(len(rows), cursor, session.table_height)
    for index in range(start, end):
        style = SELECTED if index == cursor else ""
        lines.append((format_row(rows[index], widths), style))
    lines.append(("", ""))
    lines.append((f"Total {noun}: {len(rows)}", MUTED))
    return lines


def _users_body(session: Session, width: int) -> list[Styled]:
    panel = session.users
    if panel.loading:
        return [(f"{spinner.frame(session.spinner_index)} Loading users...", LOADING)]
    if panel.error:
        return [(f"Error loading users: {panel.error}", FAILURE)]
    if not panel.rows:
        return [
            ("No users found in Firebase Authentication.", ""),
            ("", ""),
            ("To add users, use the Firebase Console or Authentication SDK.", ""),
        ]
    return _table_body(session, panel.columns, panel.rows, panel.cursor, width, "users")


def _routines_body(session: Session, width: int) -> list[Styled]:
    panel = session.routines
    if panel.loading:
        return [(f"{spinner.frame(session.spinner_index)} Loading routines...", LOADING)]
    if panel.error:
        return [(f"Error loading routines: {panel.error}", FAILURE)]
    if not panel.rows:
        return [("No routines found in Firestore.", "")]
    return _table_body(session, panel.columns, panel.rows, panel.cursor, width, "routines")


def _detail_status(session: Session, noun: str) -> list[Styled] | None:
    """Spinner or error lines while the detail record is unavailable."""
    detail = session.detail
    if detail.loading:
        return [(f"{spinner.frame(session.spinner_index)} Loading {noun} {detail.key}...", LOADING)]
    if detail.error:
        return [
            (detail.key, BOLD),
            ("", ""),
            (f"Error loading {noun}: {detail.error}", FAILURE),
        ]
    return None


def _user_detail_body(session: Session, width: int) -> list[Styled]:
    status = _detail_status(session, "user")
    if status is not None:
        return status

    user = session.detail.user
    return [
        (user.uid, BOLD),
        ("", ""),
        (f"Email:          {user.email or '-'}", ""),
        (f"Display name:   {user.display_name or '-'}", ""),
        (f"Disabled:       {format_value(user.disabled)}", ""),
        (f"Created:        {format_timestamp(user.created_at)}", ""),
        (f"Last sign in:   {format_timestamp(user.last_login_at)}", ""),
        (f"Last activity:  {format_timestamp(user.last_activity_at)}", ""),
    ]


def _routine_detail_body(session: Session, width: int) -> list[Styled]:
    status = _detail_status(session, "routine")
    if status is not None:
        return status

    routine = session.detail.routine
    lines: list[Styled] = [(routine.id, BOLD), ("", "")]
    if not routine.data:
        lines.append(("This routine has no fields.", MUTED))
    for name in sorted(routine.data):
        lines.append((f"{name}: {format_value(routine.data[name])}", ""))
    return lines


VIEW_BODIES: dict[View, Callable[[Session, int], list[Styled]]] = {
    View.LOADING: lambda s, w: _loading_body(s),
    View.ERROR: lambda s, w: _error_body(s),
    View.HOME: lambda s, w: _home_body(s),
    View.USERS: _users_body,
    View.ROUTINES: _routines_body,
    View.USER_DETAIL: _user_detail_body,
    View.ROUTINE_DETAIL: _routine_detail_body,
}


def footer_text(session: Session) -> str:
    view = session.view
    if view in (View.USER_DETAIL, View.ROUTINE_DETAIL):
        return BACK_HINT
    if view == View.USERS and not session.users.loading and not session.users.error and session.users.rows:
        return QUIT_HINT + ", up/down to select, enter to open a user"
    if view == View.ROUTINES and not session.routines.loading and not session.routines.error and session.routines.rows:
        return QUIT_HINT + ", up/down to select, enter to open a routine"
    return QUIT_HINT


def render_plain(session: Session) -> str:
    """Minimal frame used before the terminal size is known."""
    return f"{session.title}\n\n{session.message}\n\nPress 'q' or Ctrl+C to quit."


def frame_lines(session: Session) -> list[Line]:
    """Build the styled lines of the frame for the current view."""
    if session.width == 0 or session.height == 0:
        return [[(text, "")] for text in render_plain(session).split("\n")]

    width = max(session.width - 4, MIN_FRAME_WIDTH)
    content_rows = max(session.height - CONTENT_MARGIN, 1)

    lines = render_tabs(session, width)

    body = VIEW_BODIES[session.view](session, width)
    body = body[:content_rows]
    body += [("", "")] * (content_rows - len(body))

    lines.append([(box_line(ROUND_TL, BOX_H, ROUND_TR, width), "")])
    for text, style in body:
        lines.append(box_text(text, width, style=style))
    lines.append([(box_line(ROUND_BL, BOX_H, ROUND_BR, width), "")])

    footer = footer_text(session)
    if len(footer) > width - 2:
        footer = footer[: width - 3] + "…"
    lines.append([("  ", ""), (footer, MUTED)])
    return lines


def render(session: Session) -> str:
    """Render the frame as plain text."""
    return "\n".join(plain(line) for line in frame_lines(session))


def render_text(session: Session, use_color: bool = True) -> Text:
    """Render the frame as a rich Text, styled unless ``use_color`` is off."""
    text = Text()
    for index, line in enumerate(frame_lines(session)):
        if index:
            text.append("\n")
        for segment, style in line:
            text.append(segment, style=style if use_color and style else None)
    return text
