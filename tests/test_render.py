"""Unit tests for the render module."""

import sys
from dataclasses import replace
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from arrogance.errors import AuthError, InitError, StoreError  # noqa: E402
from arrogance.messages import (  # noqa: E402
    GatewayFailed,
    GatewayReady,
    KeyPressed,
    RoutineDetailFailed,
    RoutineDetailLoaded,
    RoutinesLoaded,
    UserDetailLoaded,
    UsersFailed,
    UsersLoaded,
)
from arrogance.providers import RoutineRecord, Services, UserRecord  # noqa: E402
from arrogance.render import (  # noqa: E402
    BACK_HINT,
    BOX_H,
    BOX_TL,
    BOX_TR,
    BOX_V,
    FAILURE,
    HIGHLIGHT,
    QUIT_HINT,
    box_line,
    box_text,
    frame_lines,
    plain,
    render,
    render_plain,
    render_text,
)
from arrogance.state import Session, new_session, transition  # noqa: E402


class FakeGateway:
    def initialize(self):
        raise AssertionError("not used")

    def close(self) -> None:
        pass


WIDTH = 120
HEIGHT = 40


@pytest.fixture
def booting() -> Session:
    return new_session(FakeGateway(), WIDTH, HEIGHT)


@pytest.fixture
def ready(booting: Session) -> Session:
    session, _ = transition(booting, GatewayReady(Services(auth=object(), store=object())))
    return session


@pytest.fixture
def users_tab(ready: Session) -> Session:
    session, _ = transition(ready, KeyPressed("tab"))
    return session


def sample_users() -> tuple[UserRecord, ...]:
    return (
        UserRecord(uid="uid-2", email="two@example.com", created_at=1_700_000_100_000),
        UserRecord(
            uid="uid-1",
            email="one@example.com",
            display_name="One",
            created_at=1_700_000_000_000,
            last_login_at=1_700_000_500_000,
        ),
    )


class TestBoxDrawing:
    """Tests for box drawing helper functions."""

    def test_box_line(self) -> None:
        result = box_line(BOX_TL, BOX_H, BOX_TR, 10)
        assert result.startswith(BOX_TL)
        assert result.endswith(BOX_TR)
        assert len(result) == 10

    def test_box_text_left_align(self) -> None:
        result = plain(box_text("test", 20, "left"))
        assert result.startswith(BOX_V)
        assert result.endswith(BOX_V)
        assert "test" in result

    def test_box_text_center_align(self) -> None:
        result = plain(box_text("test", 20, "center"))
        content = result[2:-2]  # Remove borders and padding
        assert content.strip() == "test"

    def test_box_text_truncates_long_text(self) -> None:
        result = plain(box_text("a" * 100, 20))
        assert "…" in result
        assert len(result) == 20

    def test_box_text_styles_only_content(self) -> None:
        left, content, right = box_text("x", 10, style=FAILURE)

        assert left == (f"{BOX_V} ", "")
        assert content == ("x".ljust(6), FAILURE)
        assert right == (f" {BOX_V}", "")


class TestRenderPlain:
    """Tests for the frame used before the terminal size is known."""

    def test_zero_size(self) -> None:
        session = new_session(FakeGateway())

        result = render(session)

        assert result == render_plain(session)
        lines = result.split("\n")
        assert "Arrogance Admin" in lines[0]
        assert "Initializing Firebase..." in lines[2]
        assert "Press 'q' or Ctrl+C to quit" in lines[4]


class TestRenderViews:
    """Tests for each view body."""

    def test_loading_view(self, booting: Session) -> None:
        result = render(booting)

        assert "Loading Firebase... Please wait." in result
        assert "⠋" in result

    def test_error_view(self, booting: Session) -> None:
        session, _ = transition(booting, GatewayFailed(InitError("no service account file found")))

        result = render(session)

        assert "Error: Failed to initialize Firebase: no service account file found" in result
        assert "Press 'q' to quit." in result

    def test_home_view(self, ready: Session) -> None:
        result = render(ready)

        assert "Welcome to Arrogance Admin!" in result
        assert "✓ Auth service ready" in result
        assert "✓ Firestore service ready" in result

    def test_home_view_without_store(self, ready: Session) -> None:
        session = replace(ready, services=Services(auth=object(), store=None))

        assert "✗ Firestore service not available" in render(session)

    def test_active_tab_is_marked(self, users_tab: Session) -> None:
        result = render(users_tab)

        assert "[ Users ]" in result
        assert "[ Home ]" not in result

    def test_users_loading(self, users_tab: Session) -> None:
        assert "Loading users..." in render(users_tab)

    def test_users_error(self, users_tab: Session) -> None:
        session, _ = transition(users_tab, UsersFailed(AuthError("permission denied")))

        result = render(session)

        assert "Error loading users: Failed to load users: permission denied" in result

    def test_users_empty_state(self, users_tab: Session) -> None:
        session, _ = transition(users_tab, UsersLoaded(()))

        result = render(session)

        assert "No users found in Firebase Authentication." in result
        assert "Error" not in result

    def test_users_table(self, users_tab: Session) -> None:
        session, _ = transition(users_tab, UsersLoaded(sample_users()))

        result = render(session)

        assert "UID" in result
        assert "Total users: 2" in result
        assert result.index("uid-1") < result.index("uid-2")
        assert "enter to open a user" in result

    def test_routines_table(self, ready: Session) -> None:
        session, _ = transition(ready, KeyPressed("shift+tab"))
        routines = (RoutineRecord("r1", {"name": "Push"}),)
        session, _ = transition(session, RoutinesLoaded(routines))

        result = render(session)

        assert "r1" in result
        assert "Push" in result
        assert "Total routines: 1" in result

    def test_routines_empty_state(self, ready: Session) -> None:
        session, _ = transition(ready, KeyPressed("shift+tab"))
        session, _ = transition(session, RoutinesLoaded(()))

        assert "No routines found in Firestore." in render(session)


class TestRenderDetail:
    """Tests for the user and routine detail views."""

    @pytest.fixture
    def user_detail(self, users_tab: Session) -> Session:
        session, _ = transition(users_tab, UsersLoaded(sample_users()))
        session, _ = transition(session, KeyPressed("enter"))
        return session

    def test_user_detail_loading(self, user_detail: Session) -> None:
        result = render(user_detail)

        assert "Loading user uid-1..." in result
        assert BACK_HINT in result

    def test_user_detail_fields(self, user_detail: Session) -> None:
        user = sample_users()[1]
        session, _ = transition(user_detail, UserDetailLoaded(user))

        result = render(session)

        assert "uid-1" in result
        assert "Email:          one@example.com" in result
        assert "Display name:   One" in result
        assert "Disabled:       no" in result
        assert "Total users" not in result

    def test_routine_detail_fields(self, ready: Session) -> None:
        session, _ = transition(ready, KeyPressed("shift+tab"))
        session, _ = transition(session, RoutinesLoaded((RoutineRecord("r1", {"name": "Push"}),)))
        session, _ = transition(session, KeyPressed("enter"))
        loaded = RoutineRecord("r1", {"name": "Push", "days": None})
        session, _ = transition(session, RoutineDetailLoaded(loaded))

        result = render(session)

        assert "days: -" in result
        assert "name: Push" in result
        assert result.index("days: -") < result.index("name: Push")

    def test_routine_detail_error(self, ready: Session) -> None:
        session, _ = transition(ready, KeyPressed("shift+tab"))
        session, _ = transition(session, RoutinesLoaded((RoutineRecord("r1", {}),)))
        session, _ = transition(session, KeyPressed("enter"))
        session, _ = transition(session, RoutineDetailFailed("r1", StoreError("document not found")))

        result = render(session)

        assert "Error loading routine: Failed to load routine: document not found" in result


class TestRenderLayout:
    """Tests for frame geometry and purity."""

    @pytest.mark.parametrize("width,height", [(120, 40), (80, 24), (60, 20)])
    def test_lines_fit_width(self, users_tab: Session, width: int, height: int) -> None:
        session, _ = transition(users_tab, UsersLoaded(sample_users()))
        session = replace(session, width=width, height=height)

        for line in render(session).split("\n"):
            assert len(line) <= width - 4

    def test_frame_height(self, ready: Session) -> None:
        lines = render(ready).split("\n")
        assert len(lines) == HEIGHT - 2

    def test_render_does_not_mutate(self, users_tab: Session) -> None:
        session, _ = transition(users_tab, UsersLoaded(sample_users()))
        before = replace(session)

        first = render(session)
        second = render(session)

        assert first == second
        assert session == before

    def test_footer_hint(self, ready: Session) -> None:
        assert QUIT_HINT in render(ready)


class TestRenderText:
    """Tests for the styled rich Text frame."""

    def test_plain_matches_render(self, ready: Session) -> None:
        assert render_text(ready).plain == render(ready)

    def test_styles_applied(self, ready: Session) -> None:
        text = render_text(ready)

        styles = {str(span.style) for span in text.spans}
        assert HIGHLIGHT in styles

    def test_color_optional(self, ready: Session) -> None:
        assert render_text(ready, use_color=False).spans == []

    def test_tab_bar_style_covers_labels_only(self, ready: Session) -> None:
        tab_line = frame_lines(ready)[1]

        assert tab_line[0][1] == ""
        assert tab_line[1][1] == HIGHLIGHT
        assert "[ Home ]" in tab_line[1][0]
