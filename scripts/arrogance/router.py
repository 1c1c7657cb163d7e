"""Maps session flags and the active tab to a view identifier."""

from enum import Enum

from arrogance.config import ROUTINES_TAB, USERS_TAB


class View(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    HOME = "home"
    USERS = "users"
    ROUTINES = "routines"
    USER_DETAIL = "user_detail"
    ROUTINE_DETAIL = "routine_detail"


TAB_VIEWS = {
    USERS_TAB: View.USERS,
    ROUTINES_TAB: View.ROUTINES,
}

# Views shown when a row of the tab's table has been opened
DETAIL_VIEWS = {
    USERS_TAB: View.USER_DETAIL,
    ROUTINES_TAB: View.ROUTINE_DETAIL,
}


def route(loading: bool, has_error: bool, active_tab: int, detail_open: bool = False) -> View:
    """Select the view to render.

    Loading wins over error, error wins over the tab, and any tab without
    a dedicated view falls back to home. An open detail replaces the
    tab's table view.
    """
    if loading:
        return View.LOADING
    if has_error:
        return View.ERROR
    if detail_open and active_tab in DETAIL_VIEWS:
        return DETAIL_VIEWS[active_tab]
    return TAB_VIEWS.get(active_tab, View.HOME)
