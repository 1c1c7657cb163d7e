"""
Arrogance Admin TUI application.

Main entry point for the terminal user interface.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
import threading
from functools import partial
from pathlib import Path

# Ensure scripts directory is in path when run as a file
SCRIPT_DIR = Path(__file__).resolve().parent.parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from textual import events  # noqa: E402
from textual.app import App, ComposeResult  # noqa: E402
from textual.binding import Binding  # noqa: E402
from textual.message import Message  # noqa: E402

from arrogance.commands import execute  # noqa: E402
from arrogance.config import DEFAULT_LOG_FILE, LOG_FILE_ENV, TICK_INTERVAL  # noqa: E402
from arrogance.config import TITLE as APP_TITLE  # noqa: E402
from arrogance.gateway import FirebaseGateway, close_quietly  # noqa: E402
from arrogance.messages import Command, KeyPressed, Quit, Resized, ScheduleTick, Tick  # noqa: E402
from arrogance.providers import Gateway  # noqa: E402
from arrogance.render import render_text  # noqa: E402
from arrogance.state import Session, new_session, start, transition  # noqa: E402
from arrogance.views.frame import FrameView  # noqa: E402

logger = logging.getLogger(__name__)


class Completion(Message):
    """Carries a worker's completion message back onto the app queue."""

    def __init__(self, result: object) -> None:
        super().__init__()
        self.result = result


class ArroganceApp(App):
    """Firebase users and routines dashboard."""

    TITLE = APP_TITLE

    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("q", "feed('q')", "Quit", priority=True),
        Binding("ctrl+c", "feed('ctrl+c')", "Quit", show=False, priority=True),
        Binding("tab", "feed('tab')", "Next tab", priority=True),
        Binding("shift+tab", "feed('shift+tab')", "Previous tab", show=False, priority=True),
        Binding("right,l", "feed('right')", "Next tab", show=False, priority=True),
        Binding("left,h", "feed('left')", "Previous tab", show=False, priority=True),
        Binding("up,k", "feed('up')", "Up", show=False, priority=True),
        Binding("down,j", "feed('down')", "Down", show=False, priority=True),
        Binding("enter", "feed('enter')", "Open", priority=True),
        Binding("escape,backspace,delete", "feed('escape')", "Back", priority=True),
    ]

    def __init__(self, gateway: Gateway, use_color: bool = True, **kwargs) -> None:
        super().__init__(**kwargs)
        self._gateway = gateway
        self._use_color = use_color
        self._session: Session = new_session(gateway)
        self._frame: FrameView | None = None

    @property
    def session(self) -> Session:
        return self._session

    def compose(self) -> ComposeResult:
        self._frame = FrameView(id="frame")
        yield self._frame

    def on_mount(self) -> None:
        """Install signal handlers and start the gateway."""
        self._install_signal_handlers()
        self._session = new_session(self._gateway, self.size.width, self.size.height)
        session, commands = start(self._session)
        self._apply(session, commands)

    def on_resize(self, event: events.Resize) -> None:
        self.apply_message(Resized(event.size.width, event.size.height))

    def on_completion(self, message: Completion) -> None:
        self.apply_message(message.result)

    def action_feed(self, key: str) -> None:
        """Forward a bound key to the state machine."""
        self.apply_message(KeyPressed(key))

    def apply_message(self, message: object) -> None:
        """Run one message through the state machine."""
        session, commands = transition(self._session, message)
        self._apply(session, commands)

    def _apply(self, session: Session, commands: list[Command]) -> None:
        self._session = session
        if self._frame is not None:
            self._frame.show(render_text(session, self._use_color))
        for command in commands:
            self._run_command(command)

    def _run_command(self, command: Command) -> None:
        if isinstance(command, Quit):
            logger.info("Quit requested (exit code %d)", command.exit_code)
            self.exit(return_code=command.exit_code)
        elif isinstance(command, ScheduleTick):
            self.set_timer(TICK_INTERVAL, self._on_tick)
        else:
            logger.debug("Starting %s", type(command).__name__)
            self.run_worker(
                partial(self._complete, command),
                name=type(command).__name__,
                thread=True,
                exit_on_error=False,
            )

    def _complete(self, command: Command) -> None:
        """Worker body: run the command and post its single completion."""
        self.post_message(Completion(execute(command)))

    def _on_tick(self) -> None:
        self.apply_message(Tick())

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._on_signal)
            except (NotImplementedError, RuntimeError, ValueError):
                # Not supported on this platform or loop
                logger.debug("Signal handler for %s not installed", sig)

    def _on_signal(self) -> None:
        """Close the gateway in the background and quit like ctrl+c."""
        logger.info("Shutting down...")
        threading.Thread(target=close_quietly, args=(self._gateway,), daemon=True).start()
        self.apply_message(KeyPressed("ctrl+c"))


def configure_logging() -> None:
    """Send logs to a file; the terminal belongs to the TUI."""
    log_file = os.environ.get(LOG_FILE_ENV, DEFAULT_LOG_FILE)
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run(gateway: Gateway | None = None) -> int:
    """Run the TUI application and return the process exit code."""
    gateway = gateway if gateway is not None else FirebaseGateway()
    app = ArroganceApp(gateway)
    try:
        app.run()
    except Exception as e:
        logger.exception("Error running program")
        print(f"Error running program: {e}")
        return 1
    finally:
        close_quietly(gateway)
    return app.return_code or 0


def main() -> int:
    configure_logging()
    return run()


if __name__ == "__main__":
    sys.exit(main())
