"""Widget that displays rendered frames."""

from rich.text import Text
from textual.widgets import Static


class FrameView(Static):
    """Shows the latest frame produced by render_text()."""

    DEFAULT_CSS = """
    FrameView {
        width: 100%;
        height: 100%;
        padding: 1 2;
    }
    """

    def show(self, frame: Text) -> None:
        self.update(frame)
