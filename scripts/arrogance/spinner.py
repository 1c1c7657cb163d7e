"""Spinner animation frames."""

FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")


def advance(index: int) -> int:
    """Next frame index, wrapping at the end."""
    return (index + 1) % len(FRAMES)


def frame(index: int) -> str:
    return FRAMES[index % len(FRAMES)]
