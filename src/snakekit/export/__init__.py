"""Standalone artifacts that replay a GameConfig outside the live engine."""

from snakekit.export.browser import render_browser_artifact
from snakekit.export.desktop import render_desktop_artifact

__all__ = [
    "render_browser_artifact",
    "render_desktop_artifact",
]
