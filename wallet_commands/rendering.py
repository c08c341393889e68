"""
Text rendering for shell output.

The dispatcher and lister never emit escape codes themselves. They ask
a renderer to mark a piece of text with a role (success, warning,
information, suggestion) and write whatever comes back. Tests,
``--no-colour`` runs and piped output use PlainRenderer; an interactive
terminal gets RichRenderer.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from rich.color import ColorSystem
from rich.style import Style


class PlainRenderer:
    """Renders every role as the bare text."""

    def _pad(self, text: str, padding: int) -> str:
        return text.ljust(padding) if padding else text

    def success(self, text: str, padding: int = 0) -> str:
        return self._pad(text, padding)

    def warning(self, text: str, padding: int = 0) -> str:
        return self._pad(text, padding)

    def information(self, text: str, padding: int = 0) -> str:
        return self._pad(text, padding)

    def suggestion(self, text: str, padding: int = 0) -> str:
        return self._pad(text, padding)


class RichRenderer(PlainRenderer):
    """Renders roles as ANSI-styled text using rich styles.

    Padding is applied before styling so escape codes do not
    count towards the column width.
    """

    STYLES = {
        "success": Style(color="green", bold=True),
        "warning": Style(color="yellow", bold=True),
        "information": Style(color="bright_blue"),
        "suggestion": Style(color="magenta"),
    }

    def __init__(self, color_system: ColorSystem = ColorSystem.STANDARD):
        self.color_system = color_system

    def _style(self, role: str, text: str, padding: int) -> str:
        return self.STYLES[role].render(
            self._pad(text, padding),
            color_system=self.color_system,
        )

    def success(self, text: str, padding: int = 0) -> str:
        return self._style("success", text, padding)

    def warning(self, text: str, padding: int = 0) -> str:
        return self._style("warning", text, padding)

    def information(self, text: str, padding: int = 0) -> str:
        return self._style("information", text, padding)

    def suggestion(self, text: str, padding: int = 0) -> str:
        return self._style("suggestion", text, padding)


def create_renderer(colour: bool, stream: Optional[TextIO] = None):
    """Pick a renderer for the console configuration.

    Colour is only used when the output stream is a terminal, so piped
    or redirected output stays free of escape codes.
    """
    stream = stream or sys.stdout
    isatty = getattr(stream, "isatty", None)
    if colour and isatty is not None and isatty():
        return RichRenderer()
    return PlainRenderer()
