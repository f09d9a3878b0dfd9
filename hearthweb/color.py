"""ANSI colour and style formatting for terminal output."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class Color(Enum):
    """Foreground colours, valued by their ANSI code."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37
    DEFAULT = 39


class Background(Enum):
    """Background colours, valued by their ANSI code."""

    BLACK = 40
    RED = 41
    GREEN = 42
    YELLOW = 43
    BLUE = 44
    MAGENTA = 45
    CYAN = 46
    WHITE = 47
    DEFAULT = 49


class Style(Enum):
    """Text styles, valued by their ANSI code."""

    RESET = 0
    BOLD = 1
    DIM = 2
    ITALIC = 3
    UNDERLINE = 4
    BLINK = 5
    REVERSE = 7
    HIDDEN = 8


class ColorHandler(ABC):
    """Produces the control text that switches colours and styles."""

    @abstractmethod
    def apply_color(self, color: Color) -> str: ...

    @abstractmethod
    def apply_background(self, background: Background) -> str: ...

    @abstractmethod
    def apply_style(self, style: Style) -> str: ...

    @abstractmethod
    def supports_color(self) -> bool: ...


class NullColorHandler(ColorHandler):
    """Emits nothing; for environments without colour."""

    def apply_color(self, color: Color) -> str:
        return ""

    def apply_background(self, background: Background) -> str:
        return ""

    def apply_style(self, style: Style) -> str:
        return ""

    def supports_color(self) -> bool:
        return False


def _escape(code: int) -> str:
    return f"\033[{code}m"


class AnsiColorHandler(ColorHandler):
    """Emits ANSI escape sequences."""

    def apply_color(self, color: Color) -> str:
        return _escape(color.value)

    def apply_background(self, background: Background) -> str:
        return _escape(background.value)

    def apply_style(self, style: Style) -> str:
        return _escape(style.value)

    def supports_color(self) -> bool:
        term = os.environ.get("TERM")
        if term is None:
            return False
        return term not in ("dumb", "unknown")


class ColorOutput:
    """Holds the active colour handler and whether colouring is enabled."""

    def __init__(self, enabled: bool = True, handler: Optional[ColorHandler] = None) -> None:
        self.enabled = enabled
        self.handler: Optional[ColorHandler] = handler
        if handler is None:
            self.auto_detect_handler()

    def auto_detect_handler(self) -> None:
        """Pick the ANSI handler if the terminal supports colour, else the null one."""
        ansi = AnsiColorHandler()
        self.handler = ansi if ansi.supports_color() else NullColorHandler()


_INSTANCE = ColorOutput()


def get_color_output() -> ColorOutput:
    """Return the process-wide colour output settings."""
    return _INSTANCE


def colorize(
    text: str,
    color: Color,
    background: Optional[Background] = None,
    style: Optional[Style] = None,
) -> str:
    """Wrap ``text`` in colour codes followed by a reset, if colouring is enabled."""
    output = get_color_output()
    handler = output.handler
    if not output.enabled or handler is None:
        return text
    prefix = handler.apply_color(color)
    if background is not None:
        prefix += handler.apply_background(background)
        if style is not None:
            prefix += handler.apply_style(style)
    return prefix + text + handler.apply_style(Style.RESET)