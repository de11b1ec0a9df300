"""Terminal styles for reports."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any


class AnsiColor(enum.IntEnum):
    """The eight basic ANSI foreground colours, by their SGR code."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37


class Effects(enum.Flag):
    """Text effects a style can switch on."""

    BOLD = enum.auto()
    DIMMED = enum.auto()
    ITALIC = enum.auto()
    UNDERLINE = enum.auto()


_EFFECT_CODES = {
    Effects.BOLD: 1,
    Effects.DIMMED: 2,
    Effects.ITALIC: 3,
    Effects.UNDERLINE: 4,
}

_RESET = "\x1b[0m"


@dataclass(frozen=True)
class Style:
    """A foreground colour plus effects; the default style is plain."""

    fg: AnsiColor | None = None
    effects: Effects = field(default=Effects(0))

    @property
    def is_plain(self) -> bool:
        return self.fg is None and not self.effects

    def render(self) -> str:
        """The escape sequence that switches this style on."""
        codes = [code for effect, code in _EFFECT_CODES.items() if effect in self.effects]
        if self.fg is not None:
            codes.append(int(self.fg))
        return "".join(f"\x1b[{code}m" for code in codes)

    def render_reset(self) -> str:
        """The escape sequence that switches this style off again."""
        return "" if self.is_plain else _RESET

    def __or__(self, effects: Effects) -> Style:
        if not isinstance(effects, Effects):
            return NotImplemented
        return replace(self, effects=self.effects | effects)


class Styled:
    """A value shown in a style; format specs apply to the value itself."""

    __slots__ = ("display", "style")

    def __init__(self, display: Any, style: Style) -> None:
        self.display = display
        self.style = style

    def __format__(self, spec: str) -> str:
        return self.style.render() + format(self.display, spec) + self.style.render_reset()

    def __str__(self) -> str:
        return self.__format__("")

    def __repr__(self) -> str:
        return f"Styled({self.display!r}, {self.style!r})"


@dataclass(frozen=True)
class Palette:
    """The styles used for each role in a report."""

    info_style: Style = field(default_factory=Style)
    warn_style: Style = field(default_factory=Style)
    error_style: Style = field(default_factory=Style)
    hint_style: Style = field(default_factory=Style)
    expected_style: Style = field(default_factory=Style)
    actual_style: Style = field(default_factory=Style)

    @classmethod
    def color(cls) -> Palette:
        """A palette using ANSI colours."""
        return cls(
            info_style=Style(fg=AnsiColor.GREEN),
            warn_style=Style(fg=AnsiColor.YELLOW),
            error_style=Style(fg=AnsiColor.RED),
            hint_style=Style(effects=Effects.DIMMED),
            expected_style=Style(fg=AnsiColor.RED, effects=Effects.UNDERLINE),
            actual_style=Style(fg=AnsiColor.GREEN, effects=Effects.UNDERLINE),
        )

    @classmethod
    def plain(cls) -> Palette:
        """A palette that adds no escape sequences."""
        return cls()

    def info(self, item: Any) -> Styled:
        return Styled(item, self.info_style)

    def warn(self, item: Any) -> Styled:
        return Styled(item, self.warn_style)

    def error(self, item: Any) -> Styled:
        return Styled(item, self.error_style)

    def hint(self, item: Any) -> Styled:
        return Styled(item, self.hint_style)

    def expected(self, item: Any) -> Styled:
        return Styled(item, self.expected_style)

    def actual(self, item: Any) -> Styled:
        return Styled(item, self.actual_style)