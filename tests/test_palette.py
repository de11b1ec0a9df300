import re

import pytest

from snapshotkit.palette import AnsiColor, Effects, Palette, Style, Styled

_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")

ROLES = ["info", "warn", "error", "hint", "expected", "actual"]


@pytest.mark.parametrize("role", ROLES)
def test_plain_palette_leaves_text_alone(role):
    palette = Palette.plain()
    assert str(getattr(palette, role)("some text")) == "some text"


def test_color_error_is_red():
    assert str(Palette.color().error("oops")) == "\x1b[31moops\x1b[0m"


def test_color_hint_is_dimmed():
    assert Palette.color().hint_style.render() == "\x1b[2m"


@pytest.mark.parametrize("role", ROLES)
def test_color_wraps_in_style_and_reset(role):
    palette = Palette.color()
    styled = getattr(palette, role)("value")
    style = getattr(palette, f"{role}_style")
    text = str(styled)
    assert text.startswith(style.render())
    assert text.endswith(style.render_reset())
    assert _ESCAPE.sub("", text) == "value"


def test_plain_style_renders_nothing():
    style = Style()
    assert style.render() + style.render_reset() == ""
    assert style.is_plain


def test_format_spec_pads_inner_value():
    assert f"{Palette.plain().hint(7):>4}" == "   7"


def test_format_spec_padding_same_when_colored():
    plain = f"{Palette.plain().hint(12):>4}"
    colored = f"{Palette.color().hint(12):>4}"
    assert _ESCAPE.sub("", colored) == plain


def test_expected_style_combines_color_and_underline():
    rendered = Palette.color().expected_style.render()
    assert Style(fg=AnsiColor.RED).render() in rendered
    assert Style(effects=Effects.UNDERLINE).render() in rendered


def test_style_or_adds_effects():
    combined = Style(fg=AnsiColor.GREEN) | Effects.UNDERLINE
    assert combined == Style(fg=AnsiColor.GREEN, effects=Effects.UNDERLINE)


def test_styled_explicit_style():
    style = Style(fg=AnsiColor.BLUE)
    text = str(Styled("x", style))
    assert text == style.render() + "x" + style.render_reset()