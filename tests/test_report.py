import re

from snapshotkit.palette import Palette
from snapshotkit.report import render_diff, render_text_diff

_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def test_diff_eq():
    actual_diff = render_text_diff(
        "Hello\nWorld\n", "Hello\nWorld\n", "A", "B", Palette.plain(), 0, 0
    )
    expected_diff = """
---- expected: A
++++ actual:   B
   1    1 | Hello
   2    2 | World
"""
    assert actual_diff == expected_diff


def test_diff_ne_line_missing():
    actual_diff = render_text_diff(
        "Hello\nWorld\n", "Hello\n", "A", "B", Palette.plain(), 0, 0
    )
    expected_diff = """
---- expected: A
++++ actual:   B
   1    1 | Hello
   2      - World
"""
    assert actual_diff == expected_diff


def test_diff_eq_trailing_extra_newline():
    actual_diff = render_text_diff(
        "Hello\nWorld", "Hello\nWorld\n", "A", "B", Palette.plain(), 0, 0
    )
    expected_diff = """
---- expected: A
++++ actual:   B
   1    1 | Hello
   2      - World∅
        2 + World
"""
    assert actual_diff == expected_diff


def test_diff_eq_trailing_newline_missing():
    actual_diff = render_text_diff(
        "Hello\nWorld\n", "Hello\nWorld", "A", "B", Palette.plain(), 0, 0
    )
    expected_diff = """
---- expected: A
++++ actual:   B
   1    1 | Hello
   2      - World
        2 + World∅
"""
    assert actual_diff == expected_diff


def _numbers():
    return "".join(f"{i}\n" for i in range(20))


def _elided_inputs():
    expected = "Hello\n" + _numbers() + "World\n" + _numbers() + "!\n"
    actual = "Goodbye\n" + _numbers() + "Moon\n" + _numbers() + "?\n"
    return expected, actual


def test_diff_eq_elided():
    expected, actual = _elided_inputs()
    actual_diff = render_text_diff(expected, actual, "A", "B", Palette.plain(), 0, 0)
    expected_diff = """
---- expected: A
++++ actual:   B
   1      - Hello
        1 + Goodbye
   2    2 | 0
   3    3 | 1
   4    4 | 2
   5    5 | 3
   6    6 | 4
          ⋮
  17   17 | 15
  18   18 | 16
  19   19 | 17
  20   20 | 18
  21   21 | 19
  22      - World
       22 + Moon
  23   23 | 0
  24   24 | 1
  25   25 | 2
  26   26 | 3
  27   27 | 4
          ⋮
  38   38 | 15
  39   39 | 16
  40   40 | 17
  41   41 | 18
  42   42 | 19
  43      - !
       43 + ?
"""
    assert actual_diff == expected_diff


def test_colored_diff_matches_plain_without_escapes():
    expected, actual = _elided_inputs()
    plain = render_text_diff(expected, actual, "A", "B", Palette.plain())
    colored = render_text_diff(expected, actual, "A", "B", Palette.color())
    assert colored != plain
    assert _ESCAPE.sub("", colored) == plain


def test_line_offsets_shift_numbers():
    out = render_text_diff("Hello\n", "Hello\n", "A", "B", Palette.plain(), 10, 20)
    assert out.splitlines()[-1] == "  11   21 | Hello"


def test_unnamed_headers():
    out = render_text_diff("a\n", "a\n")
    assert out.splitlines()[1:3] == ["--- Expected", "+++ Actual"]


def test_render_diff_text_uses_line_diff():
    out = render_diff("Hello\nWorld\n", "Hello\n", "A", "B", Palette.plain())
    assert out == render_text_diff("Hello\nWorld\n", "Hello\n", "A", "B", Palette.plain())


def test_render_diff_json_renders_pretty():
    out = render_diff({"a": 1}, {"a": 2}, "A", "B", Palette.plain())
    lines = out.splitlines()
    assert '   2      -   "a": 1' in lines
    assert '        2 +   "a": 2' in lines
    assert "   1    1 | {" in lines


def test_render_diff_binary_falls_back_to_listing():
    out = render_diff(b"\x00\x01", "text", "A", "B", Palette.plain())
    lines = out.splitlines()
    assert lines[0] == "A (expected):"
    assert lines[2] == "B (actual):"
    assert lines[3] == "text"


def test_render_diff_binary_unnamed():
    out = render_diff("text", b"\x00", palette=Palette.plain())
    lines = out.splitlines()
    assert lines[0] == "Expected:"
    assert lines[1] == "text"
    assert lines[2] == "Actual:"