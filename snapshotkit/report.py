"""Render the difference between expected and actual data for people."""

from __future__ import annotations

import bisect
import difflib
import enum
import json
import re
from collections import Counter
from dataclasses import dataclass
from typing import Any

from .palette import Palette, Style, Styled

_MIN_ELIDE = 20
_CONTEXT = 5
_ELIDE_SIGN = "⋮"
_MISSING_NEWLINE = "∅"

_LINE = re.compile(r"[^\n]*\n|[^\n]+")
_WORD_SPLIT = re.compile(r"\s+|\S+")


def _render(data: Any) -> str | None:
    if isinstance(data, str):
        return data
    if isinstance(data, (bytes, bytearray)):
        return None
    return json.dumps(data, indent=2, ensure_ascii=False)


def _display(data: Any) -> str:
    rendered = _render(data)
    return rendered if rendered is not None else f"<{len(data)} bytes>"


def render_diff(
    expected: Any,
    actual: Any,
    expected_name: Any = None,
    actual_name: Any = None,
    palette: Palette | None = None,
) -> str:
    """Describe how ``actual`` differs from ``expected``.

    Text and structured data get a line diff; binary data is shown whole.
    """
    palette = palette or Palette.plain()
    expected_text = _render(expected)
    actual_text = _render(actual)
    if expected_text is not None and actual_text is not None:
        return render_text_diff(
            expected_text, actual_text, expected_name, actual_name, palette
        )

    out = []
    if expected_name is not None:
        out.append(f"{expected_name} {palette.error('(expected)')}:\n")
    else:
        out.append(f"{palette.error('Expected')}:\n")
    out.append(f"{palette.error(_display(expected))}\n")
    if actual_name is not None:
        out.append(f"{actual_name} {palette.info('(actual)')}:\n")
    else:
        out.append(f"{palette.info('Actual')}:\n")
    out.append(f"{palette.info(_display(actual))}\n")
    return "".join(out)


class _Tag(enum.Enum):
    EQUAL = "|"
    DELETE = "-"
    INSERT = "+"


@dataclass
class _Change:
    tag: _Tag
    old_index: int | None
    new_index: int | None
    values: list[tuple[bool, str]]

    @property
    def missing_newline(self) -> bool:
        return not self.values[-1][1].endswith("\n")


# --- line diff ----------------------------------------------------------------


def _emit(out: list, tag: str, i1: int, i2: int, j1: int, j2: int) -> None:
    if i1 == i2 and j1 == j2:
        return
    if out and out[-1][0] == tag and out[-1][2] == i1 and out[-1][4] == j1:
        previous = out.pop()
        out.append((tag, previous[1], i2, previous[3], j2))
    else:
        out.append((tag, i1, i2, j1, j2))


def _longest_increasing(pairs: list[tuple[int, int]]) -> list[tuple[int, int]]:
    tails: list[int] = []
    tail_positions: list[int] = []
    previous: list[int | None] = []
    for position, (_, j) in enumerate(pairs):
        slot = bisect.bisect_left(tails, j)
        if slot == len(tails):
            tails.append(j)
            tail_positions.append(position)
        else:
            tails[slot] = j
            tail_positions[slot] = position
        previous.append(tail_positions[slot - 1] if slot else None)
    result = []
    cursor = tail_positions[-1] if tail_positions else None
    while cursor is not None:
        result.append(pairs[cursor])
        cursor = previous[cursor]
    return result[::-1]


def _unique_anchors(a, b, a_lo, a_hi, b_lo, b_hi) -> list[tuple[int, int]]:
    a_counts = Counter(a[a_lo:a_hi])
    b_counts = Counter(b[b_lo:b_hi])
    b_positions = {
        line: j
        for j, line in enumerate(b[b_lo:b_hi], start=b_lo)
        if b_counts[line] == 1
    }
    pairs = [
        (i, b_positions[line])
        for i, line in enumerate(a[a_lo:a_hi], start=a_lo)
        if a_counts[line] == 1 and line in b_positions
    ]
    return _longest_increasing(pairs)


def _fallback(a, b, a_lo, a_hi, b_lo, b_hi, out) -> None:
    if a_lo == a_hi or b_lo == b_hi:
        _emit(out, "delete", a_lo, a_hi, b_lo, b_lo)
        _emit(out, "insert", a_hi, a_hi, b_lo, b_hi)
        return
    matcher = difflib.SequenceMatcher(None, a[a_lo:a_hi], b[b_lo:b_hi], autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        i1, i2, j1, j2 = i1 + a_lo, i2 + a_lo, j1 + b_lo, j2 + b_lo
        if tag == "equal":
            _emit(out, "equal", i1, i2, j1, j2)
        else:
            _emit(out, "delete", i1, i2, j1, j1)
            _emit(out, "insert", i2, i2, j1, j2)


def _patience(a, b, a_lo, a_hi, b_lo, b_hi, out) -> None:
    start_a, start_b = a_lo, b_lo
    while a_lo < a_hi and b_lo < b_hi and a[a_lo] == b[b_lo]:
        a_lo += 1
        b_lo += 1
    _emit(out, "equal", start_a, a_lo, start_b, b_lo)

    end_a, end_b = a_hi, b_hi
    while a_hi > a_lo and b_hi > b_lo and a[a_hi - 1] == b[b_hi - 1]:
        a_hi -= 1
        b_hi -= 1

    anchors = _unique_anchors(a, b, a_lo, a_hi, b_lo, b_hi)
    if anchors:
        prev_a, prev_b = a_lo, b_lo
        for i, j in anchors:
            _patience(a, b, prev_a, i, prev_b, j, out)
            _emit(out, "equal", i, i + 1, j, j + 1)
            prev_a, prev_b = i + 1, j + 1
        _patience(a, b, prev_a, a_hi, prev_b, b_hi, out)
    else:
        _fallback(a, b, a_lo, a_hi, b_lo, b_hi, out)

    _emit(out, "equal", a_hi, end_a, b_hi, end_b)


def _grouped_ops(old: list[str], new: list[str]) -> list[tuple[str, int, int, int, int]]:
    raw: list = []
    _patience(old, new, 0, len(old), 0, len(new), raw)
    grouped: list[tuple[str, int, int, int, int]] = []
    for tag, i1, i2, j1, j2 in raw:
        if tag != "equal" and grouped and grouped[-1][0] != "equal":
            _, pi1, pi2, pj1, pj2 = grouped.pop()
            grouped.append(("replace", min(pi1, i1), max(pi2, i2), min(pj1, j1), max(pj2, j2)))
        else:
            grouped.append((tag, i1, i2, j1, j2))
    return grouped


# --- inline emphasis ------------------------------------------------------------


def _merge_values(words: list[str], flags: list[bool]) -> list[tuple[bool, str]]:
    values: list[tuple[bool, str]] = []
    for word, flag in zip(words, flags):
        if values and values[-1][0] == flag:
            values[-1] = (flag, values[-1][1] + word)
        else:
            values.append((flag, word))
    return values


def _inline_values(
    old_lines: list[str], new_lines: list[str]
) -> tuple[list[list[tuple[bool, str]]], list[list[tuple[bool, str]]]]:
    old_words = [_WORD_SPLIT.findall(line) for line in old_lines]
    new_words = [_WORD_SPLIT.findall(line) for line in new_lines]
    flat_old = [word for words in old_words for word in words]
    flat_new = [word for words in new_words for word in words]
    matcher = difflib.SequenceMatcher(None, flat_old, flat_new, autojunk=False)
    emphasize = matcher.ratio() >= 0.5
    old_flags = [emphasize] * len(flat_old)
    new_flags = [emphasize] * len(flat_new)
    if emphasize:
        for block in matcher.get_matching_blocks():
            old_flags[block.a:block.a + block.size] = [False] * block.size
            new_flags[block.b:block.b + block.size] = [False] * block.size

    def per_line(word_lines, flags):
        result = []
        start = 0
        for words in word_lines:
            result.append(_merge_values(words, flags[start:start + len(words)]))
            start += len(words)
        return result

    return per_line(old_words, old_flags), per_line(new_words, new_flags)


def _changes(old: list[str], new: list[str]) -> list[_Change]:
    changes: list[_Change] = []
    for tag, i1, i2, j1, j2 in _grouped_ops(old, new):
        if tag == "equal":
            changes.extend(
                _Change(_Tag.EQUAL, i, j, [(False, old[i])])
                for i, j in zip(range(i1, i2), range(j1, j2))
            )
        elif tag == "delete":
            changes.extend(_Change(_Tag.DELETE, i, None, [(False, old[i])]) for i in range(i1, i2))
        elif tag == "insert":
            changes.extend(_Change(_Tag.INSERT, None, j, [(False, new[j])]) for j in range(j1, j2))
        else:
            old_values, new_values = _inline_values(old[i1:i2], new[j1:j2])
            changes.extend(
                _Change(_Tag.DELETE, i, None, values)
                for i, values in zip(range(i1, i2), old_values)
            )
            changes.extend(
                _Change(_Tag.INSERT, None, j, values)
                for j, values in zip(range(j1, j2), new_values)
            )
    return changes


def _tombstones(changes: list[_Change]) -> list[bool]:
    if len(changes) <= _MIN_ELIDE:
        return [False] * len(changes)
    tombstones = [True] * len(changes)
    for ordering in (
        list(enumerate(changes)),
        list(reversed(list(enumerate(changes)))),
    ):
        counter = _CONTEXT
        for position, change in ordering:
            if change.tag is _Tag.EQUAL:
                if counter:
                    tombstones[position] = False
                    counter -= 1
            else:
                counter = _CONTEXT
                tombstones[position] = False
    return tombstones


# --- output ---------------------------------------------------------------------


def _write_change(
    out: list[str],
    change: _Change,
    em_style: Style,
    style: Style,
    palette: Palette,
    expected_line_offset: int,
    actual_line_offset: int,
) -> None:
    if change.old_index is not None:
        out.append(f"{palette.hint(change.old_index + 1 + expected_line_offset):>4} ")
    else:
        out.append(f"{' ':>4} ")
    if change.new_index is not None:
        out.append(f"{palette.hint(change.new_index + 1 + actual_line_offset):>4} ")
    else:
        out.append(f"{' ':>4} ")
    out.append(f"{Styled(change.tag.value, style)} ")
    for emphasized, text in change.values:
        out.append(str(Styled(text, em_style if emphasized else style)))
    if change.missing_newline:
        out.append(f"{Styled(_MISSING_NEWLINE, em_style)}\n")


def render_text_diff(
    expected: str,
    actual: str,
    expected_name: Any = None,
    actual_name: Any = None,
    palette: Palette | None = None,
    expected_line_offset: int = 0,
    actual_line_offset: int = 0,
) -> str:
    """A numbered line diff of two texts, with long equal runs elided."""
    palette = palette or Palette.plain()
    out = ["\n"]
    if expected_name is not None:
        out.append(f"{palette.error(f'---- expected: {expected_name}')}\n")
    else:
        out.append(f"{palette.error('--- Expected')}\n")
    if actual_name is not None:
        out.append(f"{palette.info(f'++++ actual:   {actual_name}')}\n")
    else:
        out.append(f"{palette.info('+++ Actual')}\n")

    changes = _changes(_LINE.findall(expected), _LINE.findall(actual))
    styles = {
        _Tag.INSERT: (palette.actual_style, palette.info_style),
        _Tag.DELETE: (palette.expected_style, palette.error_style),
        _Tag.EQUAL: (palette.hint_style, palette.hint_style),
    }
    elided = False
    for change, tombstone in zip(changes, _tombstones(changes)):
        if tombstone:
            if not elided:
                out.append(f"{' ':>4} {' ':>4} {palette.hint(_ELIDE_SIGN)}\n")
            elided = True
            continue
        elided = False
        em_style, style = styles[change.tag]
        _write_change(
            out, change, em_style, style, palette, expected_line_offset, actual_line_offset
        )
    return "".join(out)