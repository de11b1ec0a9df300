"""Adjust actual data towards an expected pattern before comparing them.

The expected side may use wildcards:

- ``...`` on a line of its own matches any number of complete lines;
- ``[..]`` inside a line matches any run of characters;
- ``"{...}"`` as a JSON value matches any value;
- ``"...": "{...}"`` in a JSON object matches any other keys.

Where ``actual`` fits the pattern, the matching parts are replaced by the
pattern's text, so a plain equality check afterwards tells whether the two
agree and a diff shows only the real differences.
"""

from __future__ import annotations

import json
import re
from typing import Any

from .filters import redact_data
from .redactions import Redactions

KEY_WILDCARD = "..."
VALUE_WILDCARD = "{...}"

_LINE = re.compile(r"[^\n]*\n|[^\n]+")


def _lines(text: str) -> list[str]:
    """Split ``text`` into lines, each keeping its ``\\n`` terminator."""
    return _LINE.findall(text)


def is_line_elide(line: str) -> bool:
    """Whether ``line`` is the ``...`` line wildcard."""
    return line in ("...\n", "...")


def line_matches(actual: str, expected: str, redactions: Redactions) -> bool:
    """Whether the line ``actual`` fits ``expected``, honouring ``[..]``."""
    if actual == expected:
        return True

    sections = redactions.clear_unused(expected).split("[..]")
    for position, section in enumerate(sections):
        if not actual.startswith(section):
            return False
        remainder = actual[len(section):]
        if position + 1 == len(sections):
            return remainder == ""
        next_section = sections[position + 1]
        if not next_section:
            actual = ""
        else:
            restart = remainder.find(next_section)
            if restart >= 0:
                actual = remainder[restart:]
    return False


def _is_value_wildcard(value: Any) -> bool:
    return isinstance(value, str) and value == VALUE_WILDCARD


def _json_eq(left: Any, right: Any) -> bool:
    """JSON equality that keeps booleans, integers and floats apart."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, dict):
        return (
            isinstance(right, dict)
            and left.keys() == right.keys()
            and all(_json_eq(item, right[key]) for key, item in left.items())
        )
    if isinstance(left, list):
        return (
            isinstance(right, list)
            and len(left) == len(right)
            and all(_json_eq(a, b) for a, b in zip(left, right))
        )
    if type(left) is not type(right):
        return False
    return left == right


def _is_text(data: Any) -> bool:
    return isinstance(data, str)


def _is_binary(data: Any) -> bool:
    return isinstance(data, (bytes, bytearray))


def _render(data: Any) -> str | None:
    if _is_text(data):
        return data
    if _is_binary(data):
        return None
    return json.dumps(data, indent=2, ensure_ascii=False)


# --- ordered, with redactions -------------------------------------------------


def _normalize_str_to_redactions(
    actual: str, expected: str, redactions: Redactions
) -> str:
    if actual == expected:
        return actual

    normalized: list[str] = []
    actual_lines = _lines(actual)
    expected_lines = _lines(expected)
    actual_index = 0
    for position, expected_line in enumerate(expected_lines):
        if is_line_elide(expected_line):
            if position + 1 == len(expected_lines):
                # The elide consumes everything that is left.
                normalized.append(expected_line)
                actual_index = len(actual_lines)
                break
            next_expected = expected_lines[position + 1]
            offset = next(
                (
                    offset
                    for offset, line in enumerate(actual_lines[actual_index:])
                    if line_matches(line, next_expected, redactions)
                ),
                None,
            )
            if offset is None:
                # The end of the elided run cannot be found.
                break
            normalized.append(expected_line)
            actual_index += offset
        else:
            if actual_index >= len(actual_lines):
                break
            actual_line = actual_lines[actual_index]
            actual_index += 1
            if line_matches(actual_line, expected_line, redactions):
                normalized.append(expected_line)
            else:
                normalized.append(actual_line)

    normalized.extend(actual_lines[actual_index:])
    return "".join(normalized)


def _normalize_array_to_redactions(
    actual: list[Any], expected: list[Any], redactions: Redactions
) -> list[Any]:
    if _json_eq(actual, expected):
        return list(actual)

    normalized: list[Any] = []
    actual_index = 0
    for position, expected_elem in enumerate(expected):
        if _is_value_wildcard(expected_elem):
            if position + 1 == len(expected):
                normalized.append(expected_elem)
                actual_index = len(actual)
                break
            next_expected = expected[position + 1]
            offset = next(
                (
                    offset
                    for offset, elem in enumerate(actual[actual_index:])
                    if _json_eq(
                        _normalize_value_to_redactions(elem, next_expected, redactions),
                        next_expected,
                    )
                ),
                None,
            )
            if offset is None:
                break
            normalized.append(expected_elem)
            actual_index += offset
        else:
            if actual_index >= len(actual):
                break
            normalized.append(
                _normalize_value_to_redactions(
                    actual[actual_index], expected_elem, redactions
                )
            )
            actual_index += 1

    normalized.extend(actual[actual_index:])
    return normalized


def _normalize_object(
    actual: dict[Any, Any], expected: dict[Any, Any], normalize_value
) -> dict[Any, Any]:
    has_key_wildcard = _is_value_wildcard(expected.get(KEY_WILDCARD))
    result: dict[Any, Any] = {}
    for key, value in actual.items():
        if key in expected:
            value = normalize_value(value, expected[key])
        elif has_key_wildcard:
            continue
        result[key] = value
    if has_key_wildcard:
        result[KEY_WILDCARD] = VALUE_WILDCARD
    return result


def _normalize_value_to_redactions(
    actual: Any, expected: Any, redactions: Redactions
) -> Any:
    if _is_value_wildcard(expected):
        return VALUE_WILDCARD
    if isinstance(actual, str) and isinstance(expected, str):
        return _normalize_str_to_redactions(actual, expected, redactions)
    if isinstance(actual, list) and isinstance(expected, list):
        return _normalize_array_to_redactions(actual, expected, redactions)
    if isinstance(actual, dict) and isinstance(expected, dict):
        return _normalize_object(
            actual,
            expected,
            lambda a, e: _normalize_value_to_redactions(a, e, redactions),
        )
    return actual


# --- unordered, with redactions -----------------------------------------------


def _normalize_str_to_unordered_redactions(
    actual: str, expected: str, redactions: Redactions
) -> str:
    if actual == expected:
        return actual

    normalized: list[str] = []
    remaining = _lines(actual)
    elided = False
    for expected_line in _lines(expected):
        if is_line_elide(expected_line):
            elided = True
            normalized.append(expected_line)
            continue
        for index, actual_line in enumerate(remaining):
            if line_matches(actual_line, expected_line, redactions):
                del remaining[index]
                normalized.append(expected_line)
                break
    if not elided:
        normalized.extend(remaining)
    return "".join(normalized)


def _normalize_array_to_unordered_redactions(
    actual: list[Any], expected: list[Any], redactions: Redactions
) -> list[Any]:
    if _json_eq(actual, expected):
        return list(actual)

    normalized: list[Any] = []
    remaining = list(actual)
    elided = False
    for expected_value in expected:
        if _is_value_wildcard(expected_value):
            elided = True
            normalized.append(expected_value)
            continue
        for index, actual_value in enumerate(remaining):
            candidate = _normalize_value_to_unordered_redactions(
                actual_value, expected_value, redactions
            )
            if _json_eq(candidate, expected_value):
                del remaining[index]
                normalized.append(expected_value)
                break
    if not elided:
        normalized.extend(remaining)
    return normalized


def _normalize_value_to_unordered_redactions(
    actual: Any, expected: Any, redactions: Redactions
) -> Any:
    if _is_value_wildcard(expected):
        return VALUE_WILDCARD
    if isinstance(actual, str) and isinstance(expected, str):
        return _normalize_str_to_unordered_redactions(actual, expected, redactions)
    if isinstance(actual, list) and isinstance(expected, list):
        return _normalize_array_to_unordered_redactions(actual, expected, redactions)
    if isinstance(actual, dict) and isinstance(expected, dict):
        return _normalize_object(
            actual,
            expected,
            lambda a, e: _normalize_value_to_unordered_redactions(a, e, redactions),
        )
    return actual


# --- unordered, literal ---------------------------------------------------------


def _normalize_str_to_unordered(actual: str, expected: str) -> str:
    if actual == expected:
        return actual

    normalized: list[str] = []
    remaining = _lines(actual)
    for expected_line in _lines(expected):
        if expected_line in remaining:
            remaining.remove(expected_line)
            normalized.append(expected_line)
    normalized.extend(remaining)
    return "".join(normalized)


def _normalize_value_to_unordered(actual: Any, expected: Any) -> Any:
    if isinstance(actual, str) and isinstance(expected, str):
        return _normalize_str_to_unordered(actual, expected)
    if isinstance(actual, list) and isinstance(expected, list):
        normalized: list[Any] = []
        remaining = list(actual)
        for expected_value in expected:
            for index, actual_value in enumerate(remaining):
                if _json_eq(actual_value, expected_value):
                    del remaining[index]
                    normalized.append(expected_value)
                    break
        normalized.extend(remaining)
        return normalized
    if isinstance(actual, dict) and isinstance(expected, dict):
        return {
            key: _normalize_value_to_unordered(value, expected[key])
            if key in expected
            else value
            for key, value in actual.items()
        }
    return actual


# --- data dispatch --------------------------------------------------------------


def _normalize_data(actual: Any, expected: Any, text_op, value_op) -> Any:
    if _is_binary(actual):
        return actual
    if _is_text(actual):
        pattern = _render(expected)
        return actual if pattern is None else text_op(actual, pattern)
    if _is_text(expected) or _is_binary(expected):
        return actual
    return value_op(actual, expected)


class NormalizeToExpected:
    """Adjust ``actual`` data according to an ``expected`` pattern.

    Builder methods return a new, adjusted normalizer.
    """

    __slots__ = ("_redactions", "_unordered")

    def __init__(
        self, redactions: Redactions | None = None, unordered: bool = False
    ) -> None:
        self._redactions = redactions
        self._unordered = unordered

    def unordered(self) -> NormalizeToExpected:
        """Reorder ``actual`` to follow ``expected`` where their items agree."""
        return NormalizeToExpected(self._redactions, True)

    def redact(self) -> NormalizeToExpected:
        """Apply the built-in wildcards taken from ``expected``."""
        return NormalizeToExpected(Redactions(), self._unordered)

    def redact_with(self, redactions: Redactions) -> NormalizeToExpected:
        """Apply the built-in wildcards and the given user ``redactions``."""
        return NormalizeToExpected(redactions, self._unordered)

    def normalize(self, actual: Any, expected: Any) -> Any:
        """Return ``actual`` adjusted towards ``expected``."""
        redactions = self._redactions
        if redactions is not None:
            actual = redact_data(actual, redactions)

        if redactions is None and not self._unordered:
            return actual
        if redactions is None:
            return _normalize_data(
                actual,
                expected,
                _normalize_str_to_unordered,
                _normalize_value_to_unordered,
            )
        if not self._unordered:
            return _normalize_data(
                actual,
                expected,
                lambda a, e: _normalize_str_to_redactions(a, e, redactions),
                lambda a, e: _normalize_value_to_redactions(a, e, redactions),
            )
        return _normalize_data(
            actual,
            expected,
            lambda a, e: _normalize_str_to_unordered_redactions(a, e, redactions),
            lambda a, e: _normalize_value_to_unordered_redactions(a, e, redactions),
        )

    def __repr__(self) -> str:
        return (
            f"NormalizeToExpected(redactions={self._redactions!r}, "
            f"unordered={self._unordered!r})"
        )