"""Placeholders that stand in for run-dependent parts of test output."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from .filters import normalize_paths

EXE_SUFFIX = ".exe" if sys.platform == "win32" else ""


class InvalidPlaceholder(ValueError):
    """A placeholder is not of the form ``[NAME]`` with ``NAME`` in A-Z and ``_``."""


def validate_placeholder(placeholder: str) -> str:
    """Return ``placeholder`` unchanged, or raise :class:`InvalidPlaceholder`."""
    if not (placeholder.startswith("[") and placeholder.endswith("]")):
        raise InvalidPlaceholder(f"Key `{placeholder}` is not enclosed in []")
    if any(not ("A" <= c <= "Z") and c != "_" for c in placeholder[1:-1]):
        raise InvalidPlaceholder(f"Key `{placeholder}` can only be A-Z or `_`")
    return placeholder


class RedactedValue:
    """A value to hide behind a placeholder: a literal, a path or a regex.

    Paths match both in their native form and with ``\\`` turned into ``/``.
    A regex with a group named ``redacted`` replaces only that group.
    An empty literal or path marks the placeholder as unused.
    """

    __slots__ = ("_text", "_normalized", "_regex")

    def __init__(self, value: Any) -> None:
        self._text: str | None = None
        self._normalized: str | None = None
        self._regex: re.Pattern[str] | None = None
        if isinstance(value, RedactedValue):
            self._text = value._text
            self._normalized = value._normalized
            self._regex = value._regex
        elif isinstance(value, re.Pattern):
            if not isinstance(value.pattern, str):
                raise TypeError("regex redactions must use str patterns")
            self._regex = value
        elif isinstance(value, os.PathLike):
            native = os.fsdecode(value)
            if native:
                self._text = native
                self._normalized = normalize_paths(native)
        elif isinstance(value, str):
            if value:
                self._text = value
        else:
            raise TypeError(f"cannot redact a value of type {type(value).__name__}")

    @property
    def is_empty(self) -> bool:
        return self._text is None and self._regex is None

    def find_in(self, buffer: str) -> tuple[int, int] | None:
        """Return the ``(start, end)`` span of the first match in ``buffer``."""
        if self._regex is not None:
            match = self._regex.search(buffer)
            if match is None:
                return None
            if "redacted" in self._regex.groupindex:
                start, end = match.span("redacted")
                if start >= 0:
                    return start, end
            return match.span(0)
        if self._text is None:
            return None
        native = buffer.find(self._text)
        if self._normalized is None:
            return None if native < 0 else (native, native + len(self._text))
        normalized = buffer.find(self._normalized)
        candidates = []
        if native >= 0:
            candidates.append((native, native + len(self._text)))
        if normalized >= 0:
            candidates.append((normalized, normalized + len(self._normalized)))
        return min(candidates, key=lambda span: span[0]) if candidates else None

    def _sort_key(self) -> tuple[int, int, str]:
        if self._regex is not None:
            pattern = self._regex.pattern
            return (1, -len(pattern), pattern)
        shown = self._normalized if self._normalized is not None else self._text or ""
        return (0, -len(shown), shown)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RedactedValue):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __repr__(self) -> str:
        if self._regex is not None:
            return f"RedactedValue({self._regex!r})"
        return f"RedactedValue({self._text!r})"


def _replace_many(
    buffer: str, replacements: Iterable[tuple[RedactedValue, str]]
) -> str:
    for value, replacement in replacements:
        index = 0
        while index <= len(buffer):
            span = value.find_in(buffer[index:])
            if span is None:
                break
            start, end = index + span[0], index + span[1]
            buffer = buffer[:start] + replacement + buffer[end:]
            index = start + len(replacement)
            if start == end and not replacement:
                index += 1
    return buffer


class Redactions:
    """A set of placeholders and the values they replace.

    >>> r = Redactions()
    >>> r.insert("[LOCATION]", "World")
    >>> r.redact("Hello World!")
    'Hello [LOCATION]!'
    """

    def __init__(self) -> None:
        self._vars: dict[tuple[int, int, str], tuple[RedactedValue, set[str]]] = {}
        self._unused: set[str] = set()

    @classmethod
    def with_exe(cls) -> Redactions:
        """Redactions holding ``[EXE]`` for the platform's executable suffix."""
        redactions = cls()
        redactions.insert("[EXE]", EXE_SUFFIX)
        return redactions

    def insert(self, placeholder: str, value: Any) -> None:
        """Add ``value`` under ``placeholder``; an empty value marks it unused."""
        placeholder = validate_placeholder(placeholder)
        redacted = RedactedValue(value)
        if redacted.is_empty:
            self._unused.add(placeholder)
            return
        key = redacted._sort_key()
        entry = self._vars.setdefault(key, (redacted, set()))
        entry[1].add(placeholder)

    def extend(self, vars: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None:
        """Insert every ``(placeholder, value)`` pair."""
        pairs = vars.items() if isinstance(vars, Mapping) else vars
        for placeholder, value in pairs:
            self.insert(placeholder, value)

    def remove(self, placeholder: str) -> None:
        """Stop redacting any value under ``placeholder``."""
        placeholder = validate_placeholder(placeholder)
        for key in list(self._vars):
            placeholders = self._vars[key][1]
            placeholders.discard(placeholder)
            if not placeholders:
                del self._vars[key]

    def _replacements(self) -> Iterator[tuple[RedactedValue, str]]:
        for key in sorted(self._vars):
            value, placeholders = self._vars[key]
            for placeholder in sorted(placeholders):
                yield value, placeholder

    def redact(self, input: str) -> str:
        """Replace every known value in ``input`` with its placeholder."""
        return _replace_many(input, self._replacements())

    def clear_unused(self, pattern: str) -> str:
        """Drop placeholders that were given an empty value from ``pattern``."""
        if "[" not in pattern:
            return pattern
        for placeholder in sorted(self._unused, key=lambda p: (-len(p), p)):
            pattern = pattern.replace(placeholder, "")
        return pattern

    def _state(self) -> tuple[dict[tuple[int, int, str], frozenset[str]], frozenset[str]]:
        vars_ = {key: frozenset(entry[1]) for key, entry in self._vars.items()}
        return vars_, frozenset(self._unused)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Redactions):
            return NotImplemented
        return self._state() == other._state()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        shown = {repr(v): sorted(p) for v, p in self._vars.values()}
        return f"Redactions(vars={shown}, unused={sorted(self._unused)})"