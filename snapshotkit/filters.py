"""Normalizations applied to snapshot data before comparison.

Data is text (``str``), binary (``bytes``/``bytearray``, left untouched) or a
structured JSON value (``dict``, ``list`` and scalars), whose strings and
object keys are normalized.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .redactions import Redactions

_LINE_ENDING = re.compile(r"\r\n?")


def normalize_lines(data: str) -> str:
    """Turn ``\\r\\n`` and lone ``\\r`` line endings into ``\\n``."""
    return _LINE_ENDING.sub("\n", data)


def normalize_paths(data: str) -> str:
    """Turn every ``\\`` into ``/``, whether or not it separates a path."""
    return data.replace("\\", "/")


def map_json_strings(value: Any, op: Callable[[str], str]) -> Any:
    """Return a copy of a JSON value with ``op`` applied to strings and keys."""
    if isinstance(value, str):
        return op(value)
    if isinstance(value, list):
        return [map_json_strings(item, op) for item in value]
    if isinstance(value, dict):
        result: dict[Any, Any] = {}
        for key, item in value.items():
            new_key = op(key) if isinstance(key, str) else key
            result[new_key] = map_json_strings(item, op)
        return result
    return value


def _apply(data: Any, op: Callable[[str], str]) -> Any:
    if isinstance(data, str):
        return op(data)
    if isinstance(data, (bytes, bytearray)):
        return data
    return map_json_strings(data, op)


def filter_newlines(data: Any) -> Any:
    """Normalize line endings in text or structured data."""
    return _apply(data, normalize_lines)


def filter_paths(data: Any) -> Any:
    """Normalize path separators in text or structured data."""
    return _apply(data, normalize_paths)


def redact_data(data: Any, redactions: Redactions) -> Any:
    """Replace redacted values with their placeholders in text or structured data."""
    return _apply(data, redactions.redact)