"""Populate a directory from a template tree or a set of files."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Union

from .fsops import DirError, canonicalize, copy_template, normalize_path

Fixture = Union[
    str,
    "os.PathLike[str]",
    Mapping[Any, Any],
    Iterable[tuple[Any, Any]],
]


def write_fixture(fixture: Fixture, root: str | os.PathLike[str]) -> None:
    """Initialize the directory ``root`` from ``fixture``.

    A ``str`` or path-like fixture names a template directory that is copied.
    Otherwise the fixture maps relative paths to contents (``str`` or
    ``bytes``), given as a mapping or as ``(path, content)`` pairs; every
    file must land inside ``root``.
    """
    if isinstance(fixture, (str, os.PathLike)):
        copy_template(fixture, root)
        return

    pairs = fixture.items() if isinstance(fixture, Mapping) else fixture
    root = Path(root)
    try:
        root = canonicalize(root)
    except OSError as e:
        raise DirError(f"Failed to canonicalize {root}: {e}") from e

    for rel_path, content in pairs:
        path = normalize_path(root / rel_path)
        if not path.is_relative_to(root):
            raise DirError(
                f"Fixture {Path(rel_path)} is for outside of the target root"
            )
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        directory = path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirError(
                f"Failed to create fixture directory {directory}: {e}"
            ) from e
        try:
            path.write_bytes(data)
        except OSError as e:
            raise DirError(f"Failed to write fixture {path}: {e}") from e