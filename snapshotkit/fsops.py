"""File-system helpers for preparing and inspecting test directories."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterator
from pathlib import Path, PurePath

_KEEP_FILE = ".keep"


class DirError(Exception):
    """A directory could not be prepared, copied or inspected."""


def walk(path: str | os.PathLike[str]) -> Iterator[Path]:
    """Yield ``path`` and everything below it, parents before children.

    Symlinks are reported but not followed, entries of a directory come in
    name order and files named ``.keep`` are left out. Raises ``OSError``
    when an entry cannot be read.
    """
    root = Path(path)
    os.lstat(root)
    yield from _walk_from(root)


def _walk_from(current: Path) -> Iterator[Path]:
    if current.name != _KEEP_FILE:
        yield current
    if not current.is_symlink() and current.is_dir():
        with os.scandir(current) as entries:
            children = sorted(entries, key=lambda entry: entry.name)
        for entry in children:
            yield from _walk_from(Path(entry.path))


def canonicalize(path: str | os.PathLike[str]) -> Path:
    """Return the absolute path with symlinks resolved; the path must exist."""
    return Path(path).resolve(strict=True)


def copy_template(
    source: str | os.PathLike[str], dest: str | os.PathLike[str]
) -> None:
    """Copy the tree at ``source`` into ``dest``, leaving out ``.keep`` files."""
    source = Path(source)
    dest = Path(dest)
    try:
        source = canonicalize(source)
    except OSError as e:
        raise DirError(f"Failed to canonicalize {source}: {e}") from e
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirError(f"Failed to create {dest}: {e}") from e
    try:
        dest = canonicalize(dest)
    except OSError as e:
        raise DirError(f"Failed to canonicalize {dest}: {e}") from e

    try:
        for current in walk(source):
            shallow_copy(current, dest / current.relative_to(source))
    except OSError as e:
        raise DirError(str(e)) from e


def shallow_copy(
    source: str | os.PathLike[str], dest: str | os.PathLike[str]
) -> None:
    """Copy one file-system entry without descending into it.

    Directories are created, files are copied with their modification time
    and symlinks are recreated pointing at the same target.
    """
    source = Path(source)
    dest = Path(dest)
    try:
        meta = os.lstat(source)
    except OSError as e:
        raise DirError(f"Failed to read metadata from {source}: {e}") from e

    if source.is_dir() and not source.is_symlink():
        try:
            dest.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirError(f"Failed to create {dest}: {e}") from e
    elif source.is_file() and not source.is_symlink():
        try:
            shutil.copy(source, dest)
        except OSError as e:
            raise DirError(f"Failed to copy {source} to {dest}: {e}") from e
        # Keep the original mtime so that a test checking for writes right
        # after the copy is not fooled by the copy itself.
        try:
            os.utime(dest, ns=(os.stat(dest).st_atime_ns, meta.st_mtime_ns))
        except OSError as e:
            raise DirError(
                f"Failed to copy {source} metadata to {dest}: {e}"
            ) from e
    else:
        try:
            target = os.readlink(source)
        except OSError:
            return
        try:
            os.symlink(target, dest)
        except OSError as e:
            raise DirError(f"Failed to create symlink {dest}: {e}") from e


def resolve_dir(path: str | os.PathLike[str]) -> Path:
    """Canonicalize a directory path.

    A regular file found in its place is read as the relative target of a
    symlink that was checked out as a plain file. Raises ``OSError``.
    """
    path = Path(path)
    meta_is_dir = path.is_dir() and not path.is_symlink()
    os.lstat(path)
    if meta_is_dir:
        return canonicalize(path)
    if path.is_file() and not path.is_symlink():
        target = path.read_text(encoding="utf-8")
        return resolve_dir(path.parent / target)
    return canonicalize(path)


def strip_trailing_slash(path: str | os.PathLike[str]) -> Path:
    """Return ``path`` without a trailing separator."""
    return Path(path)


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Remove ``.`` and ``..`` lexically, without touching the file system.

    Symlinks are not resolved, so the result can differ from what the file
    system would give.
    """
    pure = PurePath(path)
    anchor = pure.anchor
    parts: list[str] = []
    for part in pure.parts[1 if anchor else 0:]:
        if part == ".":
            continue
        if part == "..":
            if parts and parts[-1] == "..":
                parts.append("..")
            elif parts:
                parts.pop()
            elif not pure.root:
                parts.append("..")
            continue
        parts.append(part)
    return Path(anchor, *parts)


def display_relpath(path: str | os.PathLike[str]) -> str:
    """Show ``path`` relative to the working directory when it lies below it."""
    path = Path(path)
    try:
        cwd = Path.cwd()
    except OSError:
        return str(path)
    try:
        rel = path.relative_to(cwd)
    except ValueError:
        return str(path)
    return str(rel) if rel.parts else ""