"""Compare a directory tree against a pattern tree, entry by entry."""

from __future__ import annotations

import enum
import json
import os
import shutil
import stat
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from .filters import filter_newlines, filter_paths
from .fsops import DirError, shallow_copy, walk
from .palette import Palette
from .pattern import NormalizeToExpected
from .redactions import Redactions
from .report import render_diff


class FileType(enum.Enum):
    """What kind of file-system entry a path is."""

    DIR = "dir"
    FILE = "file"
    SYMLINK = "symlink"
    UNKNOWN = "unknown"
    MISSING = "missing"

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> FileType:
        """Classify ``path`` without following a final symlink."""
        try:
            meta = os.lstat(path)
        except FileNotFoundError:
            return cls.MISSING
        except OSError:
            return cls.UNKNOWN
        if stat.S_ISDIR(meta.st_mode):
            return cls.DIR
        if stat.S_ISREG(meta.st_mode):
            return cls.FILE
        try:
            os.readlink(path)
        except OSError:
            return cls.UNKNOWN
        return cls.SYMLINK

    def __str__(self) -> str:
        return self.value

    def __format__(self, spec: str) -> str:
        return format(self.value, spec)


class PathDiff:
    """A difference found between a pattern tree and an actual tree."""

    def expected_path(self) -> Path | None:
        """The pattern-side path involved, if any."""
        return getattr(self, "expected", None)

    def render(self, palette: Palette | None = None) -> str:
        """Describe the difference for people."""
        raise NotImplementedError

    def overwrite(self) -> None:
        """Update the pattern tree so that it agrees with the actual tree."""
        raise NotImplementedError


@dataclass(frozen=True)
class Failure(PathDiff):
    """The comparison itself could not be carried out."""

    message: str

    def expected_path(self) -> Path | None:
        return None

    def render(self, palette: Palette | None = None) -> str:
        palette = palette or Palette.plain()
        return f"{palette.error(self.message)}\n"

    def overwrite(self) -> None:
        # A processing error is reported separately, not as an overwrite error.
        return None


@dataclass(frozen=True)
class TypeMismatch(PathDiff):
    """The two paths are different kinds of entry."""

    expected: Path
    actual: Path
    expected_type: FileType
    actual_type: FileType

    def render(self, palette: Palette | None = None) -> str:
        palette = palette or Palette.plain()
        return (
            f"{self.expected}: Expected {palette.info(self.expected_type)}, "
            f"was {palette.error(self.actual_type)}\n"
        )

    def overwrite(self) -> None:
        try:
            if self.actual_type is FileType.DIR:
                shutil.rmtree(self.expected)
            elif self.actual_type in (FileType.FILE, FileType.SYMLINK):
                os.remove(self.expected)
        except OSError as e:
            raise DirError(f"Failed to remove {self.expected}: {e}") from e
        shallow_copy(self.expected, self.actual)


@dataclass(frozen=True)
class LinkMismatch(PathDiff):
    """Both paths are symlinks, pointing at different targets."""

    expected: Path
    actual: Path
    expected_target: Path
    actual_target: Path

    def render(self, palette: Palette | None = None) -> str:
        palette = palette or Palette.plain()
        return (
            f"{self.expected}: Expected {palette.info(str(self.expected_target))}, "
            f"was {palette.error(str(self.actual_target))}\n"
        )

    def overwrite(self) -> None:
        shallow_copy(self.expected, self.actual)


@dataclass(frozen=True)
class ContentMismatch(PathDiff):
    """Both paths are files whose contents differ."""

    expected: Path
    actual: Path
    expected_content: Any
    actual_content: Any

    def render(self, palette: Palette | None = None) -> str:
        return render_diff(
            self.expected_content,
            self.actual_content,
            self.expected,
            self.actual,
            palette or Palette.plain(),
        )

    def overwrite(self) -> None:
        content = self.actual_content
        if isinstance(content, (bytes, bytearray)):
            data = bytes(content)
        elif isinstance(content, str):
            data = content.encode("utf-8")
        else:
            data = json.dumps(content, indent=2, ensure_ascii=False).encode("utf-8")
        try:
            self.expected.write_bytes(data)
        except OSError as e:
            raise DirError(f"Failed to write {self.expected}: {e}") from e


Entry = Union[tuple[Path, Path], PathDiff]


def _read(path: Path) -> str | bytes:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise DirError(f"Failed to read {path}: {e}") from e
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw


def _coerce(actual: str | bytes, expected: str | bytes) -> str | bytes:
    if isinstance(expected, bytes) and isinstance(actual, str):
        return actual.encode("utf-8")
    return actual


def _compare(
    pattern_root: Path,
    actual_root: Path,
    normalize_content,
) -> Iterator[Entry]:
    try:
        for expected in walk(pattern_root):
            actual = actual_root / expected.relative_to(pattern_root)
            yield _compare_entry(expected, actual, normalize_content)
    except OSError as e:
        yield Failure(str(e))


def _compare_entry(expected: Path, actual: Path, normalize_content) -> Entry:
    expected_type = FileType.from_path(expected)
    actual_type = FileType.from_path(actual)
    if expected_type is not actual_type:
        return TypeMismatch(expected, actual, expected_type, actual_type)

    if expected_type is FileType.SYMLINK:
        expected_target = Path(os.readlink(expected))
        actual_target = Path(os.readlink(actual))
        if expected_target != actual_target:
            return LinkMismatch(expected, actual, expected_target, actual_target)
    elif expected_type is FileType.FILE:
        try:
            actual_content = _read(actual)
            expected_content = filter_newlines(_read(expected))
        except DirError as e:
            return Failure(str(e))
        actual_content = normalize_content(
            _coerce(actual_content, expected_content), expected_content
        )
        if expected_content != actual_content:
            return ContentMismatch(expected, actual, expected_content, actual_content)

    return expected, actual


def subset_eq_iter(
    pattern_root: str | os.PathLike[str], actual_root: str | os.PathLike[str]
) -> Iterator[Entry]:
    """Compare every entry under ``pattern_root`` with its twin under ``actual_root``.

    Yields ``(expected_path, actual_path)`` for entries that agree and a
    :class:`PathDiff` for those that do not. File contents are compared
    literally after newline normalization.
    """
    return _compare(
        Path(pattern_root),
        Path(actual_root),
        lambda actual, expected: filter_newlines(actual),
    )


def _subset_matches(
    pattern_root: str | os.PathLike[str],
    actual_root: str | os.PathLike[str],
    redactions: Redactions,
    normalize_paths: bool,
) -> Iterator[Entry]:
    normalizer = NormalizeToExpected().redact_with(redactions)

    def normalize(actual: Any, expected: Any) -> Any:
        if normalize_paths:
            actual = filter_paths(actual)
        return normalizer.normalize(filter_newlines(actual), expected)

    return _compare(Path(pattern_root), Path(actual_root), normalize)


def subset_matches_iter(
    pattern_root: str | os.PathLike[str],
    actual_root: str | os.PathLike[str],
    redactions: Redactions,
) -> Iterator[Entry]:
    """Like :func:`subset_eq_iter`, but pattern files may hold wildcards and
    placeholders, and ``\\`` in actual content counts as ``/``."""
    return _subset_matches(pattern_root, actual_root, redactions, True)