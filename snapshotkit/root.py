"""Working directories for tests."""

from __future__ import annotations

import enum
import logging
import os
import shutil
import tempfile
from pathlib import Path

from .fixture import Fixture, write_fixture
from .fsops import DirError, canonicalize

_log = logging.getLogger(__name__)


class _Kind(enum.Enum):
    NONE = "none"
    IMMUTABLE = "immutable"
    MUTABLE_PATH = "mutable_path"
    MUTABLE_TEMP = "mutable_temp"


class DirRoot:
    """A directory a test runs in: none, a fixed one, or a writable sandbox.

    Usable as a context manager, which closes it on exit.
    """

    __slots__ = ("_kind", "_path", "_temp")

    def __init__(
        self,
        _kind: _Kind = _Kind.NONE,
        _path: Path | None = None,
        _temp: tempfile.TemporaryDirectory | None = None,
    ) -> None:
        self._kind = _kind
        self._path = _path
        self._temp = _temp

    @classmethod
    def none(cls) -> DirRoot:
        """No working directory."""
        return cls()

    @classmethod
    def immutable(cls, target: str | os.PathLike[str]) -> DirRoot:
        """Run in ``target`` without sandboxing it."""
        return cls(_Kind.IMMUTABLE, Path(target))

    @classmethod
    def mutable_temp(cls) -> DirRoot:
        """A fresh temporary directory, removed by :meth:`close`."""
        try:
            temp = tempfile.TemporaryDirectory()
        except OSError as e:
            raise DirError(str(e)) from e
        try:
            # Resolve links such as /private on macOS so redactions line up.
            path = canonicalize(temp.name)
        except OSError as e:
            temp.cleanup()
            raise DirError(f"Failed to canonicalize {temp.name}: {e}") from e
        return cls(_Kind.MUTABLE_TEMP, path, temp)

    @classmethod
    def mutable_at(cls, target: str | os.PathLike[str]) -> DirRoot:
        """Empty out ``target`` (creating it) and use it as a sandbox."""
        target = Path(target)
        shutil.rmtree(target, ignore_errors=True)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirError(f"Failed to create {target}: {e}") from e
        return cls(_Kind.MUTABLE_PATH, target)

    def with_template(self, template: Fixture) -> DirRoot:
        """Populate the sandbox from ``template`` and return ``self``."""
        if not self.is_mutable():
            raise DirError("Sandboxing is disabled")
        _log.debug("Initializing %s from %r", self._path, template)
        write_fixture(template, self._path)
        return self

    def is_mutable(self) -> bool:
        """Whether the directory is a sandbox the test may change."""
        return self._kind in (_Kind.MUTABLE_PATH, _Kind.MUTABLE_TEMP)

    def path(self) -> Path | None:
        """The working directory, if there is one."""
        return self._path

    def close(self) -> None:
        """Remove a temporary sandbox; raises ``OSError`` if that fails."""
        if self._kind is _Kind.MUTABLE_TEMP and self._temp is not None:
            self._temp.cleanup()

    def __enter__(self) -> DirRoot:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DirRoot({self._kind.value}, {self._path!r})"