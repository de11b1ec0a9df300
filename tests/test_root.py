import pytest

from snapshotkit.fsops import DirError, canonicalize
from snapshotkit.root import DirRoot


def test_default_is_none():
    root = DirRoot()
    assert root.path() is None
    assert root.is_mutable() is False
    assert DirRoot.none().path() is None


def test_immutable_keeps_path(tmp_path):
    root = DirRoot.immutable(tmp_path)
    assert root.path() == tmp_path
    assert root.is_mutable() is False


@pytest.mark.parametrize("factory", [DirRoot.none, lambda: DirRoot.immutable(".")])
def test_template_needs_sandbox(factory):
    with pytest.raises(DirError, match="Sandboxing is disabled"):
        factory().with_template([("a.txt", "a")])


def test_mutable_temp_lifecycle():
    root = DirRoot.mutable_temp()
    path = root.path()
    assert root.is_mutable() is True
    assert path.is_dir()
    assert path == canonicalize(path)
    root.close()
    assert not path.exists()


def test_mutable_temp_with_template():
    with DirRoot.mutable_temp().with_template([("sub/f.txt", "data")]) as root:
        path = root.path()
        assert (path / "sub" / "f.txt").read_text(encoding="utf-8") == "data"
    assert not path.exists()


def test_mutable_at_clears_existing(tmp_path):
    target = tmp_path / "work"
    target.mkdir()
    (target / "stale.txt").write_text("old", encoding="utf-8")
    root = DirRoot.mutable_at(target)
    assert root.is_mutable() is True
    assert root.path() == target
    assert list(target.iterdir()) == []


def test_mutable_at_close_keeps_directory(tmp_path):
    target = tmp_path / "work"
    root = DirRoot.mutable_at(target).with_template({"f.txt": b"bytes"})
    root.close()
    assert (target / "f.txt").read_bytes() == b"bytes"


def test_mutable_at_template_escape_rejected(tmp_path):
    root = DirRoot.mutable_at(tmp_path / "work")
    with pytest.raises(DirError, match="outside of the target root"):
        root.with_template([("../x.txt", "x")])