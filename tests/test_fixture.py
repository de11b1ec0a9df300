from pathlib import Path

import pytest

from snapshotkit.fixture import write_fixture
from snapshotkit.fsops import DirError


def test_pairs_are_written(tmp_path):
    write_fixture(
        [("a.txt", "hello"), ("nested/dir/b.bin", b"\x00\x01")], tmp_path
    )
    assert (tmp_path / "a.txt").read_text(encoding="utf-8") == "hello"
    assert (tmp_path / "nested" / "dir" / "b.bin").read_bytes() == b"\x00\x01"


def test_mapping_is_written(tmp_path):
    write_fixture({Path("x") / "y.txt": "why", "z.txt": b"zed"}, tmp_path)
    assert (tmp_path / "x" / "y.txt").read_text(encoding="utf-8") == "why"
    assert (tmp_path / "z.txt").read_bytes() == b"zed"


def test_dot_components_stay_inside(tmp_path):
    write_fixture([("sub/../top.txt", "top")], tmp_path)
    assert (tmp_path / "top.txt").read_text(encoding="utf-8") == "top"
    assert not (tmp_path / "sub").exists()


def test_escaping_root_is_rejected(tmp_path):
    root = tmp_path / "root"
    root.mkdir()
    with pytest.raises(DirError, match="is for outside of the target root"):
        write_fixture([("../escape.txt", "no")], root)
    assert not (tmp_path / "escape.txt").exists()


def test_missing_root_is_rejected(tmp_path):
    with pytest.raises(DirError, match="Failed to canonicalize"):
        write_fixture([("a.txt", "a")], tmp_path / "missing")


def test_template_directory_is_copied(tmp_path):
    template = tmp_path / "template"
    (template / "inner").mkdir(parents=True)
    (template / "inner" / "f.txt").write_text("from template", encoding="utf-8")
    (template / ".keep").write_text("", encoding="utf-8")
    dest = tmp_path / "dest"
    write_fixture(str(template), dest)
    assert (dest / "inner" / "f.txt").read_text(encoding="utf-8") == "from template"
    assert not (dest / ".keep").exists()


def test_template_path_object_is_copied(tmp_path):
    template = tmp_path / "template"
    template.mkdir()
    (template / "g.txt").write_bytes(b"payload")
    dest = tmp_path / "dest"
    write_fixture(template, dest)
    assert (dest / "g.txt").read_bytes() == (template / "g.txt").read_bytes()