# tests/unit/test_local_fs_walk.py
import os
from pathlib import Path

from fshelpers.adapters.filesystem import local_fs
from fshelpers.adapters.filesystem.local_fs import LocalFS


def _touch(p: Path, data: bytes = b"x") -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)
    return p


def _recursive_preorder(d: Path):
    out = []
    with os.scandir(d) as it:
        for entry in it:
            if entry.name == "staging":
                continue
            if entry.is_file(follow_symlinks=False):
                out.append(Path(entry.path))
            elif entry.is_dir(follow_symlinks=False):
                out.extend(_recursive_preorder(Path(entry.path)))
    return out


def test_walk_skips_staging_at_every_depth(tmp_path):
    _touch(tmp_path / "a.bin")
    _touch(tmp_path / "staging" / "0000")
    _touch(tmp_path / "sub" / "b.bin")
    _touch(tmp_path / "sub" / "staging" / "0001")
    _touch(tmp_path / "sub" / "deeper" / "c.bin")
    _touch(tmp_path / "sub" / "deeper" / "staging" / "nested" / "d.bin")
    _touch(tmp_path / "stagingish" / "e.bin")

    found = set(LocalFS().walk(tmp_path))
    assert found == {
        tmp_path / "a.bin",
        tmp_path / "sub" / "b.bin",
        tmp_path / "sub" / "deeper" / "c.bin",
        tmp_path / "stagingish" / "e.bin",
    }


def test_walk_skips_a_plain_file_named_staging(tmp_path):
    _touch(tmp_path / "staging")
    _touch(tmp_path / "keep.bin")
    assert list(LocalFS().walk(tmp_path)) == [tmp_path / "keep.bin"]


def test_walk_matches_recursive_preorder(tmp_path):
    for i in range(4):
        _touch(tmp_path / f"f{i}")
        for j in range(3):
            _touch(tmp_path / f"d{i}" / f"g{j}")
            _touch(tmp_path / f"d{i}" / f"e{j}" / "leaf")

    assert list(LocalFS().walk(tmp_path)) == _recursive_preorder(tmp_path)


def test_walk_with_past_deadline_yields_nothing(tmp_path):
    _touch(tmp_path / "a.bin")
    found = list(LocalFS().walk(tmp_path, deadline=50.0, clock=lambda: 100.0))
    assert found == []


def test_walk_stops_once_deadline_passes(tmp_path):
    for i in range(25):
        _touch(tmp_path / f"f{i:02d}")

    ticks = iter(range(1000))
    # Checked at entries 0 and 10 (clock 0 and 1), then 20 (clock 2 > 1).
    found = list(LocalFS().walk(tmp_path, deadline=1, clock=lambda: next(ticks)))
    assert len(found) == 20


def test_walk_skips_unreadable_subtree(tmp_path, monkeypatch, caplog):
    _touch(tmp_path / "ok" / "a.bin")
    _touch(tmp_path / "locked" / "b.bin")
    real_scandir = os.scandir

    def fake_scandir(path):
        if Path(path).name == "locked":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(local_fs.os, "scandir", fake_scandir)
    found = list(LocalFS().walk(tmp_path))
    assert found == [tmp_path / "ok" / "a.bin"]
    assert "cannot open" in caplog.text


def test_walk_of_missing_root_yields_nothing(tmp_path):
    assert list(LocalFS().walk(tmp_path / "nope")) == []


def test_free_space_is_reported(tmp_path):
    assert LocalFS().free_space(tmp_path) >= 0
