"""Tests for xpack.platform.files module."""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

from xpack.platform.files import atomic_write_text


def test_atomic_write_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "package.json"
    atomic_write_text(target, '{"version": "1.0.0"}\n')
    assert target.read_text(encoding="utf-8") == '{"version": "1.0.0"}\n'


def test_atomic_write_replaces_and_leaves_no_temp(tmp_path: Path) -> None:
    target = tmp_path / "package.json"
    target.write_text("old", encoding="utf-8")

    atomic_write_text(target, "new")

    assert target.read_text(encoding="utf-8") == "new"
    assert [p.name for p in tmp_path.iterdir()] == ["package.json"]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_atomic_write_keeps_mode(tmp_path: Path) -> None:
    target = tmp_path / "package.json"
    target.write_text("old", encoding="utf-8")
    target.chmod(0o664)

    atomic_write_text(target, "new")

    assert stat.S_IMODE(target.stat().st_mode) == 0o664
