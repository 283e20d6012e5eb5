from __future__ import annotations

from pathlib import Path

from xpack.core.config import ConfigError
from xpack.git.repository import GitError
from xpack.release.errors import ErrorKind, ReleaseError, from_config, from_git


def test_wrap_keeps_cause_in_detail() -> None:
    error = ReleaseError(kind=ErrorKind.CONFIG, message="missing version in package.json")

    wrapped = error.wrap("Failed to get metadata")

    assert wrapped.kind is ErrorKind.CONFIG
    assert wrapped.message == "Failed to get metadata"
    assert wrapped.detail == "missing version in package.json"


def test_wrap_chains_detail() -> None:
    error = ReleaseError(kind=ErrorKind.GIT, message="Git command failed", detail="Error: boom")

    wrapped = error.wrap("Failed to commit changes")

    assert wrapped.detail == "Git command failed\nError: boom"


def test_from_git() -> None:
    error = from_git(GitError(command="git commit -m ...", message="nothing to commit"))

    assert error.kind is ErrorKind.GIT
    assert error.message == "Git command failed"
    assert error.detail == "Command: git commit -m ...\nError: nothing to commit"


def test_from_config_uses_path_as_hint() -> None:
    error = from_config(ConfigError("invalid TOML: x", Path("xpack.toml")))

    assert error.kind is ErrorKind.CONFIG
    assert error.pretty() == "invalid TOML: x (hint: xpack.toml)"


def test_pretty_without_hint() -> None:
    assert ReleaseError(kind=ErrorKind.FILESYSTEM, message="disk full").pretty() == "disk full"
