"""ReleaseWorkflow against a real git repository."""

from __future__ import annotations

import json
import shutil
import subprocess
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest

from xpack.core.config import ReleaseConfig
from xpack.core.result import Ok
from xpack.git.repository import Repository
from xpack.output.console import MockConsole
from xpack.output.runlog import RunLog
from xpack.release.workflow import CommitOutcome, ReleaseWorkflow, RunOptions

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(root: Path, *args: str) -> str:
    done = subprocess.run(
        ["git", "-C", str(root), *args], check=True, capture_output=True, text=True
    )
    return done.stdout


def _write(root: Path, rel: str, text: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _pack(root: Path, *, gitignore: str, recommended: list[str]) -> None:
    _write(
        root,
        "package.json",
        json.dumps({"name": "pack", "version": "1.4.2", "extensionPack": ["a.b"]}, indent=4)
        + "\n",
    )
    _write(root, ".vscode/extensions.json", json.dumps({"recommendations": recommended}))
    _write(root, "README.md", "# Pack\n")
    _write(root, ".gitignore", gitignore)
    _write(root, "scripts/build.sh", "vsce package\n")
    _git(root, "init", "-q")
    _git(root, "config", "user.name", "Release Bot")
    _git(root, "config", "user.email", "release@example.com")
    _git(root, "config", "commit.gpgsign", "false")
    _git(root, "add", ".")
    _git(root, "commit", "-q", "-m", "initial")


@pytest.fixture
def log(tmp_path: Path) -> Iterator[RunLog]:
    with RunLog.open(
        tmp_path / ".tmp", MockConsole(), clock=lambda: datetime(2025, 2, 14, 9, 30, 0)
    ) as run_log:
        yield run_log


def _workflow(root: Path, log: RunLog) -> ReleaseWorkflow:
    return ReleaseWorkflow(
        root=root,
        config=ReleaseConfig(),
        repo=Repository(root),
        log=log,
        prompt=lambda question: "y",
    )


def _subjects(root: Path) -> list[str]:
    return _git(root, "log", "--format=%s").splitlines()


def test_full_release_with_ignored_log_dir(tmp_path: Path, log: RunLog) -> None:
    _pack(tmp_path, gitignore=".tmp/\n**/node_modules\n", recommended=["a.b", "c.d"])
    _write(tmp_path, "node_modules/x/index.js", "")
    _write(tmp_path, "scripts/build.sh", "vsce package --no-yarn\n")

    result = _workflow(tmp_path, log).run()

    assert isinstance(result, Ok)
    assert result.value.project_commit is CommitOutcome.COMMITTED
    assert result.value.extension_commit is CommitOutcome.COMMITTED
    assert _subjects(tmp_path) == [
        "feat(extension): Updates to v1.5.0",
        "chore: Updated project files",
        "initial",
    ]
    assert _git(tmp_path, "show", "--name-only", "--format=", "HEAD").split() == ["package.json"]
    manifest = json.loads(_git(tmp_path, "show", "HEAD:package.json"))
    assert manifest["version"] == "1.5.0"
    assert manifest["extensionPack"] == ["a.b", "c.d"]
    assert _git(tmp_path, "status", "--porcelain") == ""


def test_log_dir_not_ignored_is_never_committed(tmp_path: Path, log: RunLog) -> None:
    _pack(tmp_path, gitignore="node_modules/\n", recommended=["a.b", "c.d"])
    log.info("run started")

    result = _workflow(tmp_path, log).run(RunOptions(assume_yes=True))

    assert isinstance(result, Ok)
    assert result.value.project_commit is CommitOutcome.SKIPPED
    assert result.value.extension_commit is CommitOutcome.COMMITTED
    assert _git(tmp_path, "ls-files", ".tmp") == ""
    assert _git(tmp_path, "diff", "--name-only", "--cached") == ""


def test_nothing_to_release(tmp_path: Path, log: RunLog) -> None:
    _pack(tmp_path, gitignore=".tmp/\n", recommended=["a.b"])

    result = _workflow(tmp_path, log).run()

    assert isinstance(result, Ok)
    assert result.value.manifest_written is False
    assert result.value.extension_commit is CommitOutcome.SKIPPED
    assert _subjects(tmp_path) == ["initial"]
