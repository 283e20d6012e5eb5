from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from xpack.core.result import Err, Ok, Result
from xpack.git.repository import GitError, Repository
from xpack.release.discovery import discover_files, partition_files
from xpack.release.errors import ErrorKind

_EXTENSION_FILES = [".vscode/extensions.json", "package.json", "assets/icon_128.png", "README.md"]

needs_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class ListingRepository(Repository):
    def __init__(self, listed: Result[list[str], GitError]) -> None:
        super().__init__(Path("."))
        self._listed = listed

    def list_files(self) -> Result[list[str], GitError]:
        return self._listed


class TestPartitionFiles:
    def test_splits_project_and_extension_files(self) -> None:
        listed = [
            "scripts/release.sh",
            "package.json",
            "README.md",
            ".vscode/extensions.json",
            ".vscode/settings.json",
            ".gitignore",
        ]

        partition = partition_files(listed, extension_files=_EXTENSION_FILES)

        assert partition.project_files == (
            ".gitignore",
            ".vscode/settings.json",
            "scripts/release.sh",
        )
        assert partition.extension_files == tuple(_EXTENSION_FILES)

    def test_skip_drops_whole_directories(self) -> None:
        listed = [".tmp/release.log", ".tmpfile", "LICENSE"]

        partition = partition_files(listed, extension_files=_EXTENSION_FILES, skip=[".tmp/"])

        assert partition.project_files == (".tmpfile", "LICENSE")

    def test_extension_paths_are_normalized(self) -> None:
        partition = partition_files(
            ["assets/icon_128.png"], extension_files=["./assets/icon_128.png"]
        )

        assert partition.project_files == ()
        assert partition.extension_files == ("assets/icon_128.png",)


class TestDiscoverFiles:
    def test_uses_repository_listing(self) -> None:
        repo = ListingRepository(Ok(["package.json", "LICENSE"]))

        result = discover_files(repo, extension_files=_EXTENSION_FILES)

        assert isinstance(result, Ok)
        assert result.value.project_files == ("LICENSE",)

    def test_listing_failure(self) -> None:
        repo = ListingRepository(Err(GitError(command="git ls-files", message="not a repo")))

        result = discover_files(repo, extension_files=_EXTENSION_FILES)

        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.GIT
        assert result.error.message == "Failed to get project files"

    @needs_git
    def test_respects_git_ignore_rules(self, tmp_path: Path) -> None:
        subprocess.run(["git", "-C", str(tmp_path), "init", "-q"], check=True)
        files = {
            ".gitignore": "**/node_modules\n",
            "node_modules/x.js": "",
            "sub/.gitignore": "*.log\n",
            "sub/debug.log": "",
            "sub/tool.sh": "",
            "package.json": "{}",
            ".tmp/release.log": "",
        }
        for rel, text in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")

        result = discover_files(
            Repository(tmp_path), extension_files=_EXTENSION_FILES, skip=[".tmp"]
        )

        assert isinstance(result, Ok)
        assert result.value.project_files == (".gitignore", "sub/.gitignore", "sub/tool.sh")
