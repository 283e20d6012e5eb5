"""Working-tree discovery.

Splits the files of a pack checkout into *extension files* (the files that
make up the published pack) and *project files* (tooling, CI, scripts and
everything else), so each group gets its own commit.

The file list comes from git (`git ls-files --cached --others
--exclude-standard`), so every ignore source git honors applies here too.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from xpack.core.result import Err, Ok, Result
from xpack.git.repository import Repository
from xpack.release.errors import ReleaseError, from_git


@dataclass(frozen=True, slots=True)
class FilePartition:
    project_files: tuple[str, ...]
    extension_files: tuple[str, ...]


def _normalize(rel: str) -> str:
    return Path(rel).as_posix().strip("/")


def _under(rel: str, prefixes: Sequence[str]) -> bool:
    return any(rel == p or rel.startswith(p + "/") for p in prefixes)


def partition_files(
    listed: Sequence[str],
    *,
    extension_files: Sequence[str],
    skip: Sequence[str] = (),
) -> FilePartition:
    """Partition root-relative POSIX paths.

    Files under a `skip` path belong to neither group. Extension files are
    reported as configured, whether or not they exist.
    """
    pack = tuple(_normalize(f) for f in extension_files)
    pack_set = set(pack)
    skipped = [s for s in (_normalize(s) for s in skip) if s]
    project = tuple(
        f for f in sorted(listed) if f not in pack_set and not _under(f, skipped)
    )
    return FilePartition(project_files=project, extension_files=pack)


def discover_files(
    repo: Repository,
    *,
    extension_files: Sequence[str],
    skip: Sequence[str] = (),
) -> Result[FilePartition, ReleaseError]:
    """List the repository's non-ignored files and partition them.

    Args:
        repo: Repository of the pack checkout.
        extension_files: Paths (relative to the root) that belong to the pack.
        skip: Extra root-relative paths to leave out (e.g. the run log dir).
    """
    listed = repo.list_files()
    if isinstance(listed, Err):
        return Err(from_git(listed.error, "Failed to get project files"))
    return Ok(partition_files(listed.value, extension_files=extension_files, skip=skip))
