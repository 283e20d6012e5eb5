"""Git staging-area adapter.

The release workflow needs a handful of git operations (ls-files, add,
check-ignore, restore --staged, diff --cached, commit). Each returns a
Result; nothing here raises on a git failure.

Usage:
    repo = Repository(Path("."))

    with repo.staging_scope() as scope:
        repo.add(["package.json", "README.md"])
        staged = repo.staged_files()
    # the index is empty again here, whatever happened inside the block
    if isinstance(scope.released, Err):
        print(scope.released.error.message)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from xpack.core.result import Err, Ok, Result
from xpack.platform.process import ProcessError
from xpack.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "GitError",
    "Repository",
    "StagingScope",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command line that failed
        message: Error message (stderr, or a fallback)
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A git working tree rooted at `path`.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if this is a valid git repository."""
        return (self.path / ".git").exists()

    def add(self, paths: Sequence[str]) -> Result[None, GitError]:
        """Stage the given paths. An empty sequence is a no-op."""
        if not paths:
            return Ok(None)
        result = self._run(["add", "--", *paths])
        if isinstance(result, Err):
            return Err(self._error(result.error, "git add failed"))
        return Ok(None)

    def add_all(self, exclude: Sequence[str] = ()) -> Result[None, GitError]:
        """Stage every change in the working tree (`git add .`).

        `exclude` paths are left out via `:(exclude)` pathspecs. Paths git
        already ignores get no pathspec; git rejects those outright.
        """
        pathspecs: list[str] = []
        for path in exclude:
            ignored = self.is_ignored(path)
            if isinstance(ignored, Err):
                return ignored
            if not ignored.value:
                pathspecs.append(f":(exclude){path}")

        result = self._run(["add", "--", ".", *pathspecs])
        if isinstance(result, Err):
            return Err(self._error(result.error, "git add failed"))
        return Ok(None)

    def is_ignored(self, path: str) -> Result[bool, GitError]:
        """Whether git's exclude rules ignore `path` (`git check-ignore -q`)."""
        result = self._run(["check-ignore", "-q", "--", path])
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e) if e.returncode == 1:
                return Ok(False)
            case Err(e):
                return Err(self._error(e, "git check-ignore failed"))

    def list_files(self) -> Result[list[str], GitError]:
        """Tracked and untracked, non-ignored files, sorted.

        Uses every exclude source git does: nested `.gitignore` files,
        `.git/info/exclude` and `core.excludesFile`.
        """
        result = self._run(["ls-files", "-z", "--cached", "--others", "--exclude-standard"])
        match result:
            case Err(e):
                return Err(self._error(e, "git ls-files failed"))
            case Ok(stdout):
                return Ok(sorted({p for p in stdout.split("\0") if p}))

    def restore_staged(self) -> Result[None, GitError]:
        """Unstage everything (`git restore --staged .`)."""
        result = self._run(["restore", "--staged", "."])
        if isinstance(result, Err):
            return Err(self._error(result.error, "git restore failed"))
        return Ok(None)

    def staged_files(self) -> Result[list[str], GitError]:
        """List staged paths relative to the repository root."""
        result = self._run(["diff", "--name-only", "--cached", "."])
        match result:
            case Err(e):
                return Err(self._error(e, "git diff failed"))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def commit(self, message: str) -> Result[str, GitError]:
        """Commit the staged changes with `message`.

        The message is passed as a single argument, so quotes and newlines
        need no escaping.
        """
        result = self._run(["commit", "-m", message])
        match result:
            case Err(e):
                return Err(self._error(e, "git commit failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def staging_scope(self) -> StagingScope:
        return StagingScope(self)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )

    def _error(self, e: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=e.command_line,
            message=e.stderr.strip() or e.stdout.strip() or fallback,
            returncode=e.returncode,
        )


class StagingScope:
    """Context manager that empties the index on every exit path.

    Stages that stage files to inspect or commit them run inside a scope so
    no staged state leaks into the next stage. The outcome of the final
    `git restore --staged .` is kept in `released` for the caller to check.
    """

    def __init__(self, repo: Repository) -> None:
        self._repo = repo
        self.released: Result[None, GitError] | None = None

    def __enter__(self) -> StagingScope:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.released = self._repo.restore_staged()
