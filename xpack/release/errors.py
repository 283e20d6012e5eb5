"""Error types for the release workflow."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from xpack.core.config import ConfigError
from xpack.git.repository import GitError


class ErrorKind(Enum):
    CONFIG = "config"
    GIT = "git"
    FILESYSTEM = "filesystem"
    NOT_IMPLEMENTED = "not_implemented"


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    `message` is what the user sees first; `detail` is the verbose content
    (underlying error text, failing command) shown with --verbose and always
    written to the run log.
    """

    kind: ErrorKind
    message: str
    detail: str | None = None
    hint: str | None = None

    def wrap(self, message: str) -> ReleaseError:
        """Return a copy reported under `message`, keeping the cause in detail."""
        cause = self.message if not self.detail else f"{self.message}\n{self.detail}"
        return replace(self, message=message, detail=cause)

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


def from_git(error: GitError, message: str = "Git command failed") -> ReleaseError:
    return ReleaseError(
        kind=ErrorKind.GIT,
        message=message,
        detail=f"Command: {error.command}\nError: {error.message}",
    )


def from_config(error: ConfigError) -> ReleaseError:
    return ReleaseError(
        kind=ErrorKind.CONFIG,
        message=error.message,
        hint=str(error.path) if error.path is not None else None,
    )
