"""Git operations module.

Usage:
    from xpack.git import Repository

    repo = Repository(Path("/path/to/pack"))
    staged = repo.staged_files()
"""

from xpack.git.repository import (
    GitError,
    Repository,
    StagingScope,
)

__all__ = [
    "GitError",
    "Repository",
    "StagingScope",
]
