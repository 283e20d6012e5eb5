"""Process exit codes.

A release either finishes, is cancelled by the user, or fails. Cancelling at a
confirmation prompt is a deliberate, clean outcome and shares the success code.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success, or release aborted by the user at a prompt
    - 1: Fatal error (bad config, git failure, I/O failure)
    """

    OK = 0
    ERROR = 1

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
