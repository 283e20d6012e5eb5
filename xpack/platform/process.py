"""Subprocess execution returning a Result instead of raising.

    match run(["git", "diff", "--name-only", "--cached"], cwd=root, timeout=30):
        case Ok(stdout):
            staged = stdout.splitlines()
        case Err(error):
            print(error.command_line, error.stderr)
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from xpack.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]

_SHOWN_ARGS = 3


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that exited non-zero, timed out or could not be started.

    `returncode` is -1 when the process never completed.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    def __str__(self) -> str:
        shown = " ".join(self.command[:_SHOWN_ARGS])
        if len(self.command) > _SHOWN_ARGS:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run `cmd` in `cwd` and capture its output as text.

    Returns:
        Ok(stdout) when the command exits 0, Err(ProcessError) otherwise.
    """
    command = tuple(cmd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return Err(ProcessError(command, -1, partial, f"Command timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError(command, -1, "", str(e)))

    if proc.returncode != 0:
        return Err(ProcessError(command, proc.returncode, proc.stdout, proc.stderr))
    return Ok(proc.stdout)
