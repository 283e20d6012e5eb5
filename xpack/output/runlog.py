"""Run-scoped logging context.

A RunLog is created once per release run and passed into every stage. Each
record goes to the console and, stripped of markup, to a log file named after
the run's start time:

    <root>/.tmp/release-2025_02_14-09_30_00.log

Verbose detail (command output, parser messages) is always written to the
file but only shown on the console when `verbose` is set.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from enum import Enum
from pathlib import Path
from types import TracebackType
from typing import TextIO

from rich.markup import escape
from rich.text import Text

from .console import ConsoleProtocol, Style

__all__ = ["Level", "RunLog", "log_file_name"]


class Level(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    QUESTION = "question"
    ERROR = "error"

    @property
    def tag(self) -> str:
        return f"[{self.name}]"


def log_file_name(started: datetime, *, prefix: str = "release") -> str:
    return f"{prefix}-{started.strftime('%Y_%m_%d-%H_%M_%S')}.log"


class RunLog:
    """Console + file sink for one run.

    Use as a context manager so the log file is closed when the run ends:

        with RunLog.open(root / ".tmp", console, verbose=False) as log:
            log.info("No changes needed")
    """

    def __init__(
        self,
        path: Path,
        handle: TextIO,
        console: ConsoleProtocol,
        *,
        verbose: bool = False,
    ) -> None:
        self.path = path
        self.console = console
        self.verbose = verbose
        self._handle: TextIO | None = handle

    @classmethod
    def open(
        cls,
        log_dir: Path,
        console: ConsoleProtocol,
        *,
        verbose: bool = False,
        prefix: str = "release",
        clock: Callable[[], datetime] = datetime.now,
    ) -> RunLog:
        """Create the log directory and open a fresh log file.

        Raises:
            OSError: If the directory or file cannot be created.
        """
        log_dir.mkdir(parents=True, exist_ok=True)
        path = log_dir / log_file_name(clock(), prefix=prefix)
        handle = path.open("a", encoding="utf-8")
        return cls(path, handle, console, verbose=verbose)

    def __enter__(self) -> RunLog:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    @property
    def closed(self) -> bool:
        return self._handle is None

    # Levels

    def info(self, message: str, detail: str | None = None) -> None:
        self._log(Level.INFO, message, detail)

    def success(self, message: str, detail: str | None = None) -> None:
        self._log(Level.SUCCESS, message, detail)

    def warning(self, message: str, detail: str | None = None) -> None:
        self._log(Level.WARNING, message, detail)

    def question(self, message: str, detail: str | None = None) -> None:
        """Record a prompt and its answer. The prompt itself is already on screen."""
        self._log(Level.QUESTION, message, detail)

    def error(self, message: str, detail: str | None = None) -> None:
        self._log(Level.ERROR, message, detail)

    def block(self, markup: str) -> None:
        """Print a pre-rendered Rich markup block, e.g. a changelog."""
        self.console.print(markup)
        self._write(Text.from_markup(markup).plain)

    def _log(self, level: Level, message: str, detail: str | None) -> None:
        safe = escape(message)
        match level:
            case Level.INFO:
                self.console.info(safe)
            case Level.SUCCESS:
                self.console.success(safe)
            case Level.WARNING:
                self.console.warning(safe)
            case Level.ERROR:
                self.console.error(safe)
            case Level.QUESTION:
                pass

        record = f"{level.tag} {message}"
        if detail:
            record += "\n" + detail
            if self.verbose and level is not Level.QUESTION:
                self.console.print(escape(detail), Style.DIM)

        self._write(record)

    def _write(self, text: str) -> None:
        if self._handle is None:
            return
        self._handle.write(text.rstrip("\n") + "\n\n")
        self._handle.flush()
