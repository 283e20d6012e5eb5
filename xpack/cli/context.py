from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer
from rich.markup import escape

from xpack.core.config import ReleaseConfig, load_config_or_default
from xpack.core.errors import ErrorCode
from xpack.core.result import Err, Ok, Result
from xpack.git.repository import Repository
from xpack.output.console import ConsoleProtocol, RichConsole
from xpack.output.runlog import RunLog
from xpack.release.errors import ErrorKind, ReleaseError, from_config


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: ReleaseConfig
    console: ConsoleProtocol
    repo: Repository
    verbose: bool = False

    @property
    def log_dir(self) -> Path:
        return self.root / self.config.log.dir


def build_context(
    *, root: Path, verbose: bool, console: ConsoleProtocol | None = None
) -> tuple[CLIContext, Result[None, ReleaseError]]:
    """Resolve the project root and load `xpack.toml`.

    A broken config file must still be reported through the run log, so the
    context always comes back (with default settings) alongside the load
    result.
    """
    try:
        resolved = root.expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --root: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.ERROR))

    loaded = load_config_or_default(resolved)
    config = loaded.value if isinstance(loaded, Ok) else ReleaseConfig()
    status: Result[None, ReleaseError] = Ok(None)
    if isinstance(loaded, Err):
        status = Err(from_config(loaded.error).wrap("Failed to load xpack.toml"))

    ctx = CLIContext(
        root=resolved,
        config=config,
        console=console if console is not None else RichConsole(),
        repo=Repository(resolved),
        verbose=verbose,
    )
    return ctx, status


def open_run_log(ctx: CLIContext, *, prefix: str = "release") -> RunLog:
    try:
        return RunLog.open(ctx.log_dir, ctx.console, verbose=ctx.verbose, prefix=prefix)
    except OSError as e:
        typer.echo(f"error: cannot create run log in {ctx.log_dir}: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.ERROR))


def handle_fatal(error: ReleaseError, log: RunLog) -> NoReturn:
    """Log a fatal error with its detail, point at the log file and exit 1."""
    detail = error.detail
    if error.hint:
        detail = f"{detail}\nhint: {error.hint}" if detail else f"hint: {error.hint}"
    log.error(error.message, detail)
    log.console.print(f"See {escape(str(log.path))} for more details.\n")
    log.close()
    raise typer.Exit(code=int(ErrorCode.ERROR))


def ensure_repository(ctx: CLIContext, log: RunLog) -> None:
    """Exit through `handle_fatal` unless the root is a git work tree."""
    if ctx.repo.exists():
        return
    handle_fatal(
        ReleaseError(
            kind=ErrorKind.GIT,
            message=f"Not a git repository: {ctx.root}",
            hint="Run from the extension pack checkout or pass --root",
        ),
        log,
    )
