from __future__ import annotations

from pathlib import Path

import typer

from xpack import __version__
from xpack.cli.context import build_context, ensure_repository, handle_fatal, open_run_log
from xpack.core.errors import ErrorCode
from xpack.core.result import Err
from xpack.release.messages import apply_version, to_markup
from xpack.release.workflow import CommitOutcome, ReleaseWorkflow, RunOptions, describe


app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)


def _prompt(question: str) -> str:
    answer: str = typer.prompt(question, default="", show_default=False)
    return answer


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ErrorCode.OK))


@app.command()
def release(
    root: Path = typer.Option(Path("."), "--root", help="Extension pack root (git work tree)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show verbose details"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Auto-confirm (do not prompt)"),
    update_only: bool = typer.Option(
        False, "--update-only", help="Update the manifest without committing"
    ),
) -> None:
    """Sync the pack with the recommendations, bump its version and commit."""
    ctx, status = build_context(root=root, verbose=verbose)

    with open_run_log(ctx) as log:
        if isinstance(status, Err):
            handle_fatal(status.error, log)

        ensure_repository(ctx, log)

        workflow = ReleaseWorkflow(
            root=ctx.root,
            config=ctx.config,
            repo=ctx.repo,
            log=log,
            prompt=_prompt,
        )
        result = workflow.run(RunOptions(update_only=update_only, assume_yes=yes))
        if isinstance(result, Err):
            handle_fatal(result.error, log)

        outcome = result.value
        if outcome.aborted:
            raise typer.Exit(code=int(ErrorCode.OK))

        if update_only:
            log.success("Manifest updated." if outcome.manifest_written else "Nothing to update.")
        elif outcome.extension_commit is CommitOutcome.COMMITTED:
            log.success(f"Release v{outcome.descriptor.updated_version} done.")
        elif outcome.project_commit is CommitOutcome.COMMITTED:
            log.success("Project files committed; the extension pack is unchanged.")
        else:
            log.success("Nothing to release.")


@app.command()
def diff(
    root: Path = typer.Option(Path("."), "--root", help="Extension pack root (git work tree)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show verbose details"),
) -> None:
    """Show the pending extension changes and the next version (read-only)."""
    ctx, status = build_context(root=root, verbose=verbose)

    with open_run_log(ctx, prefix="diff") as log:
        if isinstance(status, Err):
            handle_fatal(status.error, log)
        ensure_repository(ctx, log)

        workflow = ReleaseWorkflow(
            root=ctx.root,
            config=ctx.config,
            repo=ctx.repo,
            log=log,
            prompt=_prompt,
        )
        partition = workflow.discover()
        if isinstance(partition, Err):
            handle_fatal(partition.error, log)
        computed = workflow.compute(partition.value)
        if isinstance(computed, Err):
            handle_fatal(computed.error.wrap("Failed to get metadata"), log)

        data = computed.value
        ctx.console.header("Extension pack")
        ctx.console.print(describe(data))
        if not data.report.has_changes:
            log.info("Extension list is up to date.")
            return
        log.block(to_markup(apply_version(data.message, data.updated_version)))


def main() -> None:
    app()
