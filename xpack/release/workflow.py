"""Release orchestration.

One run walks these stages in order, never going back:

1. discover    partition the working tree into project and extension files
2. compute     read manifest + recommendations, merge, classify, bump version
3. enrich      list changed extension files in the commit message
4. commit      project files, after confirmation
5. apply       write the new version and extension list to the manifest
6. commit      extension files, after confirmation

Every stage that touches the index runs inside a StagingScope, so the index is
empty between stages. Declining a confirmation ends the run early with
`RunOutcome.aborted` set; it is not an error.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rich.markup import escape

from xpack.core.config import ReleaseConfig
from xpack.core.result import Err, Ok, Result
from xpack.git.repository import GitError, Repository, StagingScope
from xpack.output.runlog import RunLog
from xpack.release.descriptor import ExtensionPackDescriptor
from xpack.release.discovery import FilePartition, discover_files
from xpack.release.errors import ReleaseError, from_git
from xpack.release.extensions import classify_changes, merge_extensions, same_extensions
from xpack.release.manifest import load_manifest, load_recommendations, write_manifest
from xpack.release.messages import (
    EXTENSION_FILES_TITLE,
    append_section,
    apply_version,
    staged_files_message,
    to_markup,
)
from xpack.release.semver import bump_version

Prompt = Callable[[str], str]

CONFIRM_QUESTION = "Do you want to apply the changes?"


class CommitOutcome(Enum):
    COMMITTED = "committed"
    SKIPPED = "skipped"
    DECLINED = "declined"


@dataclass(frozen=True, slots=True)
class RunOptions:
    update_only: bool = False
    assume_yes: bool = False


@dataclass(frozen=True, slots=True)
class RunOutcome:
    descriptor: ExtensionPackDescriptor
    project_commit: CommitOutcome | None = None
    extension_commit: CommitOutcome | None = None
    manifest_written: bool = False

    @property
    def aborted(self) -> bool:
        return CommitOutcome.DECLINED in (self.project_commit, self.extension_commit)


def is_yes(answer: str) -> bool:
    return answer.strip()[:1].lower() == "y"


def _released(scope: StagingScope) -> Result[None, GitError]:
    if scope.released is None:
        return Ok(None)
    return scope.released


class ReleaseWorkflow:
    def __init__(
        self,
        *,
        root: Path,
        config: ReleaseConfig,
        repo: Repository,
        log: RunLog,
        prompt: Prompt,
    ) -> None:
        self._root = root
        self._config = config
        self._repo = repo
        self._log = log
        self._prompt = prompt

    @property
    def _log_dir(self) -> str:
        return self._config.log.dir.strip("/")

    def run(self, options: RunOptions = RunOptions()) -> Result[RunOutcome, ReleaseError]:
        """Run every stage; stop at the first error or declined prompt."""
        partition = self.discover()
        if isinstance(partition, Err):
            return partition

        descriptor = self.compute(partition.value)
        if isinstance(descriptor, Err):
            return Err(descriptor.error.wrap("Failed to get metadata"))
        data = descriptor.value

        enriched = self.enrich(data)
        if isinstance(enriched, Err):
            return Err(enriched.error.wrap("Failed to get metadata"))
        self._log.info(f"Version: {data.current_version} -> {data.updated_version}")

        if options.update_only:
            written = self.apply_manifest_update(data)
            if isinstance(written, Err):
                return written
            return Ok(RunOutcome(descriptor=data, manifest_written=written.value))

        project = self.commit_project_files(partition.value.project_files, options=options)
        if isinstance(project, Err):
            return project
        if project.value is CommitOutcome.DECLINED:
            return Ok(RunOutcome(descriptor=data, project_commit=project.value))

        written = self.apply_manifest_update(data)
        if isinstance(written, Err):
            return written

        extension = self.commit_extension_files(data, options=options)
        if isinstance(extension, Err):
            return extension

        return Ok(
            RunOutcome(
                descriptor=data,
                project_commit=project.value,
                extension_commit=extension.value,
                manifest_written=written.value,
            )
        )

    # Stage 1

    def discover(self) -> Result[FilePartition, ReleaseError]:
        return discover_files(
            self._repo,
            extension_files=self._config.files.extension_files,
            skip=[self._log_dir],
        )

    # Stage 2

    def compute(self, partition: FilePartition) -> Result[ExtensionPackDescriptor, ReleaseError]:
        files = self._config.files
        manifest_path = self._root / files.manifest

        manifest = load_manifest(manifest_path)
        if isinstance(manifest, Err):
            return manifest
        recommended = load_recommendations(self._root / files.recommendations)
        if isinstance(recommended, Err):
            return recommended

        current = manifest.value.extensions
        updated = merge_extensions(current, recommended.value)
        report = classify_changes(current, updated)

        version = bump_version(manifest.value.version, report)
        if isinstance(version, Err):
            return version

        return Ok(
            ExtensionPackDescriptor(
                extension_files=partition.extension_files,
                manifest_path=manifest_path,
                manifest=manifest.value,
                current_version=manifest.value.version,
                updated_version=version.value,
                current_extensions=tuple(current),
                updated_extensions=tuple(updated),
                report=report,
                message=report.render(self._config.commit.extension_title),
            )
        )

    # Stage 3

    def enrich(self, data: ExtensionPackDescriptor) -> Result[None, ReleaseError]:
        """Add changed extension files to the message, then fill in the version.

        When the extension list changed, the manifest change is already
        described, so only other staged files trigger the listing. Without a
        list change, any staged extension file (manifest included) does.
        """
        present = [f for f in data.extension_files if (self._root / f).exists()]
        manifest_rel = self._config.files.manifest

        with self._repo.staging_scope() as scope:
            staged = self._stage_and_list(present)

        if isinstance(staged, Err):
            return Err(from_git(staged.error))
        released = _released(scope)
        if isinstance(released, Err):
            return Err(from_git(released.error))

        has_message = data.message.strip() != ""
        relevant = [f for f in staged.value if not has_message or f != manifest_rel]
        if relevant:
            if not has_message:
                data.message = self._config.commit.extension_title + "\n"
            data.message = append_section(
                data.message, staged_files_message(staged.value, EXTENSION_FILES_TITLE)
            )

        data.message = apply_version(data.message, data.updated_version)
        return Ok(None)

    def _stage_and_list(self, paths: list[str]) -> Result[list[str], GitError]:
        added = self._repo.add(paths)
        if isinstance(added, Err):
            return added
        return self._repo.staged_files()

    # Stage 4

    def commit_project_files(
        self, project_files: tuple[str, ...], *, options: RunOptions = RunOptions()
    ) -> Result[CommitOutcome, ReleaseError]:
        title = self._config.commit.project_title

        with self._repo.staging_scope() as scope:
            outcome = self._commit_staged(
                operation="commit_project_files",
                stage=lambda: self._stage_and_list(list(project_files)),
                build_message=lambda staged: staged_files_message(staged, title),
                empty_notice="No changes to commit for project files.",
                options=options,
            )

        return self._settle(outcome, scope, "Failed to commit project files")

    # Stage 5

    def apply_manifest_update(self, data: ExtensionPackDescriptor) -> Result[bool, ReleaseError]:
        """Write the manifest if the list or any extension file changed.

        Returns:
            Ok(True) if the manifest was written, Ok(False) if nothing changed.
        """
        manifest_name = Path(self._config.files.manifest).name
        if same_extensions(data.current_extensions, data.updated_extensions) and (
            data.message.strip() == ""
        ):
            self._log.info(f"No changes needed in `{manifest_name}` file.")
            return Ok(False)

        written = write_manifest(
            data.manifest,
            version=data.updated_version,
            extensions=data.updated_extensions,
        )
        if isinstance(written, Err):
            return Err(written.error.wrap("Failed to update extension pack"))

        self._log.success(
            f"Updated `{manifest_name}` to v{data.updated_version}.",
            f"{len(data.updated_extensions)} extensions in the pack.",
        )
        return Ok(True)

    # Stage 6

    def commit_extension_files(
        self, data: ExtensionPackDescriptor, *, options: RunOptions = RunOptions()
    ) -> Result[CommitOutcome, ReleaseError]:
        def stage() -> Result[list[str], GitError]:
            added = self._repo.add_all(exclude=[self._log_dir])
            if isinstance(added, Err):
                return added
            return Ok([])

        with self._repo.staging_scope() as scope:
            outcome = self._commit_staged(
                operation="commit_extension_files",
                stage=stage,
                build_message=lambda _staged: data.message,
                empty_notice="No changes to commit for extension files.",
                options=options,
            )

        return self._settle(outcome, scope, "Failed to commit changes")

    # Shared commit flow

    def _commit_staged(
        self,
        *,
        operation: str,
        stage: Callable[[], Result[list[str], GitError]],
        build_message: Callable[[list[str]], str],
        empty_notice: str,
        options: RunOptions,
    ) -> Result[CommitOutcome, GitError]:
        staged = stage()
        if isinstance(staged, Err):
            return staged

        message = build_message(staged.value)
        if message.strip() == "":
            self._log.info(empty_notice)
            return Ok(CommitOutcome.SKIPPED)

        self._log.info("The following changes will be applied:", message)
        self._log.block(to_markup(message))

        if not self._confirm(options):
            self._log.info(
                "Aborted! No changes applied.",
                f"User aborted the operation `{operation}`.",
            )
            return Ok(CommitOutcome.DECLINED)

        committed = self._repo.commit(message)
        if isinstance(committed, Err):
            return committed

        self._log.success("Changes committed.", committed.value or None)
        return Ok(CommitOutcome.COMMITTED)

    def _confirm(self, options: RunOptions) -> bool:
        question = f"{CONFIRM_QUESTION} (y/n):"
        if options.assume_yes:
            self._log.question(f"{question} y", "answered by --yes")
            return True

        answer = self._prompt(question)
        self._log.question(f"{question} {answer}")
        return is_yes(answer)

    def _settle(
        self,
        outcome: Result[CommitOutcome, GitError],
        scope: StagingScope,
        message: str,
    ) -> Result[CommitOutcome, ReleaseError]:
        if isinstance(outcome, Err):
            return Err(from_git(outcome.error).wrap(message))
        released = _released(scope)
        if isinstance(released, Err):
            return Err(from_git(released.error).wrap(message))
        return outcome


def describe(data: ExtensionPackDescriptor) -> str:
    """One-line summary of the computed release, with Rich markup."""
    return (
        f"{escape(data.current_version)} -> [bold]{escape(data.updated_version)}[/bold] "
        f"(+{len(data.report.added)} / -{len(data.report.removed)}, {len(data.report.kept)} kept)"
    )
