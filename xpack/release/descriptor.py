from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from xpack.release.extensions import ChangeReport
from xpack.release.manifest import Manifest


@dataclass
class ExtensionPackDescriptor:
    """State of one release run.

    Built by the compute stage and updated in place by the later stages:
    enrich appends to `message`, and the manifest update writes
    `updated_version`/`updated_extensions` to `manifest_path`.
    """

    extension_files: tuple[str, ...]
    manifest_path: Path
    manifest: Manifest
    current_version: str
    updated_version: str
    current_extensions: tuple[str, ...]
    updated_extensions: tuple[str, ...]
    report: ChangeReport = field(default_factory=ChangeReport)
    message: str = ""
