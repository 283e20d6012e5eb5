"""Typed configuration loading and access.

Settings live in an optional `xpack.toml` at the project root. Every field has
a default matching the standard VS Code extension pack layout, so most
projects never need the file.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "CommitConfig",
    "ConfigError",
    "FilesConfig",
    "LogConfig",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "xpack.toml"

DEFAULT_MANIFEST = "package.json"
DEFAULT_RECOMMENDATIONS = ".vscode/extensions.json"
DEFAULT_EXTENSION_FILES = (
    ".vscode/extensions.json",
    "package.json",
    "assets/icon_128.png",
    "README.md",
)
DEFAULT_LOG_DIR = ".tmp"
DEFAULT_EXTENSION_TITLE = "feat(extension): Updates to v{version}"
DEFAULT_PROJECT_TITLE = "chore: Updated project files"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class FilesConfig:
    """Paths relative to the project root.

    `extension_files` are the files that make up the published pack; every
    other tracked file is a project file and is committed separately.
    """

    manifest: str = DEFAULT_MANIFEST
    recommendations: str = DEFAULT_RECOMMENDATIONS
    extension_files: tuple[str, ...] = DEFAULT_EXTENSION_FILES


@dataclass(frozen=True, slots=True)
class LogConfig:
    dir: str = DEFAULT_LOG_DIR


@dataclass(frozen=True, slots=True)
class CommitConfig:
    """Commit message titles. `{version}` is replaced with the new version."""

    extension_title: str = DEFAULT_EXTENSION_TITLE
    project_title: str = DEFAULT_PROJECT_TITLE


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Main configuration container."""

    files: FilesConfig = field(default_factory=FilesConfig)
    log: LogConfig = field(default_factory=LogConfig)
    commit: CommitConfig = field(default_factory=CommitConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create ReleaseConfig from a mapping (parsed TOML)."""
        files: StrDict = get_table(data, "files") or {}
        log: StrDict = get_table(data, "log") or {}
        commit: StrDict = get_table(data, "commit") or {}

        extension_files = get_str_list(files, "extension_files")

        return cls(
            files=FilesConfig(
                manifest=get_str(files, "manifest") or DEFAULT_MANIFEST,
                recommendations=get_str(files, "recommendations") or DEFAULT_RECOMMENDATIONS,
                extension_files=(
                    tuple(extension_files) if extension_files else DEFAULT_EXTENSION_FILES
                ),
            ),
            log=LogConfig(dir=get_str(log, "dir") or DEFAULT_LOG_DIR),
            commit=CommitConfig(
                extension_title=get_str(commit, "extension_title") or DEFAULT_EXTENSION_TITLE,
                project_title=get_str(commit, "project_title") or DEFAULT_PROJECT_TITLE,
            ),
        )


def _read_table(path: Path) -> Result[StrDict, ConfigError]:
    try:
        data: object = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(ConfigError(f"Cannot read {path.name}: {e.strerror or e}", path=path))
    except UnicodeDecodeError:
        return Err(ConfigError(f"{path.name} is not valid UTF-8", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))

    table = as_str_dict(data)
    if table is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(table)


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to xpack.toml

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _read_table(path)
    if isinstance(result, Err):
        return result

    return Ok(ReleaseConfig.from_dict(result.value))


def load_config_or_default(root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load `xpack.toml` from root, or defaults when the file does not exist.

    A file that exists but cannot be parsed is still an error.
    """
    path = root / CONFIG_FILE_NAME
    if not path.exists():
        return Ok(ReleaseConfig())
    return load_config(path)
