from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from xpack.core.result import Err, Ok, Result
from xpack.core.structured import StrDict, as_str_dict, get_str, get_str_list
from xpack.platform.files import atomic_write_text
from xpack.release.errors import ErrorKind, ReleaseError
from xpack.release.extensions import dedupe

MANIFEST_INDENT = 4


@dataclass(frozen=True, slots=True)
class Manifest:
    path: Path
    data: StrDict
    version: str
    extensions: tuple[str, ...]


def strip_comments(text: str) -> str:
    """Drop blank lines and whole-line `//` comments."""
    lines = [ln for ln in text.splitlines() if ln.strip() and not ln.strip().startswith("//")]
    return "\n".join(lines)


def read_json_file(path: Path) -> Result[StrDict, ReleaseError]:
    """Read a JSON object that may carry `//` comment lines."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind=ErrorKind.CONFIG,
                message=f"Failed to read file: {path}",
                detail=str(e),
            )
        )
    except UnicodeDecodeError as e:
        return Err(
            ReleaseError(
                kind=ErrorKind.CONFIG,
                message=f"Failed to read file: {path}",
                detail=f"not valid UTF-8: {e}",
            )
        )

    try:
        obj: object = json.loads(strip_comments(text))
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind=ErrorKind.CONFIG,
                message=f"Failed to read file: {path}",
                detail=f"invalid JSON: {e}",
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            ReleaseError(
                kind=ErrorKind.CONFIG,
                message=f"Failed to read file: {path}",
                detail="JSON root must be an object",
            )
        )
    return Ok(data)


def load_manifest(path: Path) -> Result[Manifest, ReleaseError]:
    data_r = read_json_file(path)
    if isinstance(data_r, Err):
        return data_r
    data = data_r.value

    version = get_str(data, "version")
    if version is None:
        return Err(
            ReleaseError(
                kind=ErrorKind.CONFIG,
                message=f"missing version in {path.name}",
                hint=str(path),
            )
        )

    if "extensionPack" not in data:
        extensions: list[str] = []
    else:
        found = get_str_list(data, "extensionPack")
        if found is None:
            return Err(
                ReleaseError(
                    kind=ErrorKind.CONFIG,
                    message=f"extensionPack in {path.name} must be a list of strings",
                    hint=str(path),
                )
            )
        extensions = found

    return Ok(
        Manifest(
            path=path,
            data=data,
            version=version,
            extensions=tuple(dedupe(extensions)),
        )
    )


def load_recommendations(path: Path) -> Result[list[str], ReleaseError]:
    data_r = read_json_file(path)
    if isinstance(data_r, Err):
        return data_r

    found = get_str_list(data_r.value, "recommendations")
    if found is None:
        return Err(
            ReleaseError(
                kind=ErrorKind.CONFIG,
                message=f"missing recommendations list in {path.name}",
                hint=str(path),
            )
        )
    return Ok(dedupe(found))


def render_manifest(data: StrDict, *, version: str, extensions: Sequence[str]) -> str:
    """Serialize the manifest with a new version and extension list.

    Every other field keeps its value and position.
    """
    out = dict(data)
    out["version"] = version
    out["extensionPack"] = list(extensions)
    return json.dumps(out, indent=MANIFEST_INDENT, ensure_ascii=False) + "\n"


def write_manifest(
    manifest: Manifest, *, version: str, extensions: Sequence[str]
) -> Result[None, ReleaseError]:
    text = render_manifest(manifest.data, version=version, extensions=extensions)
    try:
        atomic_write_text(manifest.path, text, encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind=ErrorKind.FILESYSTEM,
                message=f"Error updating {manifest.path.name}",
                detail=str(e),
                hint=str(manifest.path),
            )
        )
    return Ok(None)
