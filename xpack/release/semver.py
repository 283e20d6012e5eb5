"""Semantic versions and the extension-pack bump policy.

The policy maps list changes onto version parts: removing an extension is
treated as breaking (major), adding one as a feature (minor), anything else
as a patch.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from xpack.core.result import Err, Ok, Result
from xpack.release.errors import ErrorKind, ReleaseError
from xpack.release.extensions import ChangeReport

BumpKind = Literal["major", "minor", "patch"]

_VERSION_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def bump(self, kind: BumpKind) -> SemVer:
        match kind:
            case "major":
                return SemVer(self.major + 1, 0, 0)
            case "minor":
                return SemVer(self.major, self.minor + 1, 0)
            case "patch":
                return SemVer(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")


def parse_version(version: str) -> SemVer | None:
    m = _VERSION_RE.match(version.strip())
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def increase_version(version: str, kind: BumpKind) -> str:
    """Bump a `major.minor.patch` string.

    Raises:
        ValueError: If `version` is not a plain three-part version.
    """
    parsed = parse_version(version)
    if parsed is None:
        raise ValueError(f"invalid version: {version!r}")
    return str(parsed.bump(kind))


def bump_kind(report: ChangeReport) -> BumpKind:
    if report.removed:
        return "major"
    if report.added:
        return "minor"
    return "patch"


def bump_version(version: str, report: ChangeReport) -> Result[str, ReleaseError]:
    parsed = parse_version(version)
    if parsed is None:
        return Err(
            ReleaseError(
                kind=ErrorKind.CONFIG,
                message="Failed to bump version",
                detail=f"invalid version in manifest: {version!r}",
                hint="Expected MAJOR.MINOR.PATCH",
            )
        )
    return Ok(str(parsed.bump(bump_kind(report))))
