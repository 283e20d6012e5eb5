from __future__ import annotations

import pytest

from xpack.core.result import Err, Ok
from xpack.release.errors import ErrorKind
from xpack.release.extensions import classify_changes
from xpack.release.semver import SemVer, bump_kind, bump_version, increase_version, parse_version


def test_parse_version() -> None:
    assert parse_version("1.2.3") == SemVer(1, 2, 3)
    assert parse_version(" 0.0.1 ") == SemVer(0, 0, 1)


def test_parse_version_rejects_non_plain_versions() -> None:
    assert parse_version("v1.2.3") is None
    assert parse_version("1.2") is None
    assert parse_version("1.2.3-beta.1") is None
    assert parse_version("01.2.3") is None


def test_increase_version() -> None:
    assert increase_version("1.2.3", "major") == "2.0.0"
    assert increase_version("1.2.3", "minor") == "1.3.0"
    assert increase_version("1.2.3", "patch") == "1.2.4"


def test_increase_version_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="invalid version"):
        increase_version("latest", "patch")


def test_semver_ordering() -> None:
    assert SemVer(1, 10, 0) > SemVer(1, 9, 9)
    assert str(SemVer(3, 1, 0)) == "3.1.0"


def test_bump_kind_no_change_is_patch() -> None:
    assert bump_kind(classify_changes(["a.b"], ["a.b"])) == "patch"


def test_bump_kind_removal_is_major_even_with_additions() -> None:
    assert bump_kind(classify_changes(["a.b", "c.d"], ["c.d", "e.f"])) == "major"


def test_bump_kind_addition_only_is_minor() -> None:
    assert bump_kind(classify_changes(["a.b"], ["a.b", "c.d"])) == "minor"


def test_bump_version_resets_lower_parts() -> None:
    assert bump_version("3.1.7", classify_changes(["a.b"], [])) == Ok("4.0.0")
    assert bump_version("3.1.7", classify_changes([], ["a.b"])) == Ok("3.2.0")
    assert bump_version("3.1.7", classify_changes(["a.b"], ["a.b"])) == Ok("3.1.8")


def test_bump_version_invalid_manifest_version() -> None:
    result = bump_version("three", classify_changes([], []))

    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.CONFIG
    assert result.error.message == "Failed to bump version"
    assert "three" in (result.error.detail or "")
