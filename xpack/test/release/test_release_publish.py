from __future__ import annotations

from pathlib import Path

from xpack.core.result import Err
from xpack.release.descriptor import ExtensionPackDescriptor
from xpack.release.errors import ErrorKind
from xpack.release.manifest import Manifest
from xpack.release.publish import publish


def test_publish_is_not_implemented(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    descriptor = ExtensionPackDescriptor(
        extension_files=("package.json",),
        manifest_path=path,
        manifest=Manifest(path=path, data={"version": "1.0.0"}, version="1.0.0", extensions=()),
        current_version="1.0.0",
        updated_version="1.0.1",
        current_extensions=(),
        updated_extensions=(),
    )

    result = publish(descriptor)

    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.NOT_IMPLEMENTED
    assert result.error.message == "Not implemented yet"
