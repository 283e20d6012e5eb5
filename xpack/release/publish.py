from __future__ import annotations

from xpack.core.result import Err, Result
from xpack.release.descriptor import ExtensionPackDescriptor
from xpack.release.errors import ErrorKind, ReleaseError


def publish(descriptor: ExtensionPackDescriptor) -> Result[None, ReleaseError]:
    """Publish the pack to the marketplace.

    Reserved stage: the release workflow does not call it.
    """
    del descriptor
    return Err(
        ReleaseError(
            kind=ErrorKind.NOT_IMPLEMENTED,
            message="Not implemented yet",
            detail="The `publish` stage is not implemented yet.",
        )
    )
