"""Release workflow for an extension pack.

- extensions: merge the pack with the recommendations and classify changes
- semver: version bump policy
- manifest: read and rewrite the manifest
- discovery: split the working tree into project and extension files
- workflow: stage-by-stage orchestration
"""

from __future__ import annotations
