"""Commit message building and changelog rendering."""

from __future__ import annotations

from collections.abc import Sequence

from rich.markup import escape

from xpack.release.extensions import ChangeKind

EXTENSION_FILES_TITLE = "Extension files updated:"
VERSION_PLACEHOLDER = "{version}"

_LINE_COLORS = {
    f"  {ChangeKind.KEPT.marker} ": "white",
    f"  {ChangeKind.REMOVED.marker} ": "red",
    f"  {ChangeKind.ADDED.marker} ": "green",
}


def staged_files_message(staged: Sequence[str], title: str) -> str:
    """`title` followed by one `- path` line per staged file, or "" if none."""
    if not staged:
        return ""
    return title + "\n\n- " + "\n- ".join(staged) + "\n"


def append_section(message: str, section: str) -> str:
    if not message.strip():
        return section
    return message.rstrip("\n") + "\n\n" + section


def apply_version(message: str, version: str) -> str:
    return message.replace(VERSION_PLACEHOLDER, version)


def to_markup(message: str) -> str:
    """Color a commit message for the console changelog.

    Removed extensions are red, added ones green, kept ones neutral; all other
    lines are escaped and left unstyled.
    """
    out: list[str] = []
    for line in message.splitlines():
        color = next((c for prefix, c in _LINE_COLORS.items() if line.startswith(prefix)), None)
        if color is None:
            out.append(escape(line))
        else:
            out.append(f"[{color}]{escape(line)}[/{color}]")
    return "\n".join(out)
