"""Extension list merging and change classification."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

__all__ = [
    "ChangeEntry",
    "ChangeKind",
    "ChangeReport",
    "classify_changes",
    "dedupe",
    "merge_extensions",
    "same_extensions",
]


def dedupe(ids: Iterable[str]) -> list[str]:
    """Drop repeated identifiers, keeping the first occurrence."""
    seen: set[str] = set()
    out: list[str] = []
    for ext in ids:
        if ext not in seen:
            seen.add(ext)
            out.append(ext)
    return out


def merge_extensions(current: Sequence[str], recommended: Sequence[str]) -> list[str]:
    """Kept extensions followed by newly recommended ones, sorted.

    Anything in `current` that is no longer recommended is dropped.
    """
    current_set = set(current)
    recommended_set = set(recommended)
    kept = [ext for ext in dedupe(current) if ext in recommended_set]
    added = [ext for ext in dedupe(recommended) if ext not in current_set]
    return sorted(kept + added)


def same_extensions(a: Sequence[str], b: Sequence[str]) -> bool:
    return sorted(dedupe(a)) == sorted(dedupe(b))


class ChangeKind(Enum):
    KEPT = "keep"
    REMOVED = "remove"
    ADDED = "add"

    @property
    def marker(self) -> str:
        return _MARKERS[self]


_MARKERS = {ChangeKind.KEPT: "•", ChangeKind.REMOVED: "-", ChangeKind.ADDED: "+"}


@dataclass(frozen=True, slots=True)
class ChangeEntry:
    extension: str
    kind: ChangeKind

    def render(self) -> str:
        return f"  {self.kind.marker} {self.extension}"


@dataclass(frozen=True, slots=True)
class ChangeReport:
    """Classification of every extension between two lists.

    Entries are sorted by identifier. A report where every entry is KEPT
    carries no version-relevant change and renders to an empty string.
    """

    entries: tuple[ChangeEntry, ...] = ()

    @property
    def has_changes(self) -> bool:
        return any(e.kind is not ChangeKind.KEPT for e in self.entries)

    @property
    def added(self) -> list[str]:
        return [e.extension for e in self.entries if e.kind is ChangeKind.ADDED]

    @property
    def removed(self) -> list[str]:
        return [e.extension for e in self.entries if e.kind is ChangeKind.REMOVED]

    @property
    def kept(self) -> list[str]:
        return [e.extension for e in self.entries if e.kind is ChangeKind.KEPT]

    def render(self, title: str) -> str:
        """Plain-text commit message body under `title`."""
        if not self.has_changes:
            return ""
        lines = [title, "", "New extension list:"]
        lines.extend(e.render() for e in self.entries)
        return "\n".join(lines) + "\n"


def _sort_key(entry: ChangeEntry) -> tuple[str, str]:
    return (entry.extension, entry.kind.value)


def classify_changes(current: Sequence[str], updated: Sequence[str]) -> ChangeReport:
    """Classify each identifier as kept, removed or added."""
    updated_set = set(updated)
    current_set = set(current)

    entries: list[ChangeEntry] = []
    for ext in dedupe(current):
        kind = ChangeKind.KEPT if ext in updated_set else ChangeKind.REMOVED
        entries.append(ChangeEntry(ext, kind))
    for ext in dedupe(updated):
        if ext not in current_set:
            entries.append(ChangeEntry(ext, ChangeKind.ADDED))

    return ChangeReport(entries=tuple(sorted(entries, key=_sort_key)))
