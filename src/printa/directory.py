"""Directory traversal producing an ordered tree of :class:`Entry` records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import SYMLINK_MARKER, EntryKind
from .logging_utils import StructuredLogEvent, get_logger, log_event

if TYPE_CHECKING:
    from pathlib import Path

    from .ignore import PatternMatcher

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Entry:
    """A node discovered during traversal.

    Ignored entries are kept as tombstones: ``ignored`` is set and
    ``children`` stays ``None`` even for directories. Symlinks and files
    never have children; a directory at the depth bound has an empty tuple.
    """

    name: str
    kind: EntryKind
    ignored: bool = False
    children: tuple[Entry, ...] | None = None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def display_name(self) -> str:
        """Return the name as shown in the structure view."""
        if self.kind is EntryKind.SYMLINK:
            return f"{self.name}{SYMLINK_MARKER}"
        return self.name


def sort_key(entry: Entry) -> tuple[str, str]:
    """Case-insensitive ordering with a codepoint tie-break.

    Unlike a locale collation, the order does not depend on the process
    locale: accented names sort by codepoint, after every unaccented letter.
    """
    return (entry.name.casefold(), entry.name)


def classify(path: Path) -> EntryKind:
    """Return the kind of ``path``; a symlink is never classified as its target."""
    if path.is_symlink():
        return EntryKind.SYMLINK
    if path.is_dir():
        return EntryKind.DIRECTORY
    return EntryKind.FILE


@dataclass(frozen=True, slots=True)
class DirectoryWalker:
    """Walks ``root`` to ``max_depth`` consulting ``matcher`` for every entry.

    Depth 0 is the root's direct children; directories found at
    ``max_depth`` are listed but not expanded.
    """

    root: Path
    matcher: PatternMatcher
    max_depth: int

    def relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def walk(self, path: Path | None = None, depth: int = 0) -> tuple[Entry, ...]:
        """Return the sorted entries of ``path`` (default: the root)."""
        if depth > self.max_depth:
            return ()
        directory = self.root if path is None else path

        try:
            children = [(child, classify(child)) for child in directory.iterdir()]
        except OSError as err:
            log_event(
                logger,
                StructuredLogEvent(
                    name="walk.skipped_directory",
                    message=f"Skipping {directory}: {err.strerror or err}",
                    level=logging.WARNING,
                    context={"path": directory, "depth": depth},
                ),
            )
            return ()

        entries: list[Entry] = []
        for child, kind in children:
            if self.matcher.ignores(self.relative(child), is_dir=kind is EntryKind.DIRECTORY):
                entries.append(Entry(name=child.name, kind=kind, ignored=True))
            elif kind is EntryKind.DIRECTORY:
                entries.append(Entry(name=child.name, kind=kind, children=self.walk(child, depth + 1)))
            else:
                entries.append(Entry(name=child.name, kind=kind))

        entries.sort(key=sort_key)
        return tuple(entries)


def build_tree(root: Path, matcher: PatternMatcher, *, max_depth: int) -> tuple[Entry, ...]:
    """Walk ``root`` once and return its top-level entries."""
    return DirectoryWalker(root=root, matcher=matcher, max_depth=max_depth).walk()


def count_entries(entries: tuple[Entry, ...]) -> dict[str, int]:
    """Tally visible entries by kind plus the number of tombstones."""
    counts = {kind.value: 0 for kind in EntryKind}
    counts["ignored"] = 0
    stack = list(entries)
    while stack:
        entry = stack.pop()
        if entry.ignored:
            counts["ignored"] += 1
            continue
        counts[entry.kind.value] += 1
        stack.extend(entry.children or ())
    return counts
