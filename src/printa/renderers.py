"""Structure rendering: turns a walked tree into connector-annotated lines.

Separate presentation from collection; the renderer only reads the tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.text import Text

from .constants import ROLE_DIRECTORY, ROLE_FILE, ROLE_SYMLINK, EntryKind

if TYPE_CHECKING:
    from pathlib import Path

    from .config import SymbolSet
    from .directory import Entry
    from .styles import Palette


def last_visible_index(entries: tuple[Entry, ...]) -> int:
    """Return the original index of the last non-ignored entry, or -1 if all are ignored."""
    for idx in range(len(entries) - 1, -1, -1):
        if not entries[idx].ignored:
            return idx
    return -1


def entry_role(entry: Entry) -> str:
    """Map an entry to its colour role: directory, then symlink, then file."""
    if entry.kind is EntryKind.DIRECTORY:
        return ROLE_DIRECTORY
    if entry.kind is EntryKind.SYMLINK:
        return ROLE_SYMLINK
    return ROLE_FILE


@dataclass(frozen=True, slots=True)
class StructureRenderer:
    """Renders entries as ``<prefixes><connector> <name>`` lines."""

    symbols: SymbolSet
    palette: Palette

    def header(self, root: Path) -> Text:
        return self.palette.paint(ROLE_DIRECTORY, f"Structure of {root}:")

    def label(self, entry: Entry) -> Text:
        text = entry.display_name + ("/" if entry.is_dir else "")
        return self.palette.paint(entry_role(entry), text)

    def render(self, entries: tuple[Entry, ...], prefixes: tuple[str, ...] = ()) -> list[Text]:
        """Return one line per visible entry, depth-first.

        Ignored entries produce nothing. The end connector goes to the last
        entry that is not ignored, compared by its index in ``entries``, so a
        tombstone never shifts which sibling closes the level.
        """
        lines: list[Text] = []
        last = last_visible_index(entries)
        current = "".join(prefixes)
        for idx, entry in enumerate(entries):
            if entry.ignored:
                continue
            is_last = idx == last
            connector = self.symbols.end if is_last else self.symbols.branch
            line = Text(f"{current}{connector} ")
            line.append_text(self.label(entry))
            lines.append(line)
            if entry.children:
                filler = self.symbols.space if is_last else self.symbols.vertical_filler
                lines.extend(self.render(entry.children, (*prefixes, filler)))
        return lines

    def render_lines(self, entries: tuple[Entry, ...]) -> list[str]:
        """Return the rendered lines as plain strings."""
        return [line.plain for line in self.render(entries)]
