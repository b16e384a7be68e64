"""File collection, extension filtering, and content emission."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .constants import ROLE_CONTENT, EntryKind
from .highlight import highlight_source
from .logging_utils import StructuredLogEvent, get_logger, log_event
from .utils import TextDetectionResult, detect_text, read_bytes, relative_posix

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from rich.console import Console
    from rich.text import Text

    from .directory import Entry
    from .styles import Palette

logger = get_logger(__name__)


def collect_files(entries: tuple[Entry, ...], base_path: Path) -> list[Path]:
    """Flatten ``entries`` into file paths under ``base_path``, in tree order.

    Tombstones are skipped. Symlinks are leaves and are only collected when
    they resolve to a regular file.
    """
    files: list[Path] = []
    for entry in entries:
        if entry.ignored:
            continue
        entry_path = base_path / entry.name
        if entry.kind is EntryKind.DIRECTORY:
            files.extend(collect_files(entry.children or (), entry_path))
        elif entry.kind is EntryKind.SYMLINK:
            if entry_path.is_file():
                files.append(entry_path)
        else:
            files.append(entry_path)
    return files


def normalize_extension(value: str) -> str:
    return value.strip().lstrip(".").lower()


@dataclass(frozen=True, slots=True)
class ExtensionFilter:
    """Content inclusion predicate built from the ``extensions`` list.

    Each configured value is tried both as an extension (case-insensitive,
    leading dot optional) and as an exact base name with its extension
    stripped (``Makefile``, ``Dockerfile``). An empty list includes everything.
    """

    extensions: frozenset[str] = frozenset()
    names: frozenset[str] = frozenset()

    @classmethod
    def from_values(cls, values: Iterable[str]) -> ExtensionFilter:
        cleaned = [v.strip() for v in values if v.strip()]
        return cls(
            extensions=frozenset(normalize_extension(v) for v in cleaned),
            names=frozenset(cleaned),
        )

    @property
    def accepts_all(self) -> bool:
        return not self.extensions and not self.names

    def __call__(self, path: Path) -> bool:
        if self.accepts_all:
            return True
        ext = normalize_extension(path.suffix)
        if ext and ext in self.extensions:
            return True
        return path.stem in self.names

    def select(self, paths: Iterable[Path]) -> list[Path]:
        return [p for p in paths if self(p)]


@dataclass(frozen=True, slots=True)
class EmitDependencies:
    """I/O gateway used by :class:`ContentEmitter`."""

    byte_reader: Callable[[Path], bytes]
    text_detector: Callable[[Path, bytes], TextDetectionResult]
    highlighter: Callable[[str, Path], str]

    @classmethod
    def default(cls) -> EmitDependencies:
        return cls(
            byte_reader=read_bytes,
            text_detector=detect_text,
            highlighter=highlight_source,
        )


class ContentEmitter:
    """Writes one labelled content block per text file onto ``console``."""

    def __init__(
        self,
        *,
        console: Console,
        palette: Palette,
        base_path: Path,
        highlight: bool,
        dependencies: EmitDependencies | None = None,
    ) -> None:
        self._console = console
        self._palette = palette
        self._base = base_path
        self._highlight = highlight
        self._deps = EmitDependencies.default() if dependencies is None else dependencies

    def header(self) -> Text:
        return self._palette.paint(ROLE_CONTENT, "\nContent of files:")

    def label(self, file_path: Path) -> Text:
        return self._palette.paint(ROLE_CONTENT, f"\n./{relative_posix(file_path, self._base)}:")

    @property
    def styled(self) -> bool:
        """Return True when the console will show escape codes."""
        return self._console.color_system is not None and not self._console.no_color

    def render_content(self, content: str, file_path: Path) -> str:
        """Return the content to write: highlighted, single-colour, or untouched.

        Plain output is the decoded file as-is; tabs, carriage returns and
        other control characters survive.
        """
        if not (self._highlight and self.styled):
            return content
        try:
            return self._deps.highlighter(content, file_path)
        except Exception as err:  # noqa: BLE001 - any highlighter failure falls back to plain
            log_event(
                logger,
                StructuredLogEvent(
                    name="content.highlight_fallback",
                    message=f"highlighting failed for {file_path.name}; printing plain",
                    level=logging.DEBUG,
                    context={"path": file_path, "error": str(err)},
                ),
            )
        body = content.removesuffix("\n")
        styled = self._palette.ansi(ROLE_CONTENT, body, color_system=self._console.color_system)
        return styled + content[len(body) :]

    def write_content(self, content: str) -> None:
        """Write ``content`` straight to the console's stream, ending it with a newline."""
        out = self._console.file
        out.write(content if content.endswith("\n") else f"{content}\n")
        out.flush()

    def emit(self, file_path: Path) -> bool:
        """Write the block for ``file_path``; return False when nothing was written."""
        try:
            data = self._deps.byte_reader(file_path)
        except OSError as err:
            log_event(
                logger,
                StructuredLogEvent(
                    name="content.read_failed",
                    message=f"Could not read {file_path}: {err.strerror or err}",
                    level=logging.WARNING,
                    context={"path": file_path},
                ),
            )
            return False

        detection = self._deps.text_detector(file_path, data)
        if not detection.is_text or detection.content is None:
            return False

        self._console.print(self.label(file_path))
        self.write_content(self.render_content(detection.content, file_path))
        return True

    def emit_all(self, paths: Iterable[Path]) -> int:
        """Emit every path in order and return how many blocks were written."""
        return sum(1 for path in paths if self.emit(path))
