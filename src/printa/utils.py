"""Generic utility helpers."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from pathlib import Path

SAMPLE_SIZE = 8192

# Extensions that are never worth sniffing.
BINARY_EXTENSIONS = frozenset({
    "7z",
    "bin",
    "bmp",
    "class",
    "dll",
    "dylib",
    "exe",
    "gif",
    "gz",
    "ico",
    "jar",
    "jpeg",
    "jpg",
    "mp3",
    "mp4",
    "o",
    "pdf",
    "png",
    "pyc",
    "so",
    "tar",
    "ttf",
    "wasm",
    "webp",
    "woff",
    "woff2",
    "zip",
})


@dataclass(frozen=True, slots=True)
class TextDetectionResult:
    """Outcome of text detection; ``content`` is the decoded text for text files."""

    is_text: bool
    content: str | None = None


def is_text_bytes(path: Path, data: bytes) -> bool:
    """
    Return True if ``data`` (the contents of ``path``) looks like text.

    Heuristic: known binary extension, then a NUL byte in the sample, then a
    strict UTF-8 decode of the sample. A multi-byte sequence cut off by the
    sample boundary does not count against the file.
    """
    if path.suffix.lower().lstrip(".") in BINARY_EXTENSIONS:
        return False
    sample = data[:SAMPLE_SIZE]
    if b"\x00" in sample:
        return False
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(sample, final=len(data) <= SAMPLE_SIZE)
    except UnicodeDecodeError:
        return False
    return True


def detect_text(path: Path, data: bytes) -> TextDetectionResult:
    """Classify ``data`` and decode it when it is text."""
    if not is_text_bytes(path, data):
        return TextDetectionResult(is_text=False)
    return TextDetectionResult(is_text=True, content=data.decode("utf-8", errors="replace"))


def read_bytes(path: Path) -> bytes:
    return path.read_bytes()


def relative_posix(path: Path, base: Path) -> str:
    """Return ``path`` relative to ``base`` with forward slashes."""
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return Path(path).as_posix()
