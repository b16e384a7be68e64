"""Helpers shared by tests that build project trees and capture console output."""

from __future__ import annotations

import io
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console


def make_tree(base: Path, layout: Mapping[str, object]) -> Path:
    """Create files (str/bytes values), directories (mapping values), or empty dirs (None)."""
    base.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        target = base / name
        if isinstance(value, str):
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(value, encoding="utf-8")
        elif isinstance(value, bytes):
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(value)
        elif value is None:
            target.mkdir(parents=True, exist_ok=True)
        elif isinstance(value, Mapping):
            make_tree(target, value)
        else:
            msg = f"unsupported tree value for {name}: {value!r}"
            raise TypeError(msg)
    return base


def console_text(console: Console) -> str:
    """Return everything written to a buffer-backed console."""
    buffer = console.file
    assert isinstance(buffer, io.StringIO)
    return buffer.getvalue()
