from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from .support import make_tree

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping
    from pathlib import Path


@pytest.fixture
def tree_factory(tmp_path: Path) -> Callable[[Mapping[str, object]], Path]:
    """Build a project tree under ``tmp_path/project`` and return its root."""

    def _factory(layout: Mapping[str, object]) -> Path:
        return make_tree(tmp_path / "project", layout)

    return _factory


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG lookups at an empty directory and clear the env override."""
    xdg = tmp_path / "xdg"
    xdg.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    monkeypatch.delenv("PRINTA_CONFIG_PATH", raising=False)
    return xdg


@pytest.fixture
def plain_console() -> Console:
    """A console writing uncoloured text into a buffer."""
    return Console(file=io.StringIO(), no_color=True, highlight=False, soft_wrap=True, width=200)


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """Undo ``logging.basicConfig(force=True)`` calls made by the CLI."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
