from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from printa.config import RenderConfig
from printa.core import matcher_for, run_scan, validate_root
from printa.errors import PathNotFoundError

pytestmark = pytest.mark.small

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from pathlib import Path

    TreeFactory = Callable[[Mapping[str, object]], Path]


def test_validate_root_resolves(tree_factory: TreeFactory) -> None:
    root = tree_factory({"a.txt": "x"})
    assert validate_root(root / ".") == root.resolve()


def test_validate_root_missing(tmp_path: Path) -> None:
    with pytest.raises(PathNotFoundError, match="does not exist"):
        validate_root(tmp_path / "nope")


def test_validate_root_not_a_directory(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")
    with pytest.raises(PathNotFoundError, match="not a directory"):
        validate_root(target)


def test_matcher_for_reports_gitignore_use(tree_factory: TreeFactory) -> None:
    root = tree_factory({".gitignore": "dist/\n"})
    _, used = matcher_for(root, RenderConfig(gitignore=True))
    assert used
    _, used = matcher_for(root, RenderConfig(gitignore=False))
    assert not used


def test_run_scan_walks_once_and_logs(tree_factory: TreeFactory, caplog: pytest.LogCaptureFixture) -> None:
    root = tree_factory({"src": {"a.ts": "x"}, "dist": {"a.js": "x"}, ".gitignore": "dist/\n"})
    with caplog.at_level(logging.INFO, logger="printa.core"):
        result = run_scan(root=root, config=RenderConfig())
    assert result.root == root.resolve()
    assert result.used_gitignore
    summary = [(e.name, e.ignored) for e in result.entries]
    assert summary == [(".gitignore", False), ("dist", True), ("src", False)]
    events = [getattr(r, "event", None) for r in caplog.records]
    assert events == ["scan.start", "scan.complete"]


def test_hidden_directories_are_tombstones_by_default(tree_factory: TreeFactory) -> None:
    root = tree_factory({".github": {"workflows": {"ci.yml": "x"}}, "a.txt": "x"})
    result = run_scan(root=root, config=RenderConfig(gitignore=False))
    assert [(e.name, e.ignored) for e in result.entries] == [(".github", True), ("a.txt", False)]

    result = run_scan(root=root, config=RenderConfig(gitignore=False, show_hidden=True))
    assert not result.entries[0].ignored
