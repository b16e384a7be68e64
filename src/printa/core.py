"""Core scan orchestration: validates the root, builds the matcher, walks once."""

from __future__ import annotations

import os
from dataclasses import dataclass
from time import perf_counter
from typing import TYPE_CHECKING

from .directory import Entry, build_tree, count_entries
from .errors import (
    ERROR_MSG_ROOT_MISSING,
    ERROR_MSG_ROOT_NOT_DIR,
    ERROR_MSG_ROOT_UNREADABLE,
    PathNotFoundError,
)
from .ignore import IgnoreSources, PatternMatcher, build_ignore_matcher
from .logging_utils import StructuredLogEvent, get_logger, log_event

if TYPE_CHECKING:
    from pathlib import Path

    from .config import RenderConfig

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ScanResult:
    """The walked tree plus what produced it; read-only."""

    root: Path
    entries: tuple[Entry, ...]
    matcher: PatternMatcher
    used_gitignore: bool


def validate_root(root: Path) -> Path:
    """Return ``root`` resolved, or raise :class:`PathNotFoundError` if it cannot be walked."""
    if not root.exists():
        msg = f"{ERROR_MSG_ROOT_MISSING}: {root}"
        raise PathNotFoundError(msg)
    resolved = root.resolve()
    if not resolved.is_dir():
        msg = f"{ERROR_MSG_ROOT_NOT_DIR}: {root}"
        raise PathNotFoundError(msg)
    if not os.access(resolved, os.R_OK | os.X_OK):
        msg = f"{ERROR_MSG_ROOT_UNREADABLE}: {root}"
        raise PathNotFoundError(msg)
    return resolved


def matcher_for(root: Path, config: RenderConfig) -> tuple[PatternMatcher, bool]:
    sources = IgnoreSources(
        patterns=config.ignore,
        use_gitignore=config.gitignore,
        show_hidden=config.show_hidden,
    )
    return build_ignore_matcher(root, sources)


def run_scan(*, root: Path, config: RenderConfig) -> ScanResult:
    """Walk ``root`` once according to ``config``."""
    start = perf_counter()
    resolved = validate_root(root)
    matcher, used_gitignore = matcher_for(resolved, config)

    log_event(
        logger,
        StructuredLogEvent(
            name="scan.start",
            message="starting directory traversal",
            context={
                "root": resolved,
                "max_depth": config.max_depth,
                "rule_count": len(matcher.rules),
            },
        ),
    )

    entries = build_tree(resolved, matcher, max_depth=config.max_depth)

    log_event(
        logger,
        StructuredLogEvent(
            name="scan.complete",
            message="completed directory traversal",
            context={"duration_seconds": perf_counter() - start, **count_entries(entries)},
        ),
    )
    return ScanResult(root=resolved, entries=entries, matcher=matcher, used_gitignore=used_gitignore)
