"""Application service that runs one scan and feeds both views."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.text import Text

from .core import ScanResult, run_scan
from .file_handling import ContentEmitter, EmitDependencies, ExtensionFilter, collect_files
from .logging_utils import StructuredLogEvent, get_logger, log_event
from .renderers import StructureRenderer
from .styles import Palette

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from .config import RenderConfig

GITIGNORE_NOTICE = "Use .gitignore file. If you want to disable it, use --no-gitignore"


@dataclass(frozen=True, slots=True)
class ScanExecutorDependencies:
    scan: Callable[..., ScanResult]
    emit: EmitDependencies

    @classmethod
    def default(cls) -> ScanExecutorDependencies:
        return cls(scan=run_scan, emit=EmitDependencies.default())


@dataclass(frozen=True, slots=True)
class ScanReport:
    """What an execution produced, for callers and tests."""

    result: ScanResult
    structure_lines: int
    files_collected: int
    files_emitted: int


class ScanExecutor:
    """Runs the walk, then renders the structure and emits contents off the same tree."""

    _logger = get_logger(__name__)

    def __init__(
        self,
        *,
        out: Console,
        err: Console,
        dependencies: ScanExecutorDependencies | None = None,
    ) -> None:
        self._out = out
        self._err = err
        self._deps = ScanExecutorDependencies.default() if dependencies is None else dependencies

    def execute(self, *, root: Path, config: RenderConfig) -> ScanReport:
        result = self._deps.scan(root=root, config=config)
        if result.used_gitignore:
            self._err.print(Text(GITIGNORE_NOTICE, style="green"))

        palette = Palette.from_colors(config.colors, enabled=config.color)

        structure_lines = 0
        if config.show_structure:
            renderer = StructureRenderer(symbols=config.symbols, palette=palette)
            self._out.print(renderer.header(result.root))
            for line in renderer.render(result.entries):
                self._out.print(line)
                structure_lines += 1

        collected = emitted = 0
        if config.show_contents:
            selected = ExtensionFilter.from_values(config.extensions).select(
                collect_files(result.entries, result.root)
            )
            collected = len(selected)
            emitter = ContentEmitter(
                console=self._out,
                palette=palette,
                base_path=result.root,
                highlight=config.color,
                dependencies=self._deps.emit,
            )
            self._out.print(emitter.header())
            emitted = emitter.emit_all(selected)

        log_event(
            self._logger,
            StructuredLogEvent(
                name="executor.complete",
                message="scan executor completed",
                context={
                    "structure_lines": structure_lines,
                    "files_collected": collected,
                    "files_emitted": emitted,
                },
            ),
        )
        return ScanReport(
            result=result,
            structure_lines=structure_lines,
            files_collected=collected,
            files_emitted=emitted,
        )
