"""Shared CLI helpers used by multiple subcommands."""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, NoReturn

import click
from click.core import ParameterSource
from rich.console import Console
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Iterable

# Parameter sources that count as "given by the user" for config layering.
_EXPLICIT_SOURCES = {ParameterSource.COMMANDLINE, ParameterSource.ENVIRONMENT}


def split_csv(values: Iterable[str]) -> list[str]:
    """Split repeated comma-separated option values into one flat list."""
    out: list[str] = []
    for value in values:
        out.extend(part.strip() for part in value.split(",") if part.strip())
    return out


def given(ctx: click.Context, name: str) -> bool:
    """Return True if parameter ``name`` was supplied rather than defaulted."""
    return ctx.get_parameter_source(name) in _EXPLICIT_SOURCES


def make_consoles(*, color: bool) -> tuple[Console, Console]:
    """Return (stdout, stderr) consoles; neither re-highlights or wraps output."""
    out = Console(highlight=False, soft_wrap=True, no_color=not color)
    err = Console(stderr=True, highlight=False, soft_wrap=True, no_color=not color)
    return out, err


def fail(message: str, code: int) -> NoReturn:
    """Print ``Error: message`` on stderr and exit with ``code``."""
    err = Console(stderr=True, highlight=False, soft_wrap=True)
    line = Text("Error:", style="bright_red")
    line.append(f" {message}")
    err.print(line)
    raise SystemExit(code)


def exit_on_broken_pipe() -> NoReturn:
    """Exit quietly when stdout is closed early (e.g. piped into ``head``)."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull, sys.stdout.fileno())
    finally:
        os.close(devnull)
    raise SystemExit(0)
