"""CLI command implementation for the ``printa scan`` workflow."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from printa.config import load_config
from printa.constants import (
    CONFIG_COLOR,
    CONFIG_CONTENTS_ONLY,
    CONFIG_DEPTH,
    CONFIG_EXTENSIONS,
    CONFIG_GITIGNORE,
    CONFIG_IGNORE,
    CONFIG_SHOW_HIDDEN,
    CONFIG_STRUCTURE_ONLY,
    EXIT_CONFIG,
    EXIT_INTERRUPT,
    EXIT_PATH,
)
from printa.errors import ConfigLoadError, PathNotFoundError
from printa.services import ScanExecutor

from .common import fail, given, make_consoles, split_csv


def cli_layer(ctx: click.Context, params: dict[str, Any]) -> dict[str, Any]:
    """Build the command-line config layer from options the user actually gave."""
    layer: dict[str, Any] = {}
    if extensions := split_csv(params["extensions"]):
        layer[CONFIG_EXTENSIONS] = extensions
    if ignore := split_csv(params["ignore_patterns"]):
        layer[CONFIG_IGNORE] = ignore
    if params["depth"] is not None:
        layer[CONFIG_DEPTH] = params["depth"]
    toggles = (("color", CONFIG_COLOR), ("gitignore", CONFIG_GITIGNORE), ("show_hidden", CONFIG_SHOW_HIDDEN))
    for option, key in toggles:
        if given(ctx, option):
            layer[key] = params[option]
    # Mode flags can only switch a view off.
    if params["structure_only"]:
        layer[CONFIG_STRUCTURE_ONLY] = True
    if params["contents_only"]:
        layer[CONFIG_CONTENTS_ONLY] = True
    return layer


@click.command()
@click.argument("project", type=click.Path(path_type=Path))
@click.option(
    "-e",
    "--extensions",
    multiple=True,
    help="Comma-separated file extensions or base names whose contents are printed (ts,js,Makefile)",
)
@click.option(
    "-i",
    "--ignore",
    "ignore_patterns",
    multiple=True,
    help="Comma-separated gitignore-style patterns to ignore",
)
@click.option("-d", "--depth", type=click.IntRange(min=0), help="Maximum recursion depth")
@click.option("--color/--no-color", default=True, help="Enable or disable colours and syntax highlighting")
@click.option(
    "--gitignore/--no-gitignore", default=True, help="Read PROJECT/.gitignore as an extra ignore source"
)
@click.option("--hidden/--no-hidden", "show_hidden", default=False, help="Show directories starting with '.'")
@click.option("--structure-only", is_flag=True, help="Show only the directory structure")
@click.option("--contents-only", is_flag=True, help="Show only file contents")
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Explicit config file path")
@click.option("--ignore-defaults", "-I", is_flag=True, help="Drop the bundled default ignore patterns")
@click.pass_context
def scan(
    ctx: click.Context,
    *,
    project: Path,
    config_path: Path | None,
    ignore_defaults: bool,
    **options: Any,
) -> None:
    """Print the structure of PROJECT and the contents of its files."""
    try:
        config = load_config(
            base_path=project,
            explicit_config=config_path,
            ignore_defaults=ignore_defaults,
            cli_values=cli_layer(ctx, options),
        )
    except ConfigLoadError as err:
        fail(str(err), EXIT_CONFIG)

    out, err_console = make_consoles(color=config.color)
    executor = ScanExecutor(out=out, err=err_console)
    try:
        executor.execute(root=project, config=config)
    except PathNotFoundError as err:
        fail(str(err), EXIT_PATH)
    except KeyboardInterrupt:
        err_console.print("\nInterrupted by user.")
        raise SystemExit(EXIT_INTERRUPT) from None
