"""CLI command that bootstraps a default configuration file."""

from __future__ import annotations

from pathlib import Path

import click

from printa.config import TOML_CONFIG, write_default_config
from printa.constants import EXIT_CONFIG, EXIT_USAGE

from .common import fail


@click.command()
@click.option(
    "--path",
    "target",
    type=click.Path(path_type=Path),
    default=Path(),
    help="Directory to initialize",
)
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init(*, target: Path, force: bool) -> None:
    """Write the default .printa.toml into the target directory."""
    target = target.resolve()
    if not target.is_dir():
        fail(f"not a directory: {target}", EXIT_USAGE)

    config_file = target / TOML_CONFIG
    if config_file.exists() and not force:
        fail(f"'{TOML_CONFIG}' already exists at {target}. Use --force to overwrite.", EXIT_CONFIG)

    try:
        written = write_default_config(target)
    except OSError as e:
        fail(f"Failed to write '{TOML_CONFIG}': {e}", EXIT_CONFIG)
    click.echo(f"Wrote default config to {written}")
