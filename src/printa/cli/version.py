"""CLI command reporting the installed printa version."""

from __future__ import annotations

import click

from printa import __version__


@click.command()
def version() -> None:
    """Print version and exit."""
    click.echo(__version__)
