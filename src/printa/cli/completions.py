"""CLI entrypoint for emitting shell completion scripts."""

from __future__ import annotations

from typing import Final

import click

COMPLETION_TEMPLATES: Final[dict[str, str]] = {
    "bash": (
        '_printa_completion() {{ eval "$(env {var}=bash_source {prog} "$@")"; }}\n'
        "complete -F _printa_completion {prog}"
    ),
    "zsh": 'autoload -U compinit; compinit\neval "$(env {var}=zsh_source {prog})"',
    "fish": "eval (env {var}=fish_source {prog})",
}


@click.command()
@click.option(
    "--shell",
    type=click.Choice(sorted(COMPLETION_TEMPLATES), case_sensitive=False),
    required=True,
    help="Target shell to generate completion script for",
)
def completions(shell: str) -> None:
    """Print shell completion script for the given shell."""
    click.echo(COMPLETION_TEMPLATES[shell.lower()].format(var="_PRINTA_COMPLETE", prog="printa"))
