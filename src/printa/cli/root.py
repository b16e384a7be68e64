"""Top-level Click group wiring together all printa commands."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from printa import __version__
from printa.logging_utils import configure_logging

from .common import exit_on_broken_pipe

if TYPE_CHECKING:
    from collections.abc import Iterable

CLI_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(context_settings=CLI_CONTEXT_SETTINGS)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (use -vv for debug)")
@click.option(
    "--log-level",
    type=click.Choice(["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"], case_sensitive=False),
    help="Set log level explicitly",
)
@click.version_option(__version__, "-V", "--version")
def cli(verbose: int, log_level: str | None) -> None:
    """List a project's structure and print the contents of its files.

    If no COMMAND is given, this behaves like: printa scan PROJECT
    """
    configure_logging(verbose=verbose, log_level=log_level)


# Import subcommands and register them
from .completions import completions  # noqa: E402
from .explain import explain  # noqa: E402
from .init import init  # noqa: E402
from .scan import scan  # noqa: E402
from .version import version  # noqa: E402

cli.add_command(scan)
cli.add_command(explain)
cli.add_command(init)
cli.add_command(version)
cli.add_command(completions)

# Flags handled by the root command itself; encountering them means we should
# not inject the default ``scan`` subcommand.
_HELP_FLAGS = {"-h", "--help", "-V", "--version"}


def _is_verbose_flag(flag: str) -> bool:
    """Return ``True`` if the token is a root-level verbosity flag."""
    if flag == "--verbose":
        return True
    stripped = flag.lstrip("-")
    return flag.startswith("-") and not flag.startswith("--") and bool(stripped) and set(stripped) == {"v"}


def _log_level_skip(flag: str) -> int:
    """Return how many tokens a log-level flag consumes."""
    if flag == "--log-level":
        return 2
    if flag.startswith("--log-level="):
        return 1
    return 0


def inject_default_scan(args: list[str], *, commands: Iterable[str]) -> list[str]:
    """Insert ``scan`` after the root options when no command is named.

    ``printa -v -e ts ./proj`` becomes ``printa -v scan -e ts ./proj``.
    """
    normalized = list(args)
    command_names = set(commands)

    idx = 0
    while idx < len(normalized):
        current = normalized[idx]
        if current in _HELP_FLAGS or current in command_names:
            return normalized
        if _is_verbose_flag(current):
            idx += 1
            continue
        skip = _log_level_skip(current)
        if skip:
            idx += skip
            continue
        break

    if idx >= len(normalized):
        return normalized
    normalized.insert(idx, "scan")
    return normalized


def main(argv: list[str] | None = None) -> None:
    """Console entry point: run the group with ``scan`` as the default command."""
    argv = list(sys.argv[1:] if argv is None else argv)
    argv = inject_default_scan(argv, commands=cli.commands)
    try:
        cli.main(args=argv, prog_name="printa")
    except BrokenPipeError:
        exit_on_broken_pipe()
