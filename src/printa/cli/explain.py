"""CLI command implementation for the ``printa explain`` workflow."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from printa.config import load_config
from printa.constants import EXIT_CONFIG, EXIT_PATH, EntryKind, OutputFormat
from printa.core import matcher_for, validate_root
from printa.directory import classify
from printa.errors import ConfigLoadError, PathNotFoundError
from printa.utils import relative_posix

from .common import fail

if TYPE_CHECKING:
    from printa.ignore import IgnoreRule, PatternMatcher

EXPLAIN_EPILOG = """\
Examples:
  printa explain . node_modules
  printa explain --format json . src/app.ts .github
"""


def _rule_dict(rule: IgnoreRule | None) -> dict[str, Any] | None:
    if rule is None:
        return None
    return {
        "pattern": rule.raw,
        "kind": rule.kind.value,
        "negated": rule.negated,
        "source": rule.source.value,
    }


def explain_path(matcher: PatternMatcher, root: Path, target: Path) -> dict[str, Any]:
    """Describe how ``matcher`` treats ``target`` (absolute or relative to ``root``)."""
    abs_path = target.parent.resolve() / target.name if target.is_absolute() else root / target
    kind = classify(abs_path)
    rel = relative_posix(abs_path, root)
    is_dir = kind is EntryKind.DIRECTORY
    rule = matcher.explain(rel, is_dir=is_dir)
    return {
        "path": rel,
        "kind": kind.value,
        "exists": abs_path.exists() or abs_path.is_symlink(),
        "ignored": rule is not None and not rule.negated,
        "rule": _rule_dict(rule),
    }


def render_human(entries: list[dict[str, Any]]) -> str:
    lines: list[str] = []
    for entry in entries:
        status = "ignored" if entry["ignored"] else "kept"
        lines.append(f"{entry['path']} ({entry['kind']}): {status}")
        rule = entry["rule"]
        if rule is not None:
            neg = " negated" if rule["negated"] else ""
            lines.append(f"  rule: {rule['pattern']!r} [{rule['kind']}{neg}, from {rule['source']}]")
        if not entry["exists"]:
            lines.append("  note: path does not exist")
    return "\n".join(lines)


@click.command(epilog=EXPLAIN_EPILOG)
@click.argument("project", type=click.Path(path_type=Path))
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Explicit config file path")
@click.option("--ignore-defaults", "-I", is_flag=True, help="Drop the bundled default ignore patterns")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="Output format",
)
def explain(
    *,
    project: Path,
    paths: tuple[Path, ...],
    config_path: Path | None,
    ignore_defaults: bool,
    fmt: str,
) -> None:
    """Show which ignore rule, if any, decides each of PATHS inside PROJECT."""
    try:
        config = load_config(base_path=project, explicit_config=config_path, ignore_defaults=ignore_defaults)
        root = validate_root(project)
    except ConfigLoadError as err:
        fail(str(err), EXIT_CONFIG)
    except PathNotFoundError as err:
        fail(str(err), EXIT_PATH)

    matcher, _ = matcher_for(root, config)
    entries = [explain_path(matcher, root, p) for p in paths]
    if OutputFormat(fmt.lower()) is OutputFormat.JSON:
        click.echo(json.dumps(entries, indent=2, sort_keys=True))
    else:
        click.echo(render_human(entries))
