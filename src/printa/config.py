"""Loading, layering, and resolving configuration.

Layers are partial records merged in order (low -> high):
  1. bundled defaults
  2. XDG config: $XDG_CONFIG_HOME/printa/config.toml (or ~/.config/printa/config.toml)
  3. <project>/.printa.toml
  4. [tool.printa] in <project>/pyproject.toml
  5. $PRINTA_CONFIG_PATH (if set)
  6. explicit --config file
  7. options given on the command line

How a later layer combines with an earlier one depends on the field, see
``FIELD_POLICIES``.
"""

from __future__ import annotations

import importlib.resources
import os
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .constants import (
    CONFIG_COLOR,
    CONFIG_COLORS,
    CONFIG_CONTENTS_ONLY,
    CONFIG_DEPTH,
    CONFIG_EXTENSIONS,
    CONFIG_GITIGNORE,
    CONFIG_IGNORE,
    CONFIG_SHOW_HIDDEN,
    CONFIG_STRUCTURE_ONLY,
    CONFIG_SYMBOLS,
)
from .errors import ConfigLoadError
from .logging_utils import StructuredLogEvent, get_logger, log_event

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = get_logger(__name__)

TOML_CONFIG = ".printa.toml"
PYPROJECT = "pyproject.toml"
ENV_CONFIG_PATH = "PRINTA_CONFIG_PATH"
DEFAULT_CONFIG_RESOURCE = "default_config.toml"


class MergePolicy(Enum):
    """How a later layer's value combines with the accumulated one."""

    REPLACE = "replace"
    MERGE_TABLE = "merge-table"
    CONCAT = "concat"


FIELD_POLICIES: dict[str, MergePolicy] = {
    CONFIG_DEPTH: MergePolicy.REPLACE,
    CONFIG_COLOR: MergePolicy.REPLACE,
    CONFIG_GITIGNORE: MergePolicy.REPLACE,
    CONFIG_SHOW_HIDDEN: MergePolicy.REPLACE,
    CONFIG_STRUCTURE_ONLY: MergePolicy.REPLACE,
    CONFIG_CONTENTS_ONLY: MergePolicy.REPLACE,
    CONFIG_COLORS: MergePolicy.MERGE_TABLE,
    CONFIG_SYMBOLS: MergePolicy.MERGE_TABLE,
    CONFIG_IGNORE: MergePolicy.CONCAT,
    CONFIG_EXTENSIONS: MergePolicy.CONCAT,
}


@dataclass(frozen=True, slots=True)
class ConfigLayer:
    """A partial configuration record and where it came from."""

    source: str
    values: Mapping[str, Any]


def _dedupe_keep_last(items: Iterable[Any]) -> list[Any]:
    """Drop repeats, keeping each item at its last position.

    For ordered ignore rules the last occurrence is the one that decides, so
    dropping earlier copies never changes what a list matches.
    """
    kept: list[Any] = []
    for item in reversed(list(items)):
        if item not in kept:
            kept.append(item)
    kept.reverse()
    return kept


def merge_values(key: str, current: Any, incoming: Any) -> Any:
    """Combine one field according to its policy; unknown keys are replaced."""
    policy = FIELD_POLICIES.get(key, MergePolicy.REPLACE)
    if policy is MergePolicy.CONCAT and isinstance(incoming, list):
        if current is None:
            current = []
        elif not isinstance(current, list):
            current = [current]
        return _dedupe_keep_last([*current, *incoming])
    if current is None or policy is MergePolicy.REPLACE:
        return incoming
    if policy is MergePolicy.MERGE_TABLE and isinstance(current, dict) and isinstance(incoming, dict):
        return {**current, **incoming}
    return incoming


def merge_layers(layers: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Merge partial records in order, later layers taking precedence per field policy."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            merged[key] = merge_values(key, merged.get(key), value)
    return merged


# --------------------------------------------------------------------------- #
# Loading                                                                     #
# --------------------------------------------------------------------------- #


def _plain(value: Any) -> Any:
    """Convert tomlkit containers into plain dicts/lists."""
    unwrap = getattr(value, "unwrap", None)
    return unwrap() if callable(unwrap) else value


def load_default_config_text() -> str:
    """Return the bundled default configuration text, formatting preserved."""
    try:
        cfg_path = importlib.resources.files("printa.resources").joinpath(DEFAULT_CONFIG_RESOURCE)
        with cfg_path.open("r", encoding="utf-8") as f:
            return f.read()
    except OSError as err:  # pragma: no cover - packaging error
        msg = f"Error loading default configuration: {err}"
        raise ConfigLoadError(msg) from err


def load_default_config() -> dict[str, Any]:
    """Return the bundled default configuration as a Python dict."""
    return tomllib.loads(load_default_config_text())


def write_default_config(target_dir: Path) -> Path:
    """Write the bundled default configuration into ``target_dir``."""
    toml_path = target_dir / TOML_CONFIG
    toml_path.write_text(load_default_config_text(), encoding="utf-8")
    return toml_path


def _parse_toml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        msg = f"Error reading {path}: {e}"
        raise ConfigLoadError(msg) from e
    try:
        return _plain(tomlkit.loads(raw))
    except TOMLKitError as e:
        msg = f"Error parsing {path.name}: {e}"
        raise ConfigLoadError(msg) from e


def _load_with_extends(path: Path, *, _visited: set[Path] | None = None) -> dict[str, Any]:
    """Load a TOML file supporting an optional ``extends`` key.

    Extended files are merged first; relative ``extends`` paths resolve
    against the parent of ``path``. Cycles are cut.
    """
    if _visited is None:
        _visited = set()
    real = path.resolve()
    if real in _visited:
        return {}
    _visited.add(real)

    data = _parse_toml(path)
    ext = data.pop("extends", None)
    if isinstance(ext, str):
        ext_list = [ext]
    elif isinstance(ext, list):
        ext_list = [e for e in ext if isinstance(e, str)]
    else:
        ext_list = []

    parents: list[dict[str, Any]] = []
    for entry in ext_list:
        ext_path = Path(entry)
        if not ext_path.is_absolute():
            ext_path = path.parent / ext_path
        if ext_path.exists():
            parents.append(_load_with_extends(ext_path, _visited=_visited))
    return merge_layers([*parents, data])


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file (supports ``extends``)."""
    return _load_with_extends(path)


def _xdg_config_path() -> Path:
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    xdg_dir = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return xdg_dir / "printa" / "config.toml"


def _pyproject_table(pyproject_path: Path) -> dict[str, Any] | None:
    if not pyproject_path.exists():
        return None
    data = _parse_toml(pyproject_path)
    tool = data.get("tool", {})
    if isinstance(tool, dict):
        table = tool.get("printa")
        if isinstance(table, dict):
            return table
    return None


def persisted_layers(*, base_path: Path, explicit_config: Path | None = None) -> list[ConfigLayer]:
    """Return the file-based layers that exist for ``base_path``, lowest first."""
    layers: list[ConfigLayer] = []
    for p in (_xdg_config_path(), base_path / TOML_CONFIG):
        if p.is_file():
            layers.append(ConfigLayer(source=str(p), values=load_toml_config(p)))

    table = _pyproject_table(base_path / PYPROJECT)
    if table is not None:
        layers.append(ConfigLayer(source=f"{base_path / PYPROJECT}[tool.printa]", values=table))

    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        p = Path(env_path)
        if p.exists():
            layers.append(ConfigLayer(source=str(p), values=load_toml_config(p)))

    if explicit_config is not None:
        if not explicit_config.exists():
            msg = f"Explicit config file not found: {explicit_config}"
            raise ConfigLoadError(msg)
        layers.append(ConfigLayer(source=str(explicit_config), values=load_toml_config(explicit_config)))
    return layers


# --------------------------------------------------------------------------- #
# Resolution                                                                  #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class SymbolSet:
    """Connector glyphs used by the structure view."""

    vertical: str = "│"
    branch: str = "├──"
    end: str = "└──"
    space: str = "    "

    @property
    def vertical_filler(self) -> str:
        return f"{self.vertical}   "


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Resolved, read-only configuration for one invocation.

    ``structure_only`` and ``contents_only`` are independent; setting both
    renders nothing.
    """

    max_depth: int = 10
    extensions: tuple[str, ...] = ()
    ignore: tuple[str, ...] = ()
    color: bool = True
    gitignore: bool = True
    show_hidden: bool = False
    structure_only: bool = False
    contents_only: bool = False
    colors: dict[str, str] = field(default_factory=dict)
    symbols: SymbolSet = field(default_factory=SymbolSet)

    @property
    def show_structure(self) -> bool:
        return not self.contents_only

    @property
    def show_contents(self) -> bool:
        return not self.structure_only


def _expect_bool(data: Mapping[str, Any], key: str, default: bool) -> bool:  # noqa: FBT001
    value = data.get(key, default)
    if not isinstance(value, bool):
        msg = f"config value '{key}' must be true or false, got {value!r}"
        raise ConfigLoadError(msg)
    return value


def _expect_strings(data: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = data.get(key, [])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        msg = f"config value '{key}' must be a list of strings"
        raise ConfigLoadError(msg)
    return tuple(value)


def _expect_table(data: Mapping[str, Any], key: str) -> dict[str, str]:
    value = data.get(key, {})
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        msg = f"config table '{key}' must map names to strings"
        raise ConfigLoadError(msg)
    return {str(k): v for k, v in value.items()}


def resolve_render_config(data: Mapping[str, Any]) -> RenderConfig:
    """Validate a merged mapping and freeze it into a :class:`RenderConfig`."""
    depth = data.get(CONFIG_DEPTH, 10)
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
        msg = f"config value 'depth' must be a non-negative integer, got {depth!r}"
        raise ConfigLoadError(msg)

    symbols_table = _expect_table(data, CONFIG_SYMBOLS)
    known = set(SymbolSet.__dataclass_fields__)
    symbols = SymbolSet(**{k: v for k, v in symbols_table.items() if k in known})

    return RenderConfig(
        max_depth=depth,
        extensions=_expect_strings(data, CONFIG_EXTENSIONS),
        ignore=_expect_strings(data, CONFIG_IGNORE),
        color=_expect_bool(data, CONFIG_COLOR, True),
        gitignore=_expect_bool(data, CONFIG_GITIGNORE, True),
        show_hidden=_expect_bool(data, CONFIG_SHOW_HIDDEN, False),
        structure_only=_expect_bool(data, CONFIG_STRUCTURE_ONLY, False),
        contents_only=_expect_bool(data, CONFIG_CONTENTS_ONLY, False),
        colors=_expect_table(data, CONFIG_COLORS),
        symbols=symbols,
    )


def load_config(
    *,
    base_path: Path,
    explicit_config: Path | None = None,
    ignore_defaults: bool = False,
    cli_values: Mapping[str, Any] | None = None,
) -> RenderConfig:
    """Read every layer for ``base_path``, merge them, and resolve the result.

    ``ignore_defaults`` drops the bundled ignore patterns but keeps the other
    bundled values.
    """
    defaults = load_default_config()
    if ignore_defaults:
        defaults[CONFIG_IGNORE] = []

    layers: list[ConfigLayer] = [ConfigLayer(source="defaults", values=defaults)]
    layers.extend(persisted_layers(base_path=base_path, explicit_config=explicit_config))
    if cli_values:
        layers.append(ConfigLayer(source="command line", values=cli_values))

    log_event(
        logger,
        StructuredLogEvent(
            name="config.layers",
            message="merging configuration layers",
            context={"sources": [layer.source for layer in layers]},
        ),
    )
    return resolve_render_config(merge_layers(layer.values for layer in layers))

