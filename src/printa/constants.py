"""Project-wide constants and enums."""

from __future__ import annotations

from enum import StrEnum


class EntryKind(StrEnum):
    """Classification of a filesystem entry found during a walk."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


class RuleKind(StrEnum):
    """Shape of a compiled ignore rule."""

    NAME = "name"  # bare name, matches at any depth
    DIRECTORY = "directory"  # trailing slash, directories only
    GLOB = "glob"
    LITERAL = "literal"  # unparseable pattern, substring match


class RuleSource(StrEnum):
    """Where an ignore rule came from."""

    HIDDEN = "hidden"
    CONFIG = "config"
    GITIGNORE = "gitignore"


class OutputFormat(StrEnum):
    """Output formats for ``printa explain``."""

    HUMAN = "human"
    JSON = "json"


EXIT_USAGE = 2
EXIT_CONFIG = 3
EXIT_PATH = 4
EXIT_INTERRUPT = 130

SYMLINK_MARKER = " →"
GITIGNORE_FILE = ".gitignore"
HIDDEN_DIR_PATTERN = ".*/"

CONFIG_EXTENSIONS = "extensions"
CONFIG_IGNORE = "ignore"
CONFIG_DEPTH = "depth"
CONFIG_COLOR = "color"
CONFIG_GITIGNORE = "gitignore"
CONFIG_SHOW_HIDDEN = "show_hidden"
CONFIG_STRUCTURE_ONLY = "structure_only"
CONFIG_CONTENTS_ONLY = "contents_only"
CONFIG_COLORS = "colors"
CONFIG_SYMBOLS = "symbols"

# Semantic colour roles looked up in the ``colors`` table.
ROLE_DIRECTORY = "directory"
ROLE_FILE = "file"
ROLE_SYMLINK = "symlink"
ROLE_CONTENT = "content"
