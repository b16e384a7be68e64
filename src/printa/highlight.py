"""Syntax highlighting for file contents.

Highlighting picks a Pygments lexer from the file name and raises
:class:`HighlightError` when none applies; callers fall back to plain output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

if TYPE_CHECKING:
    from pathlib import Path

_FORMATTER = TerminalFormatter()


class HighlightError(Exception):
    """Raised when a file's contents cannot be highlighted."""


def highlight_source(source: str, path: Path) -> str:
    """Return ``source`` as an ANSI string for the language implied by ``path``.

    Leading and trailing blank lines and tabs are kept. Pygments always
    normalises ``\\r\\n`` to ``\\n``; plain output keeps line endings as they are.
    """
    try:
        lexer = get_lexer_for_filename(path.name, source, stripnl=False)
    except ClassNotFound as err:
        msg = f"no lexer for {path.name}"
        raise HighlightError(msg) from err
    return highlight(source, lexer, _FORMATTER)
