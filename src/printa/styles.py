"""Colour resolution: semantic role name -> rich style.

The palette is resolved once from the ``colors`` table and handed to the
renderer and the content emitter; nothing reads ambient styling state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rich.console import COLOR_SYSTEMS
from rich.errors import StyleSyntaxError
from rich.style import Style
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

FALLBACK_COLOR = "yellow"

# Names accepted by older configs that rich spells differently.
_COLOR_ALIASES = {
    "gray": "bright_black",
    "grey": "bright_black",
}
_BRIGHT_SUFFIX = re.compile(r"^(?P<base>[a-z]+)Bright$")


def normalize_color_name(name: str) -> str:
    """Translate chalk-style names (``redBright``, ``gray``) into rich names."""
    stripped = name.strip()
    if (m := _BRIGHT_SUFFIX.match(stripped)) is not None:
        return f"bright_{m['base']}"
    return _COLOR_ALIASES.get(stripped.lower(), stripped)


def parse_style(name: str, *, fallback: str = FALLBACK_COLOR) -> Style:
    """Parse ``name`` as a rich style, falling back to ``fallback`` when it is not one."""
    try:
        return Style.parse(normalize_color_name(name))
    except StyleSyntaxError:
        return Style.parse(fallback)


@dataclass(frozen=True, slots=True)
class Palette:
    """Immutable lookup table from semantic role to style."""

    styles: Mapping[str, Style] = field(default_factory=dict)
    enabled: bool = True

    @classmethod
    def from_colors(cls, colors: Mapping[str, str], *, enabled: bool) -> Palette:
        if not enabled:
            return cls(styles={}, enabled=False)
        return cls(styles={role: parse_style(name) for role, name in colors.items()}, enabled=True)

    def style(self, role: str) -> Style:
        """Return the style for ``role``; unknown roles get the fallback colour."""
        if not self.enabled:
            return Style.null()
        return self.styles.get(role) or Style.parse(FALLBACK_COLOR)

    def styler(self, role: str) -> Callable[[str], Text]:
        """Return a function that renders plain text in ``role``'s style."""
        style = self.style(role)
        return lambda text: Text(text, style=style)

    def paint(self, role: str, text: str) -> Text:
        return self.styler(role)(text)

    def ansi(self, role: str, text: str, *, color_system: str | None) -> str:
        """Return ``text`` wrapped in the escape codes of ``role`` for ``color_system``.

        Used for raw content that must not pass through :class:`rich.text.Text`.
        """
        system = COLOR_SYSTEMS.get(color_system) if color_system else None
        return self.style(role).render(text, color_system=system)
