"""Terminal styles shared by every part of the screen."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable

Style = Callable[[str], str]

# Leaves text unstyled.
_plain: Style = str


# Blessed compound formatter for each style; an empty spec leaves text as is.
_SPECS = {
    "title_style": "bold_bright_green",
    "subtitle_style": "italic_bright_blue",
    "hotkey_style": "bold_underline_cyan",
    "text_style": "bright_white",
    "selected_style": "bold_on_bright_blue",
    "input_style": "italic",
    "link_style": "cyan",
    "bar_chart_style": "white",
    "unselected_style": "",
    "help_style": "italic_bright_yellow",
}


@dataclass(frozen=True)
class UiStyles:
    """Styles for a consistent looking interface; each wraps text in a style."""

    title_style: Style = _plain
    subtitle_style: Style = _plain
    hotkey_style: Style = _plain
    text_style: Style = _plain
    selected_style: Style = _plain
    input_style: Style = _plain
    link_style: Style = _plain
    bar_chart_style: Style = _plain
    unselected_style: Style = _plain
    help_style: Style = _plain

    @classmethod
    def for_terminal(cls, term: Any) -> "UiStyles":
        """Build the styles from a blessed terminal's formatters."""
        resolved = {}
        for item in fields(cls):
            spec = _SPECS[item.name]
            resolved[item.name] = getattr(term, spec) if spec else _plain
        return cls(**resolved)