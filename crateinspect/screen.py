"""Layout and drawing of the inspector's terminal screen."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from itertools import groupby
from typing import Any, Callable, Iterable, Sequence

from .state import DataState, Metadata
from .styles import UiStyles

Style = Callable[[str], str]
Segment = tuple[str, Style]

# Leaves text unstyled.
_plain: Style = str


class DisplayMode(enum.Enum):
    """What the screen is currently showing on top of the main view."""

    VIEW = "view"
    FILTER = "filter"
    HELP = "help"
    SORT = "sort"


def format_size(size: int) -> str:
    """Human readable size, dividing by 1024 up to gigabytes."""
    unit = "B"
    for next_unit in ("KB", "MB", "GB"):
        if size < 1024:
            break
        size //= 1024
        unit = next_unit
    return f"{size} {unit}"


_PARTIAL_BLOCKS = {1: "▏", 2: "▎", 3: "▍", 4: "▌", 5: "▋", 6: "▊", 7: "▉"}


def create_bar_chart(percentage: float) -> str:
    """A bar of Unicode block characters, one full block per ten percent."""
    if math.isnan(percentage) or math.isinf(percentage) or percentage < 1.0:
        return ""
    bars = "█" * math.floor(percentage / 10.0)
    partial = (percentage % 10.0) / 10.0
    if partial > 0.0:
        eighths = math.floor(partial * 8.0 + 0.5)
        bars += _PARTIAL_BLOCKS.get(eighths, "█")
    return bars


def get_percentage(size: int, total: int) -> tuple[float, str]:
    """Share of the total as a percentage, with its bar chart."""
    if total == 0:
        percentage = math.nan if size == 0 else math.inf
    else:
        percentage = size / total * 100.0
    return percentage, create_bar_chart(percentage)


@dataclass
class FilterInput:
    """A single-line text field holding the filter text."""

    text: str = ""
    cursor: int = 0

    def input(self, key: Any) -> None:
        """Apply one key press: printable text, backspace, delete or movement."""
        name = getattr(key, "name", None)
        if name == "KEY_BACKSPACE" or (name is None and key in ("\x7f", "\x08")):
            if self.cursor > 0:
                self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
                self.cursor -= 1
        elif name == "KEY_DELETE":
            self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]
        elif name == "KEY_LEFT":
            self.cursor = max(0, self.cursor - 1)
        elif name == "KEY_RIGHT":
            self.cursor = min(len(self.text), self.cursor + 1)
        elif name == "KEY_HOME":
            self.cursor = 0
        elif name == "KEY_END":
            self.cursor = len(self.text)
        elif not getattr(key, "is_sequence", False):
            char = str(key)
            if len(char) == 1 and char.isprintable():
                self.text = self.text[: self.cursor] + char + self.text[self.cursor :]
                self.cursor += 1

    def clear(self) -> None:
        """Empty the field."""
        self.text = ""
        self.cursor = 0


class _Canvas:
    """A grid of styled characters that turns into terminal lines."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._cells: list[list[tuple[str, Style]]] = [
            [(" ", _plain)] * self.width for _ in range(self.height)
        ]

    def put(self, x: int, y: int, text: str, style: Style = _plain, limit: int | None = None) -> int:
        if limit is not None:
            text = text[: max(0, limit)]
        if 0 <= y < self.height:
            row = self._cells[y]
            for offset, char in enumerate(text):
                column = x + offset
                if 0 <= column < self.width:
                    row[column] = (char, style)
        return len(text)

    def put_segments(self, x: int, y: int, segments: Sequence[Segment], limit: int) -> None:
        for text, style in segments:
            if limit <= 0:
                break
            written = self.put(x, y, text, style, limit)
            x += written
            limit -= written

    def clear(self, x: int, y: int, width: int, height: int) -> None:
        for row in range(y, y + height):
            self.put(x, row, " " * width)

    def box(
        self,
        x: int,
        y: int,
        width: int,
        height: int,
        title: Sequence[Segment] = (),
        bottom: Sequence[Segment] = (),
        bottom_right: bool = False,
    ) -> None:
        if width < 2 or height < 2:
            return
        self.put(x, y, "┌" + "─" * (width - 2) + "┐")
        for row in range(y + 1, y + height - 1):
            self.put(x, row, "│")
            self.put(x + width - 1, row, "│")
        self.put(x, y + height - 1, "└" + "─" * (width - 2) + "┘")
        inner = width - 2
        self.put_segments(x + 1, y, title, inner)
        if bottom:
            length = sum(len(text) for text, _ in bottom)
            start = x + 1 + max(0, inner - length) if bottom_right else x + 1
            self.put_segments(start, y + height - 1, bottom, inner)

    def table(
        self,
        x: int,
        y: int,
        widths: Sequence[int],
        rows: Iterable[Sequence[Segment]],
        max_rows: int,
        spacing: int = 1,
    ) -> None:
        for row_number, cells in enumerate(rows):
            if row_number >= max_rows:
                break
            column = x
            for width, (text, style) in zip(widths, cells):
                self.put(column, y + row_number, text, style, width)
                column += width + spacing

    def lines(self) -> list[str]:
        rendered = []
        for row in self._cells:
            parts = []
            for _, run in groupby(row, key=lambda cell: id(cell[1])):
                cells = list(run)
                parts.append(cells[0][1]("".join(char for char, _ in cells)))
            rendered.append("".join(parts))
        return rendered


def _percent_widths(total: int, percents: Sequence[int], spacing: int = 1) -> list[int]:
    available = max(0, total - spacing * (len(percents) - 1))
    return [available * percent // 100 for percent in percents]


_SORT_CONTENTS = (
    ("S", "Sort by size"),
    ("N", "Sort by name"),
    ("V", "Sort by version"),
    ("R", "Reverse sorting"),
)


@dataclass
class Screen:
    """The screen's mode, filter field, scroll position and styles."""

    styles: UiStyles = field(default_factory=UiStyles)
    mode: DisplayMode = DisplayMode.VIEW
    viewport_start: int = 0
    filter_area: FilterInput = field(default_factory=FilterInput)

    def clear_filter(self, state: DataState) -> None:
        """Empty the filter field and the state's filter."""
        state.selected_index = 0
        self.filter_area.clear()
        state.filter_input = ""

    def apply_filter(self, state: DataState) -> None:
        """Copy the filter field into the state and select the first row."""
        state.selected_index = 0
        state.filter_input = self.filter_area.text

    def stats_lines(self, state: DataState) -> list[tuple[str, ...]]:
        """Rows of the statistics table for the current package."""
        if not state.selected_package:
            return [("Error",)]
        current = state.selected_package[-1]
        filtered = state.filter_deps()
        total_size = sum(dep.size for dep in filtered)
        return [
            ("Crate:", f"{current.name:<5}", "Version:", f"v{current.version:<5}"),
            ("License:", f"{current.license:<5}", "Description:", f"{current.description:<5}"),
            ("Total count:", f"{len(filtered)!s:<5}", "Total size:", f"{format_size(total_size):<5}"),
        ]

    def render(self, term: Any, width: int, height: int, state: DataState) -> list[str]:
        """Draw the whole screen into ``height`` lines of ``width`` cells."""
        canvas = _Canvas(width, height)
        highlight: Style = getattr(term, "bright_red", _plain) if term is not None else _plain
        self._render_main(canvas, state, highlight)
        if self.mode is DisplayMode.HELP:
            self._render_help(canvas)
        elif self.mode is DisplayMode.SORT:
            self._render_sort(canvas)
        return canvas.lines()

    def _render_main(self, canvas: _Canvas, state: DataState, highlight: Style) -> None:
        width, height = canvas.width, canvas.height
        stats_height = min(5, height)
        filter_height = min(3, height - stats_height)
        table_y = stats_height + filter_height
        table_height = height - table_y

        self._render_stats(canvas, state, width, stats_height)

        left_width = width * 65 // 100
        right_width = width - left_width
        self._render_description(canvas, state, stats_height, left_width, filter_height)
        self._render_filter(canvas, left_width, stats_height, right_width, filter_height)

        visible_rows = max(0, table_height - 3)
        if state.selected_index < self.viewport_start:
            self.viewport_start = state.selected_index
        elif state.selected_index >= self.viewport_start + visible_rows:
            self.viewport_start += 1

        mode_label = "Direct" if state.is_direct else "All"
        self._render_level1(
            canvas, state, table_y, left_width, table_height, visible_rows, mode_label, highlight
        )
        self._render_level2(
            canvas, state, left_width, table_y, right_width, table_height, visible_rows,
            mode_label, highlight,
        )

    def _render_stats(self, canvas: _Canvas, state: DataState, width: int, height: int) -> None:
        s = self.styles
        if state.selected_package:
            path = "/".join(dep.name for dep in state.selected_package)
            title: list[Segment] = [("Statistics at ", s.text_style), (path, s.title_style)]
        else:
            title = [("Statistics", _plain)]
        canvas.box(0, 0, width, height, title)
        inner = max(0, width - 2)
        widths = [20, 20, 20, max(0, inner - 63)]
        rows = [
            [
                (text, s.title_style if (row_number, column) == (0, 1) else s.text_style)
                for column, text in enumerate(cells)
            ]
            for row_number, cells in enumerate(self.stats_lines(state))
        ]
        canvas.table(1, 1, widths, rows, max(0, height - 2))

    def _render_description(
        self, canvas: _Canvas, state: DataState, y: int, width: int, height: int
    ) -> None:
        selected = state.selected_dep()
        title: list[Segment] = [("Description of ", _plain), (selected.name, _plain)]
        canvas.box(0, y, width, height, title)
        if height > 2:
            first_line = selected.description.splitlines()[0] if selected.description else ""
            canvas.put(1, y + 1, first_line, self.styles.subtitle_style, width - 2)

    def _render_filter(self, canvas: _Canvas, x: int, y: int, width: int, height: int) -> None:
        s = self.styles
        canvas.box(
            x, y, width, height,
            [("F", s.hotkey_style), ("ilter", s.text_style)],
            [("C", s.hotkey_style), ("lear filter", s.text_style)],
            bottom_right=True,
        )
        if height > 2:
            canvas.put(x + 1, y + 1, self.filter_area.text, s.input_style, width - 2)

    def _render_level1(
        self, canvas: _Canvas, state: DataState, y: int, width: int, height: int,
        visible_rows: int, mode_label: str, highlight: Style,
    ) -> None:
        s = self.styles
        current_name = state.selected_package[-1].name if state.selected_package else ""
        title: list[Segment] = [
            (mode_label, highlight), (" dependencies of ", _plain), (current_name, _plain)
        ]
        instructions: list[Segment] = []
        for key, label in (
            ("A", ": All──"), ("D", ": Direct──"), ("▼", ": Down──"), ("▲", ": Up──"),
            ("►", ": Right──"), ("◄", ": Left──"), ("↵", ": Open doc─"),
        ):
            instructions += [(key, s.hotkey_style), (label, s.text_style)]
        canvas.box(0, y, width, height, title, instructions)

        widths = _percent_widths(max(0, width - 2), (10, 30, 10, 10, 15, 15))
        header = ["Index", "Name", "Version", "Size", "Percentage", ""]
        rows: list[list[Segment]] = [[(text, _plain) for text in header]]
        filtered = state.filter_deps()
        total_size = sum(dep.size for dep in filtered)
        shown = filtered[self.viewport_start : self.viewport_start + visible_rows]
        for index, dep in enumerate(shown, start=self.viewport_start):
            rows.append(self._level1_row(index, dep, total_size, index == state.selected_index))
        canvas.table(1, y + 1, widths, rows, max(0, height - 2))

    def _level1_row(
        self, index: int, dep: Metadata, total_size: int, selected: bool
    ) -> list[Segment]:
        s = self.styles
        percentage, bar = get_percentage(dep.size, total_size)
        cells: list[Segment] = [
            (str(index + 1), s.unselected_style),
            (dep.name, s.link_style if dep.documentation else s.text_style),
            (dep.version, s.unselected_style),
            (format_size(dep.size), s.unselected_style),
            (f"{percentage:>7.2f}%", s.unselected_style),
            (bar, s.bar_chart_style),
        ]
        if selected:
            cells = [(text, s.selected_style) for text, _ in cells]
        return cells

    def _render_level2(
        self, canvas: _Canvas, state: DataState, x: int, y: int, width: int, height: int,
        visible_rows: int, mode_label: str, highlight: Style,
    ) -> None:
        s = self.styles
        title: list[Segment] = [
            (mode_label, highlight),
            (" dependencies of ", _plain),
            (state.selected_dep().name, _plain),
        ]
        instructions: list[Segment] = [
            ("S", s.hotkey_style), ("orting──", s.subtitle_style),
            ("H", s.hotkey_style), ("elp──", s.subtitle_style),
            ("Q", s.hotkey_style), ("uit", s.subtitle_style),
        ]
        canvas.box(x, y, width, height, title, instructions, bottom_right=True)
        widths = _percent_widths(max(0, width - 2), (40, 30, 30))
        rows: list[list[Segment]] = [
            [(text, s.subtitle_style) for text in ("Name", "Version", "Size")]
        ]
        shown = state.level2_deps[self.viewport_start : self.viewport_start + visible_rows]
        rows += [
            [(text, s.subtitle_style) for text in (dep.name, dep.version, format_size(dep.size))]
            for dep in shown
        ]
        canvas.table(x + 1, y + 1, widths, rows, max(0, height - 2))

    def _render_help(self, canvas: _Canvas) -> None:
        s = self.styles
        height = min(10, canvas.height)
        width = min(64, canvas.width)
        x = (canvas.width - width) // 2
        y = (canvas.height - height) // 2
        canvas.clear(x, y, width, height)
        canvas.box(
            x, y, width, height,
            [("Filter Syntax", s.help_style)],
            [("C", s.hotkey_style), ("lose", s.text_style)],
            bottom_right=True,
        )
        rows = [
            [("/ or F", s.help_style), ("Enter the filter text box.", s.text_style)],
            [("⏎ or Esc", s.help_style), ("Exit the filter text box", s.text_style)],
        ]
        canvas.table(x + 1, y + 1, [9, max(0, width - 12)], rows, max(0, height - 2))

    def _render_sort(self, canvas: _Canvas) -> None:
        s = self.styles
        height = min(len(_SORT_CONTENTS) + 2, canvas.height)
        width = min(max(len(desc) for _, desc in _SORT_CONTENTS) + 5, canvas.width)
        x = max(0, canvas.width - 1 - width)
        y = max(0, canvas.height - 1 - height)
        canvas.clear(x, y, width, height)
        canvas.box(x, y, width, height)
        rows = [[(key, s.hotkey_style), (desc, s.text_style)] for key, desc in _SORT_CONTENTS]
        canvas.table(x + 1, y + 1, [2, max(0, width - 5)], rows, max(0, height - 2))