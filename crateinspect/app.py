"""The inspector application: loading the package graph and reacting to keys."""

from __future__ import annotations

import os
import sys
import webbrowser
from dataclasses import dataclass, field
from typing import Any, Callable

from .errors import (
    CargoTomlNotFoundError,
    InspectorError,
    IOFailure,
    ParseMetadataError,
    RunCargoMetadataError,
)
from .metadata import parse_metadata, run_cargo_metadata
from .screen import DisplayMode, Screen
from .state import DataState, OrderBy

_NAMED_KEYS = {
    "KEY_LEFT": "left",
    "KEY_RIGHT": "right",
    "KEY_UP": "up",
    "KEY_DOWN": "down",
    "KEY_ENTER": "enter",
    "KEY_ESCAPE": "esc",
}

_PLAIN_KEYS = {"\n": "enter", "\r": "enter", "\x1b": "esc"}


def _key_code(key: Any) -> str:
    """A short name for a key press: a direction, enter, esc, or the character."""
    name = getattr(key, "name", None)
    if name:
        return _NAMED_KEYS.get(name, name)
    text = str(key)
    return _PLAIN_KEYS.get(text, text)


@dataclass
class App:
    """The data state and the screen that shows it."""

    state: DataState = field(default_factory=DataState)
    screen: Screen = field(default_factory=Screen)
    opener: Callable[[str], Any] = field(default=webbrowser.open, repr=False)

    @classmethod
    def load(
        cls,
        path: str | os.PathLike[str],
        on_loading: Callable[[str], Any] | None = None,
    ) -> tuple["App", list[InspectorError]]:
        """Read the project at ``path`` and return the app with any errors met."""
        errors: list[InspectorError] = []
        if on_loading is not None:
            try:
                on_loading("Loading...")
            except InspectorError as error:
                errors.append(error)
            except OSError as error:
                errors.append(IOFailure(error))

        try:
            document = run_cargo_metadata(path)
        except (CargoTomlNotFoundError, RunCargoMetadataError) as error:
            errors.append(error)
            return cls(), errors
        except ParseMetadataError as error:
            errors.append(error)
            document = None

        packages, root_id = parse_metadata(document)
        app = cls(state=DataState(deps_map=packages))
        root = app.state.metadata_for(root_id)
        app.state.selected_package = [root]
        app.state.level1_deps = app.state.deps_of(root)
        app._select_first_row()
        return app, errors

    def _select_first_row(self) -> None:
        self.state.selected_index = 0
        self.state.refresh_level2()

    def draw(self, term: Any, width: int, height: int) -> list[str]:
        """Render the screen as ``height`` terminal lines."""
        return self.screen.render(term, width, height, self.state)

    def update(self, key: Any) -> None:
        """React to one key press according to the current display mode."""
        code = _key_code(key)
        mode = self.screen.mode
        if mode is DisplayMode.VIEW:
            self._update_view(code)
        elif mode is DisplayMode.FILTER:
            if code in ("esc", "enter"):
                self.screen.mode = DisplayMode.VIEW
            else:
                self.screen.filter_area.input(key)
            self.screen.apply_filter(self.state)
        elif mode is DisplayMode.HELP:
            if code in ("esc", "c", "C"):
                self.screen.mode = DisplayMode.VIEW
        elif mode is DisplayMode.SORT:
            self._update_sort(code)

    def _update_view(self, code: str) -> None:
        state = self.state
        if code in ("a", "A"):
            if state.is_direct:
                state.is_direct = False
                state.switch_mode()
        elif code in ("d", "D"):
            if not state.is_direct:
                state.is_direct = True
                state.switch_mode()
        elif code in ("c", "C"):
            self.screen.clear_filter(state)
            self.screen.mode = DisplayMode.VIEW
        elif code == "left":
            if len(state.selected_package) > 1:
                self.screen.viewport_start = 0
                state.selected_package.pop()
                state.level2_deps = []
                state.level1_deps = state.deps_of(state.selected_package[-1])
                self._select_first_row()
        elif code in ("right", "l", "L"):
            if state.level2_deps:
                self.screen.viewport_start = 0
                state.selected_package.append(state.selected_dep())
                state.level1_deps = list(state.level2_deps)
                state.level2_deps = []
                self._select_first_row()
        elif code in ("up", "k", "K"):
            if state.selected_index > 0:
                state.selected_index -= 1
                state.refresh_level2()
        elif code in ("down", "j", "J"):
            if state.selected_index < len(state.filter_deps()) - 1:
                state.selected_index += 1
                state.refresh_level2()
        elif code == "enter":
            self._open_documentation()
        elif code in ("f", "F", "/"):
            self.screen.mode = DisplayMode.FILTER
        elif code in ("v", "V", "esc"):
            self.screen.mode = DisplayMode.VIEW
        elif code in ("h", "H"):
            self.screen.mode = DisplayMode.HELP
        elif code in ("s", "S"):
            self.screen.mode = DisplayMode.SORT

    def _open_documentation(self) -> None:
        index = self.state.selected_index
        if not 0 <= index < len(self.state.level1_deps):
            return
        url = self.state.level1_deps[index].documentation
        if not url:
            return
        try:
            opened = self.opener(url)
        except webbrowser.Error as error:
            print(f"Failed to open documentation: {error}", file=sys.stderr)
            return
        if opened is False:
            print(f"Failed to open documentation: {url}", file=sys.stderr)

    def _update_sort(self, code: str) -> None:
        orders = {
            "n": OrderBy.NAME,
            "s": OrderBy.SIZE,
            "v": OrderBy.VERSION,
        }
        lowered = code.lower() if len(code) == 1 else code
        if lowered in orders:
            self.state.order_by(orders[lowered])
            self.screen.mode = DisplayMode.VIEW
        elif lowered == "r":
            self.state.set_sorting(not self.state.sorting_asc)
            self.screen.mode = DisplayMode.VIEW
        elif code == "esc":
            self.screen.mode = DisplayMode.VIEW