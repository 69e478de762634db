import json
import subprocess
from unittest import mock

import pytest
from blessed.keyboard import Keystroke

from crateinspect.app import App
from crateinspect.errors import (
    CargoTomlNotFoundError,
    IOFailure,
    ParseMetadataError,
    RunCargoMetadataError,
)
from crateinspect.screen import DisplayMode
from crateinspect.state import Metadata, OrderBy

DOC_URL = "https://docs.example.com/a"


def _write_crate(tmp_path, stem, size):
    manifest_dir = tmp_path / "src" / stem
    manifest_dir.mkdir(parents=True)
    cache = tmp_path / "cache"
    cache.mkdir(exist_ok=True)
    (cache / f"{stem}.crate").write_bytes(b"x" * size)
    return str(manifest_dir / "Cargo.toml")


def _project(tmp_path):
    (tmp_path / "Cargo.toml").write_text("[package]\nname = \"root\"\n")
    packages = [
        {"name": "root", "version": "0.1.0", "id": "root 0.1.0",
         "manifest_path": str(tmp_path / "Cargo.toml")},
        {"name": "a", "version": "1.0.0", "id": "a 1.0.0", "documentation": DOC_URL,
         "manifest_path": _write_crate(tmp_path, "a-1.0.0", 300)},
        {"name": "b", "version": "2.0.0", "id": "b 2.0.0",
         "manifest_path": _write_crate(tmp_path, "b-2.0.0", 100)},
        {"name": "c", "version": "0.5.0", "id": "c 0.5.0",
         "manifest_path": _write_crate(tmp_path, "c-0.5.0", 50)},
    ]
    nodes = [
        {"id": "root 0.1.0", "dependencies": ["a 1.0.0", "b 2.0.0"]},
        {"id": "a 1.0.0", "dependencies": ["c 0.5.0"]},
        {"id": "b 2.0.0", "dependencies": []},
        {"id": "c 0.5.0", "dependencies": []},
    ]
    return {
        "packages": packages,
        "resolve": {"nodes": nodes},
        "workspace_default_members": ["root 0.1.0"],
    }


def _completed(stdout):
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr=b"")


@pytest.fixture
def loaded(tmp_path):
    document = _project(tmp_path)
    with mock.patch("subprocess.run", return_value=_completed(json.dumps(document).encode())):
        app, errors = App.load(tmp_path)
    assert errors == []
    return app


def names(packages):
    return [package.name for package in packages]


def test_load_builds_tables(loaded):
    assert names(loaded.state.selected_package) == ["root"]
    assert names(loaded.state.level1_deps) == ["a", "b"]
    assert names(loaded.state.level2_deps) == ["c"]
    assert [dep.size for dep in loaded.state.level1_deps] == [300, 100]


def test_load_reports_loading_message(tmp_path):
    document = _project(tmp_path)
    messages = []
    with mock.patch("subprocess.run", return_value=_completed(json.dumps(document).encode())):
        App.load(tmp_path, messages.append)
    assert messages == ["Loading..."]


def test_load_records_loading_failure(tmp_path):
    document = _project(tmp_path)

    def failing(message):
        raise OSError("broken terminal")

    with mock.patch("subprocess.run", return_value=_completed(json.dumps(document).encode())):
        app, errors = App.load(tmp_path, failing)
    assert len(errors) == 1 and isinstance(errors[0], IOFailure)
    assert names(app.state.level1_deps) == ["a", "b"]


def test_load_without_manifest(tmp_path):
    app, errors = App.load(tmp_path)
    assert len(errors) == 1 and isinstance(errors[0], CargoTomlNotFoundError)
    assert app.state.selected_package == []


def test_load_when_cargo_missing(tmp_path):
    (tmp_path / "Cargo.toml").write_text("")
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("cargo")):
        app, errors = App.load(tmp_path)
    assert len(errors) == 1 and isinstance(errors[0], RunCargoMetadataError)
    assert app.state.level1_deps == []


def test_load_with_bad_json(tmp_path):
    (tmp_path / "Cargo.toml").write_text("")
    with mock.patch("subprocess.run", return_value=_completed(b"not json")):
        app, errors = App.load(tmp_path)
    assert len(errors) == 1 and isinstance(errors[0], ParseMetadataError)
    assert app.state.selected_package == [Metadata()]
    assert app.state.level1_deps == []


def test_down_and_up(loaded):
    loaded.update("j")
    assert loaded.state.selected_index == 1
    assert loaded.state.level2_deps == []
    loaded.update("j")
    assert loaded.state.selected_index == 1
    loaded.update("k")
    assert loaded.state.selected_index == 0
    loaded.update("k")
    assert loaded.state.selected_index == 0
    assert names(loaded.state.level2_deps) == ["c"]


def test_right_then_left(loaded):
    loaded.update("l")
    assert names(loaded.state.selected_package) == ["root", "a"]
    assert names(loaded.state.level1_deps) == ["c"]
    assert loaded.state.level2_deps == []
    loaded.update(Keystroke("\x1b[D", code=260, name="KEY_LEFT"))
    assert names(loaded.state.selected_package) == ["root"]
    assert names(loaded.state.level1_deps) == ["a", "b"]
    assert loaded.state.selected_index == 0


def test_right_without_children_does_nothing(loaded):
    loaded.update("j")
    loaded.update("l")
    assert names(loaded.state.selected_package) == ["root"]


def test_left_at_root_does_nothing(loaded):
    loaded.update(Keystroke("\x1b[D", code=260, name="KEY_LEFT"))
    assert names(loaded.state.selected_package) == ["root"]
    assert names(loaded.state.level1_deps) == ["a", "b"]


def test_all_and_direct_modes(loaded):
    loaded.update("a")
    assert loaded.state.is_direct is False
    assert names(loaded.state.level1_deps) == ["a", "b", "c"]
    loaded.update("d")
    assert loaded.state.is_direct is True
    assert names(loaded.state.level1_deps) == ["a", "b"]


def test_sort_by_name_and_reverse(loaded):
    loaded.update("s")
    assert loaded.screen.mode is DisplayMode.SORT
    loaded.update("n")
    assert loaded.screen.mode is DisplayMode.VIEW
    assert loaded.state.order is OrderBy.NAME
    assert names(loaded.state.level1_deps) == ["b", "a"]
    loaded.update("s")
    loaded.update("r")
    assert loaded.state.sorting_asc is True
    assert names(loaded.state.level1_deps) == ["a", "b"]


def test_sort_escape_keeps_order(loaded):
    loaded.update("s")
    loaded.update("\x1b")
    assert loaded.screen.mode is DisplayMode.VIEW
    assert loaded.state.order is OrderBy.SIZE


def test_filter_typing_and_clear(loaded):
    loaded.update("/")
    assert loaded.screen.mode is DisplayMode.FILTER
    loaded.update("b")
    assert loaded.state.filter_input == "b"
    assert names(loaded.state.filter_deps()) == ["b"]
    loaded.update("\n")
    assert loaded.screen.mode is DisplayMode.VIEW
    loaded.update("c")
    assert loaded.state.filter_input == ""
    assert names(loaded.state.filter_deps()) == ["a", "b"]


def test_help_mode(loaded):
    loaded.update("h")
    assert loaded.screen.mode is DisplayMode.HELP
    loaded.update("x")
    assert loaded.screen.mode is DisplayMode.HELP
    loaded.update("c")
    assert loaded.screen.mode is DisplayMode.VIEW


def test_enter_opens_documentation(loaded):
    opened = []
    loaded.opener = lambda url: opened.append(url) or True
    loaded.update("\r")
    assert opened == [DOC_URL]
    loaded.update("j")
    loaded.update("\r")
    assert opened == [DOC_URL]


def test_draw_fills_height(loaded):
    lines = loaded.draw(None, 120, 30)
    assert len(lines) == 30
    assert all(len(line) == 120 for line in lines)
    assert any("root" in line for line in lines)