import pytest

from crateinspect.state import DataState, Metadata, OrderBy, sort_packages


def _graph() -> dict[str, Metadata]:
    return {
        "a": Metadata(name="alpha", version="1.0.0", size=5, dependencies=["b", "c"]),
        "b": Metadata(name="beta", version="0.2.0", size=30, dependencies=["d"]),
        "c": Metadata(name="gamma", version="0.9.0", size=10, dependencies=["d"]),
        "d": Metadata(name="delta", version="0.1.0", size=20),
    }


@pytest.fixture
def state() -> DataState:
    deps = _graph()
    result = DataState(deps_map=deps, selected_package=[deps["a"]])
    result.level1_deps = result.deps_of(deps["a"])
    result.refresh_level2()
    return result


def _names(packages):
    return [package.name for package in packages]


def test_defaults():
    fresh = DataState()
    assert fresh.is_direct is True
    assert fresh.sorting_asc is False
    assert fresh.order is OrderBy.SIZE


def test_metadata_for_unknown_is_empty(state):
    assert state.metadata_for("missing") == Metadata()


def test_direct_deps_sorted_by_size_descending(state):
    assert _names(state.level1_deps) == ["beta", "gamma"]


def test_level2_follows_selection(state):
    assert state.selected_dep().name == "beta"
    assert _names(state.level2_deps) == ["delta"]


def test_transitive_ids(state):
    assert state.transitive_ids(state.deps_map["a"]) == {"b", "c", "d"}


def test_transitive_ids_handles_cycles():
    cyclic = DataState(
        deps_map={
            "x": Metadata(name="x", dependencies=["y"]),
            "y": Metadata(name="y", dependencies=["x"]),
        }
    )
    assert cyclic.transitive_ids(cyclic.deps_map["x"]) == {"x", "y"}


def test_all_deps_mode(state):
    state.is_direct = False
    assert _names(state.deps_of(state.deps_map["a"])) == ["beta", "delta", "gamma"]


def test_filter_deps(state):
    state.filter_input = "gam"
    assert _names(state.filter_deps()) == ["gamma"]
    assert state.selected_dep().name == "gamma"


def test_selected_dep_out_of_range(state):
    state.selected_index = 7
    assert state.selected_dep() == Metadata()


def test_set_sorting_mirrors_selection(state):
    before = state.selected_dep()
    state.set_sorting(True)
    assert state.sorting_asc is True
    assert _names(state.level1_deps) == ["gamma", "beta"]
    assert state.selected_index == 1
    assert state.selected_dep() == before


def test_set_sorting_on_empty_table():
    empty = DataState()
    empty.set_sorting(True)
    assert empty.selected_index == 0
    assert empty.level1_deps == []


def test_order_by_name(state):
    state.order_by(OrderBy.NAME)
    assert state.order is OrderBy.NAME
    assert _names(state.level1_deps) == ["gamma", "beta"]


def test_switch_mode_to_all(state):
    state.selected_index = 1
    state.is_direct = False
    state.switch_mode()
    assert state.selected_index == 0
    assert _names(state.level1_deps) == ["beta", "delta", "gamma"]
    assert _names(state.level2_deps) == ["delta"]


def test_switch_mode_without_selection():
    lonely = DataState(level1_deps=[Metadata(name="stray")])
    lonely.switch_mode()
    assert lonely.level1_deps == []


def test_sort_packages_keeps_ties_and_input():
    packages = [
        Metadata(name="one", size=1),
        Metadata(name="two", size=1),
        Metadata(name="three", size=2),
    ]
    descending = sort_packages(packages, OrderBy.SIZE, False)
    assert _names(descending) == ["three", "one", "two"]
    assert _names(packages) == ["one", "two", "three"]


def test_sort_by_version_is_textual():
    packages = [Metadata(version="1.10.0"), Metadata(version="1.9.0")]
    ascending = sort_packages(packages, OrderBy.VERSION, True)
    assert [package.version for package in ascending] == ["1.10.0", "1.9.0"]