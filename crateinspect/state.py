"""Dependency graph state behind the inspector's tables."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Iterable


class OrderBy(enum.Enum):
    """Column the dependency tables are ordered by."""

    SIZE = "size"
    NAME = "name"
    VERSION = "version"


_SORT_KEYS = {
    OrderBy.SIZE: attrgetter("size"),
    OrderBy.NAME: attrgetter("name"),
    OrderBy.VERSION: attrgetter("version"),
}


@dataclass
class Metadata:
    """What is known about one package."""

    name: str = ""
    version: str = ""
    license: str = ""
    size: int = 0
    documentation: str = ""
    description: str = ""
    dependencies: list[str] = field(default_factory=list)


def sort_packages(
    packages: Iterable[Metadata], order: OrderBy, ascending: bool
) -> list[Metadata]:
    """Return the packages ordered by the given column, keeping ties in place."""
    return sorted(packages, key=_SORT_KEYS[order], reverse=not ascending)


@dataclass
class DataState:
    """Packages, the path walked through them and the current selection."""

    selected_index: int = 0
    deps_map: dict[str, Metadata] = field(default_factory=dict)
    level1_deps: list[Metadata] = field(default_factory=list)
    level2_deps: list[Metadata] = field(default_factory=list)
    selected_package: list[Metadata] = field(default_factory=list)
    filter_input: str = ""
    sorting_asc: bool = False
    is_direct: bool = True
    order: OrderBy = OrderBy.SIZE

    def filter_deps(self) -> list[Metadata]:
        """Level-one dependencies whose name contains the filter text."""
        return [dep for dep in self.level1_deps if self.filter_input in dep.name]

    def selected_dep(self) -> Metadata:
        """The selected filtered dependency, or an empty record."""
        filtered = self.filter_deps()
        if 0 <= self.selected_index < len(filtered):
            return filtered[self.selected_index]
        return Metadata()

    def refresh_level2(self) -> None:
        """Load the dependencies of the selected row."""
        self.level2_deps = self.deps_of(self.selected_dep())

    def deps_of(self, parent: Metadata) -> list[Metadata]:
        """Direct or transitive dependencies of a package, sorted."""
        if self.is_direct:
            ids: Iterable[str] = parent.dependencies
        else:
            ids = sorted(self.transitive_ids(parent))
        return sort_packages(
            (self.metadata_for(package_id) for package_id in ids),
            self.order,
            self.sorting_asc,
        )

    def transitive_ids(self, parent: Metadata) -> set[str]:
        """Identifiers of every package reachable from the parent."""
        visited: set[str] = set()
        pending = list(reversed(parent.dependencies))
        while pending:
            package_id = pending.pop()
            if package_id in visited:
                continue
            visited.add(package_id)
            pending.extend(reversed(self.metadata_for(package_id).dependencies))
        return visited

    def metadata_for(self, package_id: str) -> Metadata:
        """Metadata of a package, or an empty record if it is unknown."""
        return self.deps_map.get(package_id, Metadata())

    def order_by(self, order: OrderBy) -> None:
        """Change the ordering column and resort."""
        self.order = order
        self.set_sorting(self.sorting_asc)

    def set_sorting(self, ascending: bool) -> None:
        """Resort both tables and mirror the selected row."""
        self.sorting_asc = ascending
        self.level1_deps = sort_packages(self.level1_deps, self.order, ascending)
        self.level2_deps = sort_packages(self.level2_deps, self.order, ascending)
        self.selected_index = max(0, len(self.filter_deps()) - 1 - self.selected_index)

    def switch_mode(self) -> None:
        """Reload the level-one table after switching direct/all mode."""
        if self.selected_package:
            self.selected_index = 0
            self.level1_deps = self.deps_of(self.selected_package[-1])
            self.refresh_level2()
        else:
            self.level1_deps = []