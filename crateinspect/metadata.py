"""Reading the package graph from ``cargo metadata``."""

from __future__ import annotations

import json
import os
import subprocess
from pathlib import Path
from typing import Any

from .errors import CargoTomlNotFoundError, ParseMetadataError, RunCargoMetadataError
from .state import Metadata


def _get(content: Any, key: str) -> Any:
    return content.get(key) if isinstance(content, dict) else None


def string_field(content: Any, key: str) -> str:
    """A string member of a JSON object, or an empty string."""
    value = _get(content, key)
    return value if isinstance(value, str) else ""


def list_field(content: Any, key: str) -> list[str]:
    """The string items of an array member of a JSON object."""
    value = _get(content, key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def trim_value(value: Any) -> str:
    """A JSON value as text, without surrounding whitespace or quotes."""
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":")).strip()
    start, end = 0, len(text)
    while start < end and (text[start].isspace() or text[start] == '"'):
        start += 1
    while end > start and (text[end - 1].isspace() or text[end - 1] == '"'):
        end -= 1
    return text[start:end]


def crate_size(manifest_path: str) -> int:
    """Size of the downloaded ``.crate`` archive that belongs to a manifest.

    Raises OSError when the archive is not in the registry cache.
    """
    crate_path = manifest_path.replace("/Cargo.toml", ".crate").replace("/src/", "/cache/")
    return os.stat(crate_path).st_size


def _size_or_zero(manifest_path: str) -> int:
    try:
        return crate_size(manifest_path)
    except OSError:
        return 0


def parse_metadata(document: Any) -> tuple[dict[str, Metadata], str]:
    """Build the package map and the root package id from metadata JSON."""
    packages_by_id: dict[str, Metadata] = {}
    nodes = _get(_get(document, "resolve"), "nodes")
    packages = _get(document, "packages")
    if isinstance(nodes, list) and isinstance(packages, list):
        nodes_by_id: dict[str, Any] = {}
        for node in nodes:
            nodes_by_id.setdefault(string_field(node, "id"), node)
        for package in packages:
            if not isinstance(package, dict):
                continue
            if "name" not in package or "version" not in package:
                continue
            package_id = string_field(package, "id")
            if package_id in packages_by_id:
                continue
            node = nodes_by_id.get(package_id)
            packages_by_id[package_id] = Metadata(
                name=trim_value(package["name"]),
                version=trim_value(package["version"]),
                license=string_field(package, "license"),
                size=_size_or_zero(string_field(package, "manifest_path")),
                documentation=string_field(package, "documentation"),
                description=string_field(package, "description"),
                dependencies=list_field(node, "dependencies") if node is not None else [],
            )

    members = _get(document, "workspace_default_members")
    root_id = ""
    if isinstance(members, list) and members and isinstance(members[0], str):
        root_id = members[0]
    return packages_by_id, root_id


def run_cargo_metadata(path: str | os.PathLike[str]) -> Any:
    """Run ``cargo metadata`` in a project directory and return its JSON."""
    if not (Path(path) / "Cargo.toml").exists():
        raise CargoTomlNotFoundError()
    try:
        completed = subprocess.run(
            ["cargo", "metadata", "--format-version", "1"],
            cwd=path,
            capture_output=True,
            check=False,
        )
    except OSError as error:
        raise RunCargoMetadataError() from error
    try:
        return json.loads(completed.stdout)
    except (ValueError, UnicodeDecodeError) as error:
        raise ParseMetadataError() from error