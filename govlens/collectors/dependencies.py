"""Declared dependency counting per project type."""

from __future__ import annotations

import json
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, Set, Tuple

DependencyCounts = Tuple[int, int]

_DEV_GROUP_NAMES = {"dev", "develop", "development", "test", "tests", "testing", "lint", "docs"}
_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def count_dependencies(root: Path, project_type: str) -> DependencyCounts:
    """Return ``(runtime, development)`` dependency counts for the project type."""
    loader = _LOADERS.get(project_type)
    if loader is None:
        return 0, 0
    return loader(root)


def load_toml(path: Path) -> Dict[str, Any]:
    """Return parsed TOML or an empty mapping when missing or malformed."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


# Node.js


def _node_counts(root: Path) -> DependencyCounts:
    try:
        data = json.loads((root / "package.json").read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return 0, 0
    if not isinstance(data, dict):
        return 0, 0

    def _size(key: str) -> int:
        deps = data.get(key)
        return len(deps) if isinstance(deps, dict) else 0

    return _size("dependencies"), _size("devDependencies")


# Rust


def _cargo_counts(root: Path) -> DependencyCounts:
    data = load_toml(root / "Cargo.toml")
    runtime = data.get("dependencies")
    dev = data.get("dev-dependencies")
    return (
        len(runtime) if isinstance(runtime, dict) else 0,
        len(dev) if isinstance(dev, dict) else 0,
    )


# Python


def _python_counts(root: Path) -> DependencyCounts:
    data = load_toml(root / "pyproject.toml")
    runtime: Set[str] = set()
    dev: Set[str] = set()

    project = data.get("project")
    if isinstance(project, dict):
        runtime.update(_requirement_names(project.get("dependencies") or []))
        optional = project.get("optional-dependencies") or {}
        if isinstance(optional, dict):
            for group, values in optional.items():
                target = dev if group.lower() in _DEV_GROUP_NAMES else runtime
                target.update(_requirement_names(values or []))

    groups = data.get("dependency-groups")
    if isinstance(groups, dict):
        for values in groups.values():
            dev.update(_requirement_names(values or []))

    tool = data.get("tool")
    poetry = tool.get("poetry") if isinstance(tool, dict) else None
    if isinstance(poetry, dict):
        main = poetry.get("dependencies") or {}
        if isinstance(main, dict):
            runtime.update(name.lower() for name in main if name.lower() != "python")
        legacy_dev = poetry.get("dev-dependencies") or {}
        if isinstance(legacy_dev, dict):
            dev.update(name.lower() for name in legacy_dev)
        poetry_groups = poetry.get("group") or {}
        if isinstance(poetry_groups, dict):
            for group in poetry_groups.values():
                deps = group.get("dependencies") if isinstance(group, dict) else None
                if isinstance(deps, dict):
                    dev.update(name.lower() for name in deps)

    return len(runtime), len(dev)


def _requirement_names(values: Iterable[Any]) -> Set[str]:
    names: Set[str] = set()
    if not isinstance(values, list):
        return names
    for value in values:
        if not isinstance(value, str):
            # PEP 735 include-group tables are not dependencies themselves.
            continue
        match = _REQUIREMENT_NAME.match(value)
        if match:
            names.add(match.group(1).lower())
    return names


# Go


def _go_counts(root: Path) -> DependencyCounts:
    try:
        text = (root / "go.mod").read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return 0, 0

    count = 0
    in_block = False
    for raw_line in text.splitlines():
        line = raw_line.split("//", 1)[0].strip()
        if not line:
            continue
        if in_block:
            if line == ")":
                in_block = False
            else:
                count += 1
            continue
        if line.startswith("require"):
            rest = line[len("require"):].strip()
            if rest == "(":
                in_block = True
            elif rest:
                count += 1
    return count, 0


_LOADERS = {
    "node": _node_counts,
    "rust": _cargo_counts,
    "python": _python_counts,
    "go": _go_counts,
}


__all__ = ["DependencyCounts", "count_dependencies", "load_toml"]
