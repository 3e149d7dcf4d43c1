"""Repository walking with VCS, dependency and build-output exclusions."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from fnmatch import translate
from pathlib import Path
from typing import Iterator, List, Sequence

EXCLUDED_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "dist",
        "build",
        "target",
        ".venv",
        "venv",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".tox",
        ".next",
        "coverage",
    }
)


@dataclass(frozen=True)
class IgnoreRule:
    """A ``.gitignore`` line or ``exclude_paths`` glob compiled for the walk.

    Rooted rules (leading or inner slash) are matched against relative paths;
    bare rules are matched against single path components. A rule matching a
    directory also covers everything beneath it.
    """

    regex: re.Pattern[str]
    rooted: bool
    directory_only: bool
    negate: bool


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    directory_only = pattern.endswith("/")
    pattern = pattern.rstrip("/")
    rooted = "/" in pattern
    pattern = pattern.lstrip("/")
    if not pattern:
        return None
    return IgnoreRule(
        regex=re.compile(translate(pattern)),
        rooted=rooted,
        directory_only=directory_only,
        negate=negate,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return []

    rules: List[IgnoreRule] = []
    for line in (raw.strip() for raw in lines):
        if not line or line.startswith("#"):
            continue
        rule = build_ignore_rule(line.removeprefix("!"), negate=line.startswith("!"))
        if rule is not None:
            rules.append(rule)
    return rules


def load_ignore_rules(root: Path, exclude_paths: Sequence[str] = ()) -> List[IgnoreRule]:
    rules = _parse_gitignore(root / ".gitignore")
    for pattern in exclude_paths:
        rule = build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    parts = rel_path.split("/")
    ignored = False
    for rule in rules:
        for depth in range(len(parts), 0, -1):
            # Ancestors are directories; only the path itself may be a file.
            if rule.directory_only and depth == len(parts) and not is_dir:
                continue
            subject = "/".join(parts[:depth]) if rule.rooted else parts[depth - 1]
            if rule.regex.match(subject):
                ignored = not rule.negate
                break
    return ignored


def iter_project_files(root: Path, exclude_paths: Sequence[str] = ()) -> Iterator[str]:
    """Yield POSIX-style relative paths of project files in a stable order."""
    rules = load_ignore_rules(root, exclude_paths)
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield rel_path


def count_lines(path: Path) -> int:
    """Count newline characters, matching ``wc -l``."""
    total = 0
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            total += chunk.count(b"\n")
    return total


__all__ = [
    "EXCLUDED_DIRS",
    "IgnoreRule",
    "build_ignore_rule",
    "count_lines",
    "iter_project_files",
    "load_ignore_rules",
]
