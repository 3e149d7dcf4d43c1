"""Structural code metrics collector."""

from __future__ import annotations

import math
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import CodeMetrics, LargeFile, ProjectDocuments
from ..walker import count_lines, iter_project_files
from .base import Collector
from .dependencies import count_dependencies, load_toml

MAX_LARGEST_FILES = 6

# Polyglot repositories still surface their biggest files regardless of type.
LARGEST_FILE_EXTENSIONS: FrozenSet[str] = frozenset(
    {".ts", ".tsx", ".js", ".jsx", ".py", ".rs", ".go"}
)


@dataclass(frozen=True)
class ProjectType:
    """Marker file and source extensions for one supported ecosystem."""

    name: str
    marker: Optional[str]
    extensions: FrozenSet[str]


# Detection precedence follows tuple order.
PROJECT_TYPES: Tuple[ProjectType, ...] = (
    ProjectType("node", "package.json", frozenset({".ts", ".tsx", ".js", ".jsx"})),
    ProjectType("rust", "Cargo.toml", frozenset({".rs"})),
    ProjectType("python", "pyproject.toml", frozenset({".py"})),
    ProjectType("go", "go.mod", frozenset({".go"})),
)
UNKNOWN_PROJECT = ProjectType("unknown", None, LARGEST_FILE_EXTENSIONS)

README_NAMES = ("README.md", "README.rst", "README.txt", "README")
AGENT_GUIDE_NAMES = ("CLAUDE.md", "AGENTS.md", ".github/copilot-instructions.md")
TYPE_CONFIG_NAMES = ("tsconfig.json", "mypy.ini", ".mypy.ini", "pyrightconfig.json")

_TEST_NAME_PATTERNS = ("*.test.*", "*.spec.*", "test_*", "*_test.*")


def detect_project_type(root: Path) -> ProjectType:
    for project_type in PROJECT_TYPES:
        if project_type.marker and (root / project_type.marker).is_file():
            return project_type
    return UNKNOWN_PROJECT


def is_test_file(rel_path: str) -> bool:
    path = PurePosixPath(rel_path)
    if "__tests__" in path.parts[:-1]:
        return True
    return any(fnmatchcase(path.name, pattern) for pattern in _TEST_NAME_PATTERNS)


def file_coverage(test_files: int, source_files: int) -> int:
    """Percentage of test files per source file, rounded half up; 0 without sources."""
    if source_files <= 0:
        return 0
    return int(math.floor(100 * test_files / source_files + 0.5))


def detect_documents(root: Path) -> ProjectDocuments:
    return ProjectDocuments(
        readme=_first_existing(root, README_NAMES),
        agent_guide=_first_existing(root, AGENT_GUIDE_NAMES),
        type_config=_detect_type_config(root),
    )


def _first_existing(root: Path, names: Sequence[str]) -> Optional[str]:
    for name in names:
        if (root / name).is_file():
            return name
    return None


def _detect_type_config(root: Path) -> Optional[str]:
    found = _first_existing(root, TYPE_CONFIG_NAMES)
    if found:
        return found
    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        tool = load_toml(pyproject).get("tool")
        if isinstance(tool, dict) and ("mypy" in tool or "pyright" in tool):
            return "pyproject.toml"
    return None


class MetricsCollector(Collector[CodeMetrics]):
    """Counts source files, test files, lines and dependencies."""

    name = "metrics"

    def __init__(self, exclude_paths: Sequence[str] = ()) -> None:
        self.exclude_paths = list(exclude_paths)
        self._logger = get_logger("collectors.metrics")

    def collect(self, root: Path) -> CodeMetrics:
        project_type = detect_project_type(root)
        runtime_deps, dev_deps = count_dependencies(root, project_type.name)
        metrics = CodeMetrics(
            project_type=project_type.name,
            dependencies=runtime_deps,
            dev_dependencies=dev_deps,
            documents=detect_documents(root),
        )

        source_files = 0
        test_files = 0
        total_lines = 0
        line_counts: Dict[str, int] = {}
        try:
            for rel_path in iter_project_files(root, self.exclude_paths):
                suffix = PurePosixPath(rel_path).suffix.lower()
                in_type = suffix in project_type.extensions
                if not in_type and suffix not in LARGEST_FILE_EXTENSIONS:
                    continue

                lines = self._line_count(root / rel_path)
                if suffix in LARGEST_FILE_EXTENSIONS and lines is not None:
                    line_counts[rel_path] = lines
                if not in_type:
                    continue

                if is_test_file(rel_path):
                    test_files += 1
                else:
                    source_files += 1
                if lines is not None:
                    total_lines += lines
        except OSError as exc:
            self._logger.warning("Could not walk %s: %s", root, exc)
            return metrics

        metrics.source_files = source_files
        metrics.test_files = test_files
        metrics.test_coverage = file_coverage(test_files, source_files)
        metrics.total_lines = total_lines
        metrics.largest_files = largest_files(line_counts)
        return metrics

    def _line_count(self, path: Path) -> Optional[int]:
        try:
            return count_lines(path)
        except OSError as exc:
            self._logger.debug("Skipping unreadable file %s: %s", path, exc)
            return None


def largest_files(line_counts: Dict[str, int], limit: int = MAX_LARGEST_FILES) -> List[LargeFile]:
    ordered = sorted(line_counts.items(), key=lambda item: (-item[1], item[0]))
    return [LargeFile(line_count=count, path=path) for path, count in ordered[:limit]]
