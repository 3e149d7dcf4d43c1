"""Tests for the code metrics collector."""

from __future__ import annotations

import pytest

from tests._fixtures.repo_builder import RepoBuilder

from govlens.collectors import MetricsCollector
from govlens.collectors.metrics import detect_project_type, file_coverage, is_test_file


def test_python_project_counts(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "pyproject.toml": """
            [project]
            name = "demo"
            dependencies = ["requests>=2", "PyYAML"]

            [project.optional-dependencies]
            test = ["pytest"]

            [tool.mypy]
            strict = true
            """,
            "README.md": "# Demo\n",
            "CLAUDE.md": "Be kind.\n",
        }
    )
    repo_builder.write_lines("demo/app.py", 12)
    repo_builder.write_lines("demo/util.py", 8)
    repo_builder.write_lines("tests/test_app.py", 5)
    repo_builder.write_lines("node_modules/pkg/index.js", 900)

    metrics = MetricsCollector().collect(repo_builder.path())

    assert metrics.project_type == "python"
    assert metrics.source_files == 2
    assert metrics.test_files == 1
    assert metrics.test_coverage == 50
    assert metrics.total_lines == 25
    assert metrics.dependencies == 2
    assert metrics.dev_dependencies == 1
    assert metrics.documents.readme == "README.md"
    assert metrics.documents.agent_guide == "CLAUDE.md"
    assert metrics.documents.type_config == "pyproject.toml"
    assert [item.path for item in metrics.largest_files] == [
        "demo/app.py",
        "demo/util.py",
        "tests/test_app.py",
    ]


def test_node_marker_wins_over_others(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "package.json": '{"dependencies": {"a": "1"}, "devDependencies": {"b": "1", "c": "1"}}',
            "pyproject.toml": "[project]\nname = 'x'\n",
            "src/index.ts": "export const x = 1;\n",
            "src/index.test.ts": "test('x', () => {});\n",
            "tsconfig.json": "{}",
        }
    )

    metrics = MetricsCollector().collect(repo_builder.path())

    assert metrics.project_type == "node"
    assert (metrics.dependencies, metrics.dev_dependencies) == (1, 2)
    assert metrics.source_files == 1
    assert metrics.test_files == 1
    assert metrics.test_coverage == 100
    assert metrics.documents.type_config == "tsconfig.json"


def test_unknown_project_still_reports_largest_files(repo_builder: RepoBuilder) -> None:
    repo_builder.write_lines("tool.go", 40)
    repo_builder.write_lines("script.py", 700)

    metrics = MetricsCollector().collect(repo_builder.path())

    assert metrics.project_type == "unknown"
    assert metrics.largest_files[0].path == "script.py"
    assert metrics.largest_files[0].line_count == 700
    assert metrics.dependencies == 0


def test_largest_files_are_capped_and_ordered(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"go.mod": "module example.com/demo\n"})
    for index in range(8):
        repo_builder.write_lines(f"pkg/file{index}.go", 10 * (index + 1))

    metrics = MetricsCollector().collect(repo_builder.path())

    counts = [item.line_count for item in metrics.largest_files]
    assert len(counts) == 6
    assert counts == sorted(counts, reverse=True)
    assert counts[0] == 80


def test_excluded_paths_are_skipped(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"pyproject.toml": "[project]\nname = 'x'\n"})
    repo_builder.write_lines("app.py", 3)
    repo_builder.write_lines("vendor/big.py", 3000)

    metrics = MetricsCollector(exclude_paths=["vendor/**"]).collect(repo_builder.path())

    assert metrics.source_files == 1
    assert metrics.total_lines == 3


def test_empty_directory(repo_builder: RepoBuilder) -> None:
    metrics = MetricsCollector().collect(repo_builder.path())

    assert metrics.source_files == 0
    assert metrics.test_coverage == 0
    assert metrics.total_lines == 0
    assert metrics.largest_files == []
    assert metrics.documents.readme is None


def test_rust_marker_detected(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"Cargo.toml": "[package]\nname = 'x'\n"})

    assert detect_project_type(repo_builder.path()).name == "rust"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("src/app.test.ts", True),
        ("src/app.spec.js", True),
        ("tests/test_models.py", True),
        ("pkg/server_test.go", True),
        ("src/__tests__/helpers.ts", True),
        ("src/app.ts", False),
        ("src/contest.py", False),
    ],
)
def test_is_test_file(path: str, expected: bool) -> None:
    assert is_test_file(path) is expected


@pytest.mark.parametrize(
    ("tests", "sources", "expected"),
    [(0, 0, 0), (3, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 200, 1), (5, 4, 125)],
)
def test_file_coverage_rounds_half_up(tests: int, sources: int, expected: int) -> None:
    assert file_coverage(tests, sources) == expected
