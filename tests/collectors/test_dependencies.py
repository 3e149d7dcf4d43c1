"""Tests for declared dependency counting."""

from __future__ import annotations

from tests._fixtures.repo_builder import RepoBuilder

from govlens.collectors.dependencies import count_dependencies


def test_poetry_and_dependency_groups(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "pyproject.toml": """
            [tool.poetry.dependencies]
            python = "^3.11"
            httpx = "*"
            rich = "*"

            [tool.poetry.group.dev.dependencies]
            ruff = "*"

            [dependency-groups]
            test = ["pytest>=8", {include-group = "lint"}]
            """,
        }
    )

    assert count_dependencies(repo_builder.path(), "python") == (2, 2)


def test_cargo_sections(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "Cargo.toml": """
            [package]
            name = "demo"

            [dependencies]
            serde = "1"
            tokio = { version = "1", features = ["full"] }

            [dev-dependencies]
            insta = "1"
            """,
        }
    )

    assert count_dependencies(repo_builder.path(), "rust") == (2, 1)


def test_go_require_block_and_single_line(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "go.mod": """
            module example.com/demo

            go 1.22

            require github.com/pkg/errors v0.9.1

            require (
                golang.org/x/sync v0.7.0 // indirect
                github.com/stretchr/testify v1.9.0
            )
            """,
        }
    )

    assert count_dependencies(repo_builder.path(), "go") == (3, 0)


def test_malformed_manifest_counts_nothing(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"package.json": "{oops"})

    assert count_dependencies(repo_builder.path(), "node") == (0, 0)


def test_unknown_project_type(repo_builder: RepoBuilder) -> None:
    assert count_dependencies(repo_builder.path(), "unknown") == (0, 0)
