"""Tests for the weighted health rubric."""

from __future__ import annotations

import pytest

from govlens.models import (
    CodeMetrics,
    GovernanceState,
    LargeFile,
    ProjectDocuments,
    SecurityReport,
    VcsStatus,
)
from govlens.scoring import RUBRIC, HealthFacts, HealthScorer, RubricRule, RuleOutcome, grade_for


def _facts(
    *,
    initialized: bool = True,
    clean: bool = True,
    source_files: int = 10,
    test_files: int = 10,
    readme: bool = True,
    agent_guide: bool = True,
    type_config: bool = True,
    largest: tuple[int, ...] = (120,),
    env_files: tuple[str, ...] = (),
) -> HealthFacts:
    coverage = round(test_files / source_files * 100) if source_files else 0
    return HealthFacts(
        governance=GovernanceState(initialized=initialized, path=".claude/governance.json"),
        vcs=VcsStatus(branch="main", clean=clean, modified=0 if clean else 2, untracked=0 if clean else 1),
        metrics=CodeMetrics(
            project_type="python",
            source_files=source_files,
            test_files=test_files,
            test_coverage=coverage,
            total_lines=1000,
            largest_files=[LargeFile(line_count=count, path=f"f{index}.py") for index, count in enumerate(largest)],
            documents=ProjectDocuments(
                readme="README.md" if readme else None,
                agent_guide="CLAUDE.md" if agent_guide else None,
                type_config="mypy.ini" if type_config else None,
            ),
        ),
        security=SecurityReport(committed_env_files=list(env_files)),
    )


def _checks(report):
    return {check.name: check for check in report.checks}


def test_perfect_project_scores_full_marks() -> None:
    report = HealthScorer().score(_facts())

    assert report.score == 100
    assert report.grade == "A"
    assert all(check.status == "pass" for check in report.checks)


def test_half_covered_project_without_governance_is_failing() -> None:
    facts = _facts(initialized=False, test_files=5, agent_guide=False, type_config=False)

    report = HealthScorer().score(facts)
    checks = _checks(report)

    assert [(c.name, c.status, c.points) for c in report.checks] == [
        ("Governance", "fail", 0),
        ("Git Clean", "pass", 15),
        ("Test Coverage", "warn", 10),
        ("README", "pass", 10),
        ("AI Guidance", "info", 0),
        ("Type Safety", "info", 0),
        ("File Size", "pass", 10),
        ("No .env in Git", "pass", 5),
    ]
    assert checks["Test Coverage"].note == "50% file coverage"
    assert report.score == 50
    assert report.grade == "F"


def test_penalties_carry_notes() -> None:
    facts = _facts(clean=False, test_files=0, largest=(900, 650, 100), env_files=(".env",))

    checks = _checks(HealthScorer().score(facts))

    assert checks["Git Clean"].points == 5
    assert checks["Git Clean"].note == "2 modified, 1 untracked"
    assert checks["Test Coverage"].status == "fail"
    assert checks["Test Coverage"].note == "No tests found"
    assert checks["File Size"].status == "warn"
    assert checks["File Size"].points == 5
    assert checks["File Size"].note == "2 files over 500 lines"
    assert checks["No .env in Git"].status == "fail"
    assert checks["No .env in Git"].note == "Secrets may be committed!"


def test_coverage_points_are_capped() -> None:
    checks = _checks(HealthScorer().score(_facts(source_files=2, test_files=6)))

    assert checks["Test Coverage"].points == 20
    assert checks["Test Coverage"].status == "pass"


def test_score_is_sum_of_points_and_within_weights() -> None:
    facts = _facts(initialized=False, clean=False, test_files=3, readme=False)

    report = HealthScorer().score(facts)

    assert report.score == sum(check.points for check in report.checks)
    for rule, check in zip(RUBRIC, report.checks):
        assert 0 <= check.points <= rule.weight
    assert report.grade == grade_for(report.score)


def test_rubric_weights_must_total_one_hundred() -> None:
    rubric = [RubricRule("Only", 40, lambda facts: RuleOutcome("pass", 40))]

    with pytest.raises(ValueError):
        HealthScorer(rubric)


def test_overreaching_rule_is_clamped() -> None:
    rubric = [RubricRule("Greedy", 100, lambda facts: RuleOutcome("pass", 150))]

    report = HealthScorer(rubric).score(_facts())

    assert report.score == 100


@pytest.mark.parametrize(
    ("score", "grade"),
    [(100, "A"), (90, "A"), (89, "B"), (80, "B"), (79, "C"), (70, "C"), (69, "D"), (60, "D"), (59, "F"), (0, "F")],
)
def test_grade_bands(score: int, grade: str) -> None:
    assert grade_for(score) == grade


def test_every_score_maps_to_one_grade() -> None:
    grades = [grade_for(score) for score in range(0, 101)]

    assert set(grades) == {"A", "B", "C", "D", "F"}
    assert grades == sorted(grades, reverse=True)
