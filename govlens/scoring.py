"""Health score computation from collector facts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .models import (
    CodeMetrics,
    GovernanceState,
    HealthCheck,
    HealthReport,
    SecurityReport,
    VcsStatus,
)

MAX_SCORE = 100
LARGE_FILE_LINES = 500

# Ordered (minimum score, grade) steps; anything below the last step is F.
GRADE_BANDS: Tuple[Tuple[int, str], ...] = ((90, "A"), (80, "B"), (70, "C"), (60, "D"))
FAILING_GRADE = "F"


@dataclass(frozen=True)
class HealthFacts:
    """Collector outputs the rubric is evaluated against."""

    governance: GovernanceState
    vcs: VcsStatus
    metrics: CodeMetrics
    security: SecurityReport


@dataclass(frozen=True)
class RuleOutcome:
    status: str
    points: int
    note: Optional[str] = None


@dataclass(frozen=True)
class RubricRule:
    """One weighted check. ``evaluate`` must award between 0 and ``weight`` points."""

    name: str
    weight: int
    evaluate: Callable[[HealthFacts], RuleOutcome]


def grade_for(score: int) -> str:
    for minimum, grade in GRADE_BANDS:
        if score >= minimum:
            return grade
    return FAILING_GRADE


def _governance(facts: HealthFacts) -> RuleOutcome:
    if facts.governance.initialized:
        return RuleOutcome("pass", 20)
    return RuleOutcome("fail", 0, "Not initialized")


def _clean_tree(facts: HealthFacts) -> RuleOutcome:
    vcs = facts.vcs
    if vcs.clean:
        return RuleOutcome("pass", 15)
    return RuleOutcome("warn", 5, f"{vcs.modified} modified, {vcs.untracked} untracked")


def _test_presence(facts: HealthFacts) -> RuleOutcome:
    metrics = facts.metrics
    if metrics.test_files <= 0:
        return RuleOutcome("fail", 0, "No tests found")
    points = min(20, round(metrics.test_coverage / 100 * 20))
    status = "pass" if points >= 15 else "warn"
    return RuleOutcome(status, points, f"{metrics.test_coverage}% file coverage")


def _readme(facts: HealthFacts) -> RuleOutcome:
    if facts.metrics.documents.readme:
        return RuleOutcome("pass", 10)
    return RuleOutcome("fail", 0)


def _agent_guide(facts: HealthFacts) -> RuleOutcome:
    if facts.metrics.documents.agent_guide:
        return RuleOutcome("pass", 10)
    return RuleOutcome("info", 0, "Recommended for AI-assisted development")


def _type_safety(facts: HealthFacts) -> RuleOutcome:
    if facts.metrics.documents.type_config:
        return RuleOutcome("pass", 10)
    return RuleOutcome("info", 0)


def _file_size(facts: HealthFacts) -> RuleOutcome:
    oversized = [item for item in facts.metrics.largest_files if item.line_count > LARGE_FILE_LINES]
    if not oversized:
        return RuleOutcome("pass", 10)
    return RuleOutcome("warn", 5, f"{len(oversized)} files over {LARGE_FILE_LINES} lines")


def _no_env_committed(facts: HealthFacts) -> RuleOutcome:
    if not facts.security.committed_env_files:
        return RuleOutcome("pass", 5)
    return RuleOutcome("fail", 0, "Secrets may be committed!")


RUBRIC: Tuple[RubricRule, ...] = (
    RubricRule("Governance", 20, _governance),
    RubricRule("Git Clean", 15, _clean_tree),
    RubricRule("Test Coverage", 20, _test_presence),
    RubricRule("README", 10, _readme),
    RubricRule("AI Guidance", 10, _agent_guide),
    RubricRule("Type Safety", 10, _type_safety),
    RubricRule("File Size", 10, _file_size),
    RubricRule("No .env in Git", 5, _no_env_committed),
)


class HealthScorer:
    """Evaluates the rubric in order and sums the awarded points."""

    def __init__(self, rubric: Sequence[RubricRule] = RUBRIC) -> None:
        total_weight = sum(rule.weight for rule in rubric)
        if total_weight != MAX_SCORE:
            raise ValueError(f"Rubric weights must sum to {MAX_SCORE}, got {total_weight}")
        self.rubric = tuple(rubric)

    def score(self, facts: HealthFacts) -> HealthReport:
        checks: List[HealthCheck] = []
        for rule in self.rubric:
            outcome = rule.evaluate(facts)
            points = max(0, min(outcome.points, rule.weight))
            checks.append(
                HealthCheck(name=rule.name, status=outcome.status, points=points, note=outcome.note)
            )
        total = sum(check.points for check in checks)
        return HealthReport(score=total, grade=grade_for(total), checks=checks, max_score=MAX_SCORE)


__all__ = [
    "FAILING_GRADE",
    "GRADE_BANDS",
    "HealthFacts",
    "HealthScorer",
    "LARGE_FILE_LINES",
    "MAX_SCORE",
    "RUBRIC",
    "RubricRule",
    "RuleOutcome",
    "grade_for",
]
