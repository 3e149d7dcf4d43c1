"""Static HTML dashboard rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import (
    CheckpointListing,
    CodeMetrics,
    GovernanceState,
    HealthReport,
    SecurityReport,
    VcsStatus,
)
from ..scoring import LARGE_FILE_LINES, MAX_SCORE

TEMPLATES_DIR = Path(__file__).with_name("templates")

RING_CIRCUMFERENCE = 377
BAR_FULL_SCALE_LINES = 1000
MAX_CHECKPOINT_ROWS = 5
MAX_CONTRIBUTOR_ROWS = 3

# Keyed by grade so colours always agree with the textual grade bands.
GRADE_TONES: Dict[str, str] = {"A": "good", "B": "good", "C": "caution", "D": "caution", "F": "bad"}
GRADE_TEXT_TONES: Dict[str, str] = {"A": "good", "B": "info", "C": "caution", "D": "bad", "F": "bad"}
SEVERITY_TONES: Dict[str, str] = {
    "critical": "bad",
    "high": "caution",
    "moderate": "warning",
    "medium": "warning",
}
STATUS_ICONS: Dict[str, str] = {"pass": "✓", "fail": "✗", "warn": "⚠"}


@dataclass
class DashboardInputs:
    """Everything the renderer needs; rendering never collects new data."""

    health: HealthReport
    governance: GovernanceState
    vcs: VcsStatus
    metrics: CodeMetrics
    security: SecurityReport
    checkpoints: CheckpointListing
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))


def project_name_for(governance: GovernanceState, vcs: VcsStatus) -> str:
    if governance.project and governance.project.name:
        return governance.project.name
    return vcs.branch or "Project"


def bar_width(line_count: int) -> float:
    return round(min(100.0, line_count / BAR_FULL_SCALE_LINES * 100), 1)


class DashboardRenderer:
    """Projects a health report and raw collector outputs into one HTML page."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
            autoescape=True,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, inputs: DashboardInputs) -> str:
        template = self._env.get_template("dashboard.html.j2")
        return template.render(**self.build_context(inputs))

    def build_context(self, inputs: DashboardInputs) -> Dict[str, object]:
        health = inputs.health
        governance = inputs.governance
        project = governance.project
        audit = inputs.security.audit

        audit_tiers: Optional[List[Dict[str, object]]] = None
        if audit is not None:
            audit_tiers = [
                {"tier": tier, "count": count, "tone": SEVERITY_TONES.get(tier, "info")}
                for tier, count in audit.vulnerabilities.items()
                if count > 0
            ]

        return {
            "project_name": project_name_for(governance, inputs.vcs),
            "vision": (project.vision if project and project.vision else "No vision set"),
            "goals": list(project.goals) if project else [],
            "generated_at": inputs.generated_at.strftime("%Y-%m-%d %H:%M UTC"),
            "score": health.score,
            "max_score": health.max_score or MAX_SCORE,
            "grade": health.grade,
            "grade_tone": GRADE_TEXT_TONES.get(health.grade, "bad"),
            "score_tone": GRADE_TONES.get(health.grade, "bad"),
            "ring_dash": round(health.score / MAX_SCORE * RING_CIRCUMFERENCE, 1),
            "ring_circumference": RING_CIRCUMFERENCE,
            "checks": [
                {
                    "name": check.name,
                    "status": check.status,
                    "icon": STATUS_ICONS.get(check.status, "•"),
                    "points": check.points,
                    "note": check.note,
                }
                for check in health.checks
            ],
            "metrics": inputs.metrics,
            "coverage_tone": "good" if inputs.metrics.test_coverage >= 50 else "caution",
            "vcs": inputs.vcs,
            "contributors": inputs.vcs.contributors[:MAX_CONTRIBUTOR_ROWS],
            "findings": [
                {
                    "label": finding.label,
                    "severity": finding.severity,
                    "count": finding.count,
                    "tone": SEVERITY_TONES.get(finding.severity, "info"),
                }
                for finding in inputs.security.findings
            ],
            "audit": audit,
            "audit_tiers": audit_tiers,
            "large_files": [
                {
                    "path": item.path,
                    "lines": item.line_count,
                    "width": bar_width(item.line_count),
                    "oversized": item.line_count > LARGE_FILE_LINES,
                }
                for item in inputs.metrics.largest_files
            ],
            "checkpoints": [
                {"name": cp.name, "date": cp.created_at[:10], "description": cp.description}
                for cp in inputs.checkpoints.checkpoints[:MAX_CHECKPOINT_ROWS]
            ],
            "checkpoint_count": inputs.checkpoints.count,
        }


__all__ = ["DashboardInputs", "DashboardRenderer", "bar_width", "project_name_for"]
