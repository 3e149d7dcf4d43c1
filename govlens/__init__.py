"""Project-governance health snapshots: collectors, scoring and dashboards."""

from .scoring import HealthFacts, HealthScorer, grade_for
from .tools import GovernanceTools, ToolResponse

__version__ = "1.0.0"

__all__ = ["GovernanceTools", "HealthFacts", "HealthScorer", "ToolResponse", "grade_for", "__version__"]
