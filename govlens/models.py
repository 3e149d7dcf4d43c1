"""Core data models shared across govlens collectors, scoring and rendering."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


class _Serializable:
    """Mixin producing JSON-friendly dictionaries from dataclasses."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]


@dataclass
class ProjectInfo(_Serializable):
    """Identity block declared in the governance descriptor."""

    name: Optional[str] = None
    vision: Optional[str] = None
    goals: List[str] = field(default_factory=list)


@dataclass
class GovernanceState(_Serializable):
    """Result of reading the governance descriptor.

    ``initialized`` is False when the descriptor is missing or unparsable; that is
    a valid terminal state carrying the expected ``path`` and a hint ``message``.
    """

    initialized: bool
    path: str
    message: Optional[str] = None
    version: Optional[str] = None
    project: Optional[ProjectInfo] = None
    workstream_count: int = 0
    quality_gates: Optional[Dict[str, Any]] = None
    metrics: Optional[Dict[str, Any]] = None


@dataclass
class Contributor(_Serializable):
    """Author name with their non-merge commit count."""

    name: str
    commits: int


@dataclass
class VcsStatus(_Serializable):
    """Working-tree and history facts for a repository."""

    branch: Optional[str] = None
    commit_count: int = 0
    last_commit: Optional[str] = None
    modified: int = 0
    untracked: int = 0
    staged: int = 0
    clean: bool = True
    contributors: List[Contributor] = field(default_factory=list)


@dataclass
class LargeFile(_Serializable):
    line_count: int
    path: str


@dataclass
class ProjectDocuments(_Serializable):
    """Relative paths of notable top-level documents, ``None`` when absent."""

    readme: Optional[str] = None
    agent_guide: Optional[str] = None
    type_config: Optional[str] = None


@dataclass
class CodeMetrics(_Serializable):
    """Structural metrics for the detected project type.

    ``test_coverage`` is the ratio of test files to source files expressed as a
    percentage. It is a proxy for how much of the code base has accompanying
    tests, not a measure of executed statements or branches.
    """

    project_type: str
    source_files: int = 0
    test_files: int = 0
    test_coverage: int = 0
    total_lines: Optional[int] = None
    largest_files: List[LargeFile] = field(default_factory=list)
    dependencies: int = 0
    dev_dependencies: int = 0
    documents: ProjectDocuments = field(default_factory=ProjectDocuments)


@dataclass
class SecurityFinding(_Serializable):
    """Heuristic security signal. Not proof of a vulnerability."""

    severity: str
    category: str
    label: str
    count: int = 0
    sample: Optional[str] = None
    files: List[str] = field(default_factory=list)


@dataclass
class AuditSummary(_Serializable):
    tool: str
    vulnerabilities: Dict[str, int] = field(default_factory=dict)
    total: int = 0


@dataclass
class SecurityReport(_Serializable):
    findings: List[SecurityFinding] = field(default_factory=list)
    audit: Optional[AuditSummary] = None
    committed_env_files: List[str] = field(default_factory=list)

    @property
    def total_findings(self) -> int:
        return len(self.findings)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["total_findings"] = self.total_findings
        return payload


@dataclass
class HealthCheck(_Serializable):
    """Outcome of a single rubric rule."""

    name: str
    status: str
    points: int
    note: Optional[str] = None


@dataclass
class HealthReport(_Serializable):
    score: int
    grade: str
    checks: List[HealthCheck]
    max_score: int = 100


@dataclass
class Checkpoint(_Serializable):
    name: str
    created_at: str
    description: str


@dataclass
class CheckpointListing(_Serializable):
    checkpoints: List[Checkpoint] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.checkpoints)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["count"] = self.count
        return payload


@dataclass
class TestCounts(_Serializable):
    __test__ = False

    passed: Optional[int] = None
    failed: Optional[int] = None
    total: Optional[int] = None
    success: Optional[bool] = None


@dataclass
class TestRunResult(_Serializable):
    __test__ = False

    runner: Optional[str]
    raw: Optional[str] = None
    parsed: Optional[TestCounts] = None
    message: Optional[str] = None


@dataclass
class DashboardResult(_Serializable):
    path: str
    project_name: str
    health_score: int
    health_grade: str


@dataclass
class ToolError(_Serializable):
    """Structured payload returned when an operation faults."""

    operation: str
    message: str
    error_type: str
