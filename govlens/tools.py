"""Operation layer exposing collectors, scoring and rendering as named tools."""

from __future__ import annotations

import tempfile
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

from .collectors import (
    CheckpointCollector,
    Collector,
    GovernanceCollector,
    MetricsCollector,
    SecurityCollector,
    TestRunCollector,
    VcsCollector,
)
from .config import GovLensConfig, load_config
from .logging import get_logger
from .models import (
    CheckpointListing,
    CodeMetrics,
    DashboardResult,
    GovernanceState,
    HealthReport,
    SecurityReport,
    TestRunResult,
    ToolError,
    VcsStatus,
)
from .process import CommandRunner, run_command
from .render import DashboardInputs, DashboardRenderer, project_name_for
from .scoring import HealthFacts, HealthScorer


@dataclass(frozen=True)
class ToolSpec:
    name: str
    method: str
    description: str


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        "governance_get_health",
        "get_health",
        "Project health score (0-100) with letter grade and per-check results covering "
        "governance, working tree, tests, documentation, type safety, file sizes and secrets.",
    ),
    ToolSpec(
        "governance_get_state",
        "get_governance_state",
        "Governance descriptor: project name, vision, goals, workstreams, quality gates and metrics.",
    ),
    ToolSpec(
        "governance_get_vcs_status",
        "get_vcs_status",
        "Git status: branch, commit count, last commit, modified/untracked/staged counts, top contributors.",
    ),
    ToolSpec(
        "governance_get_code_metrics",
        "get_code_metrics",
        "Code metrics: source and test file counts, file coverage ratio, total lines, largest files, "
        "dependency counts.",
    ),
    ToolSpec(
        "governance_run_tests",
        "run_tests",
        "Detect the test runner and run the suite once. Returns pass/fail counts or raw output.",
    ),
    ToolSpec(
        "governance_list_checkpoints",
        "list_checkpoints",
        "Saved governance checkpoints with names and creation dates, newest first.",
    ),
    ToolSpec(
        "governance_security_scan",
        "security_scan",
        "Heuristic scan for hardcoded secrets, eval() usage, committed .env files and npm audit results.",
    ),
    ToolSpec(
        "governance_open_dashboard",
        "open_dashboard",
        "Render the HTML governance dashboard to a temporary file and return its path with the score.",
    ),
)

TOOLS_BY_NAME: Dict[str, ToolSpec] = {spec.name: spec for spec in TOOL_SPECS}


@dataclass
class ToolResponse:
    """Result envelope for a dispatched tool call."""

    operation: str
    is_error: bool
    result: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"operation": self.operation, "is_error": self.is_error, "result": self.result}


class GovernanceTools:
    """Runs the collectors each operation needs against an explicit project root.

    Instances hold no per-project state, so one instance can serve any number of
    independent invocations.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        *,
        scorer: HealthScorer | None = None,
        renderer: DashboardRenderer | None = None,
        output_dir: Path | None = None,
        max_workers: int = 4,
    ) -> None:
        self._runner = runner or run_command
        self.scorer = scorer or HealthScorer()
        self.renderer = renderer or DashboardRenderer()
        self.output_dir = output_dir
        self.max_workers = max_workers
        self.logger = get_logger("tools")

    # ------------------------------------------------------------------
    # Operations

    def get_governance_state(self, path: str | Path) -> GovernanceState:
        root, config = self._prepare(path)
        return self._governance(config).collect(root)

    def get_vcs_status(self, path: str | Path) -> VcsStatus:
        root, config = self._prepare(path)
        return self._vcs(config).collect(root)

    def get_code_metrics(self, path: str | Path) -> CodeMetrics:
        root, config = self._prepare(path)
        return self._metrics(config).collect(root)

    def run_tests(self, path: str | Path) -> TestRunResult:
        root, config = self._prepare(path)
        return TestRunCollector(self._runner, timeout=config.timeouts.tests).collect(root)

    def list_checkpoints(self, path: str | Path) -> CheckpointListing:
        root, config = self._prepare(path)
        return self._checkpoints(config).collect(root)

    def security_scan(self, path: str | Path) -> SecurityReport:
        root, config = self._prepare(path)
        return self._security(config, audit=config.security.audit).collect(root)

    def get_health(self, path: str | Path) -> HealthReport:
        root, config = self._prepare(path)
        facts = self._collect(root, self._scoring_collectors(config))
        return self.scorer.score(_health_facts(facts))

    def open_dashboard(self, path: str | Path) -> DashboardResult:
        root, config = self._prepare(path)
        collectors: Dict[str, Collector[Any]] = dict(self._scoring_collectors(config))
        collectors["security"] = self._security(config, audit=config.security.audit)
        collectors["checkpoints"] = self._checkpoints(config)
        facts = self._collect(root, collectors)

        health = self.scorer.score(_health_facts(facts))
        inputs = DashboardInputs(
            health=health,
            governance=facts["governance"],
            vcs=facts["vcs"],
            metrics=facts["metrics"],
            security=facts["security"],
            checkpoints=facts["checkpoints"],
        )
        html = self.renderer.render(inputs)

        output_dir = self.output_dir or Path(tempfile.gettempdir())
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / f"govlens-dashboard-{int(time.time() * 1000)}.html"
        target.write_text(html, encoding="utf-8")
        self.logger.info("Dashboard written to %s", target)

        return DashboardResult(
            path=str(target),
            project_name=project_name_for(inputs.governance, inputs.vcs),
            health_score=health.score,
            health_grade=health.grade,
        )

    # ------------------------------------------------------------------
    # Dispatch

    def call(self, name: str, path: str | Path = ".") -> ToolResponse:
        """Invoke a tool by name, converting any fault into a structured error."""
        spec = TOOLS_BY_NAME.get(name)
        if spec is None:
            error = ToolError(operation=name, message=f"Unknown tool: {name}", error_type="LookupError")
            return ToolResponse(operation=name, is_error=True, result=error.to_dict())

        operation: Callable[[str | Path], Any] = getattr(self, spec.method)
        try:
            result = operation(path)
        except Exception as exc:
            self.logger.exception("Error in %s", name)
            error = ToolError(operation=name, message=str(exc), error_type=type(exc).__name__)
            return ToolResponse(operation=name, is_error=True, result=error.to_dict())
        return ToolResponse(operation=name, is_error=False, result=result.to_dict())

    # ------------------------------------------------------------------
    # Internals

    def _prepare(self, path: str | Path) -> tuple[Path, GovLensConfig]:
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Project path not found: {path}")
        if not root.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {path}")
        return root, load_config(root)

    def _scoring_collectors(self, config: GovLensConfig) -> Dict[str, Collector[Any]]:
        return {
            "governance": self._governance(config),
            "vcs": self._vcs(config),
            "metrics": self._metrics(config),
            # The rubric never reads audit results, so skip the slow audit call.
            "security": self._security(config, audit=False),
        }

    def _collect(
        self, root: Path, collectors: Mapping[str, Collector[Any]]
    ) -> Dict[str, Any]:
        # Collectors share no state; completion order does not affect results.
        workers = max(1, min(self.max_workers, len(collectors)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="govlens") as pool:
            futures = {key: pool.submit(collector.collect, root) for key, collector in collectors.items()}
            return {key: future.result() for key, future in futures.items()}

    def _governance(self, config: GovLensConfig) -> GovernanceCollector:
        return GovernanceCollector(config.paths.governance)

    def _vcs(self, config: GovLensConfig) -> VcsCollector:
        return VcsCollector(self._runner, timeout=config.timeouts.command)

    def _metrics(self, config: GovLensConfig) -> MetricsCollector:
        return MetricsCollector(config.exclude_paths)

    def _checkpoints(self, config: GovLensConfig) -> CheckpointCollector:
        return CheckpointCollector(config.paths.checkpoints)

    def _security(self, config: GovLensConfig, *, audit: bool) -> SecurityCollector:
        return SecurityCollector(
            self._runner,
            exclude_paths=config.exclude_paths,
            audit=audit,
            command_timeout=config.timeouts.command,
            audit_timeout=config.timeouts.audit,
        )


def _health_facts(facts: Mapping[str, Any]) -> HealthFacts:
    return HealthFacts(
        governance=facts["governance"],
        vcs=facts["vcs"],
        metrics=facts["metrics"],
        security=facts["security"],
    )


__all__ = ["GovernanceTools", "TOOL_SPECS", "TOOLS_BY_NAME", "ToolResponse", "ToolSpec"]
