"""Heuristic security scanning.

The matchers here are pattern based triage signals, not an authoritative
vulnerability scanner. Expect false positives from test fixtures, examples and
comments, and false negatives for encoded, split or obfuscated secrets.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import FrozenSet, List, Optional, Sequence

from ..logging import get_logger
from ..models import AuditSummary, SecurityFinding, SecurityReport
from ..process import CommandRunner, output_of, run_command
from ..walker import iter_project_files
from .base import Collector
from .vcs import VcsCollector

MAX_SAMPLE_LENGTH = 120
MAX_FINDING_FILES = 10
MAX_SCAN_BYTES = 1024 * 1024

SEVERITY_ORDER = ("critical", "high", "medium", "low", "info")

# npm audit tiers mapped onto finding severities.
_AUDIT_SEVERITY = {
    "critical": "critical",
    "high": "high",
    "moderate": "medium",
    "low": "low",
    "info": "info",
}

_SCRIPT_EXTENSIONS = frozenset({".ts", ".js", ".py"})
_JS_EXTENSIONS = frozenset({".ts", ".js"})
_ALL_TEXT_EXTENSIONS = frozenset(
    {".ts", ".tsx", ".js", ".jsx", ".py", ".rs", ".go", ".json", ".yml", ".yaml", ".toml", ".cfg", ".ini"}
)


@dataclass(frozen=True)
class Matcher:
    """A labelled regular expression applied line by line to matching files."""

    label: str
    pattern: re.Pattern[str]
    severity: str
    category: str
    extensions: FrozenSet[str] = field(default=_SCRIPT_EXTENSIONS)

    def applies_to(self, rel_path: str) -> bool:
        return PurePosixPath(rel_path).suffix.lower() in self.extensions


DEFAULT_MATCHERS: tuple[Matcher, ...] = (
    Matcher(
        label="Hardcoded password",
        pattern=re.compile(r"password\s*=\s*['\"][^'\"]+['\"]"),
        severity="high",
        category="secrets",
    ),
    Matcher(
        label="Hardcoded API key",
        pattern=re.compile(r"api_key\s*=\s*['\"][^'\"]+['\"]"),
        severity="high",
        category="secrets",
    ),
    Matcher(
        label="Hardcoded secret",
        pattern=re.compile(r"secret\s*=\s*['\"][^'\"]+['\"]"),
        severity="high",
        category="secrets",
    ),
    Matcher(
        label="Private key material",
        pattern=re.compile(r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----"),
        severity="critical",
        category="secrets",
        extensions=_ALL_TEXT_EXTENSIONS,
    ),
    Matcher(
        label="AWS access key ID",
        pattern=re.compile(r"\bAKIA[0-9A-Z]{16}\b"),
        severity="critical",
        category="secrets",
        extensions=_ALL_TEXT_EXTENSIONS,
    ),
    Matcher(
        label="eval() usage",
        pattern=re.compile(r"\beval\("),
        severity="high",
        category="injection",
        extensions=_JS_EXTENSIONS,
    ),
)


@dataclass
class _Hits:
    count: int = 0
    sample: Optional[str] = None
    files: List[str] = field(default_factory=list)


def is_env_file(rel_path: str) -> bool:
    """True for committed environment-secrets files such as ``.env`` or ``prod.env``."""
    return PurePosixPath(rel_path).name.lower().endswith(".env")


class SecurityCollector(Collector[SecurityReport]):
    """Runs the matcher set over project files and folds in optional audits."""

    name = "security"

    def __init__(
        self,
        runner: CommandRunner | None = None,
        *,
        matchers: Sequence[Matcher] = DEFAULT_MATCHERS,
        exclude_paths: Sequence[str] = (),
        audit: bool = True,
        command_timeout: float = 15.0,
        audit_timeout: float = 30.0,
    ) -> None:
        self._runner = runner or run_command
        self.matchers = list(matchers)
        self.exclude_paths = list(exclude_paths)
        self.audit_enabled = audit
        self._audit_timeout = audit_timeout
        self._vcs = VcsCollector(self._runner, timeout=command_timeout)
        self._logger = get_logger("collectors.security")

    def collect(self, root: Path) -> SecurityReport:
        tracked = self._vcs.tracked_files(root)
        candidates = self._candidate_files(root, tracked)

        report = SecurityReport()
        report.findings.extend(self.scan_files(root, candidates))

        env_files = sorted(path for path in tracked or [] if is_env_file(path))
        report.committed_env_files = env_files
        if env_files:
            report.findings.append(
                SecurityFinding(
                    severity="critical",
                    category="secrets",
                    label=".env file committed to git",
                    count=len(env_files),
                    files=env_files,
                )
            )

        if self.audit_enabled:
            report.audit = self._npm_audit(root)
            if report.audit is not None and report.audit.total > 0:
                report.findings.append(_audit_finding(report.audit))

        return report

    def scan_files(self, root: Path, rel_paths: Sequence[str]) -> List[SecurityFinding]:
        hits = [_Hits() for _ in self.matchers]
        for rel_path in rel_paths:
            applicable = [
                (index, matcher)
                for index, matcher in enumerate(self.matchers)
                if matcher.applies_to(rel_path)
            ]
            if not applicable:
                continue
            text = self._read_text(root / rel_path)
            if text is None:
                continue
            for line_number, line in enumerate(text.splitlines(), start=1):
                for index, matcher in applicable:
                    if not matcher.pattern.search(line):
                        continue
                    entry = hits[index]
                    entry.count += 1
                    if entry.sample is None:
                        entry.sample = truncate_sample(f"{rel_path}:{line_number}:{line.strip()}")
                    if rel_path not in entry.files and len(entry.files) < MAX_FINDING_FILES:
                        entry.files.append(rel_path)

        findings: List[SecurityFinding] = []
        for matcher, entry in zip(self.matchers, hits):
            if entry.count:
                findings.append(
                    SecurityFinding(
                        severity=matcher.severity,
                        category=matcher.category,
                        label=matcher.label,
                        count=entry.count,
                        sample=entry.sample,
                        files=entry.files,
                    )
                )
        return findings

    def _candidate_files(self, root: Path, tracked: Optional[List[str]]) -> List[str]:
        walked = list(iter_project_files(root, self.exclude_paths))
        if tracked is None:
            return walked
        # Tracked files still honour the walker's dependency and build exclusions.
        allowed = set(walked)
        return [path for path in tracked if path in allowed]

    def _read_text(self, path: Path) -> Optional[str]:
        try:
            if path.stat().st_size > MAX_SCAN_BYTES:
                return None
            data = path.read_bytes()
        except OSError:
            return None
        if b"\x00" in data:
            return None
        return data.decode("utf-8", errors="replace")

    def _npm_audit(self, root: Path) -> Optional[AuditSummary]:
        if not (root / "package-lock.json").is_file():
            return None
        # npm exits non-zero when it finds vulnerabilities; the JSON is still valid.
        outcome = self._runner(
            ["npm", "audit", "--json"],
            cwd=root,
            timeout=self._audit_timeout,
            allow_failure=True,
        )
        return parse_npm_audit(output_of(outcome))


def parse_npm_audit(raw: Optional[str]) -> Optional[AuditSummary]:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    metadata = data.get("metadata") if isinstance(data, dict) else None
    vulnerabilities = metadata.get("vulnerabilities") if isinstance(metadata, dict) else None
    if not isinstance(vulnerabilities, dict):
        return AuditSummary(tool="npm")

    tiers = {
        str(tier): int(count)
        for tier, count in vulnerabilities.items()
        if isinstance(count, int) and not isinstance(count, bool) and tier != "total"
    }
    return AuditSummary(tool="npm", vulnerabilities=tiers, total=sum(tiers.values()))


def _audit_finding(audit: AuditSummary) -> SecurityFinding:
    severities = [
        _AUDIT_SEVERITY.get(tier, "info") for tier, count in audit.vulnerabilities.items() if count > 0
    ]
    worst = min(severities, key=SEVERITY_ORDER.index) if severities else "info"
    return SecurityFinding(
        severity=worst,
        category="dependency",
        label=f"Vulnerable dependencies ({audit.tool} audit)",
        count=audit.total,
    )


def truncate_sample(text: str, limit: int = MAX_SAMPLE_LENGTH) -> str:
    return text[:limit]
