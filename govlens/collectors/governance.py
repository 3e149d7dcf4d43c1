"""Governance descriptor collector."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import PathsConfig
from ..logging import get_logger
from ..models import GovernanceState, ProjectInfo
from .base import Collector

NOT_INITIALIZED_MESSAGE = (
    "No governance descriptor found. Create {path} to declare the project's "
    "name, vision, goals and quality gates."
)


def read_json(path: Path) -> Optional[Any]:
    """Return parsed JSON from ``path`` or ``None`` when missing or malformed."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError):
        return None


class GovernanceCollector(Collector[GovernanceState]):
    """Reads the project governance descriptor if present."""

    name = "governance"

    def __init__(self, descriptor: str = PathsConfig.governance) -> None:
        self.descriptor = descriptor

    def collect(self, root: Path) -> GovernanceState:
        path = root / self.descriptor
        data = read_json(path)
        if not isinstance(data, dict):
            get_logger("collectors.governance").debug("No usable descriptor at %s", path)
            return GovernanceState(
                initialized=False,
                path=str(path),
                message=NOT_INITIALIZED_MESSAGE.format(path=self.descriptor),
            )

        workstreams = data.get("workstreams")
        return GovernanceState(
            initialized=True,
            path=str(path),
            version=_as_optional_str(data.get("version")),
            project=_parse_project(data.get("project")),
            workstream_count=len(workstreams) if isinstance(workstreams, list) else 0,
            quality_gates=_as_mapping(data.get("qualityGates")),
            metrics=_as_mapping(data.get("metrics")),
        )


def _parse_project(value: Any) -> Optional[ProjectInfo]:
    if not isinstance(value, dict):
        return None
    goals = value.get("goals")
    return ProjectInfo(
        name=_as_optional_str(value.get("name")),
        vision=_as_optional_str(value.get("vision")),
        goals=[str(goal) for goal in goals] if isinstance(goals, list) else [],
    )


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _as_mapping(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None
