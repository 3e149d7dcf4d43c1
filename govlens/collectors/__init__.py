"""Collector implementations for repository facts."""

from __future__ import annotations

from .base import Collector
from .checkpoints import CheckpointCollector
from .governance import GovernanceCollector
from .metrics import MetricsCollector
from .security import DEFAULT_MATCHERS, Matcher, SecurityCollector
from .test_runs import TestRunCollector
from .vcs import VcsCollector

__all__ = [
    "CheckpointCollector",
    "Collector",
    "DEFAULT_MATCHERS",
    "GovernanceCollector",
    "Matcher",
    "MetricsCollector",
    "SecurityCollector",
    "TestRunCollector",
    "VcsCollector",
]
