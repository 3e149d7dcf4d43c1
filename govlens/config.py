"""Configuration loading for govlens (.govlens.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".govlens.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class PathsConfig:
    """Locations of externally persisted governance state, relative to the root."""

    governance: str = ".claude/governance.json"
    checkpoints: str = ".claude/checkpoints"


@dataclass
class TimeoutConfig:
    """Upper bounds, in seconds, for external process calls."""

    command: float = 15.0
    audit: float = 30.0
    tests: float = 60.0


@dataclass
class SecurityConfig:
    """Security scan toggles."""

    audit: bool = True


@dataclass
class GovLensConfig:
    """Represents the settings defined in .govlens.yml."""

    root: Path
    paths: PathsConfig = field(default_factory=PathsConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> GovLensConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GovLensConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    paths = PathsConfig()
    paths_data = _as_dict(data.get("paths"))
    if paths_data:
        paths.governance = _as_str(paths_data.get("governance")) or paths.governance
        paths.checkpoints = _as_str(paths_data.get("checkpoints")) or paths.checkpoints

    timeouts = TimeoutConfig()
    timeout_data = _as_dict(data.get("timeouts"))
    if timeout_data:
        timeouts.command = _as_positive_float(timeout_data.get("command")) or timeouts.command
        timeouts.audit = _as_positive_float(timeout_data.get("audit")) or timeouts.audit
        timeouts.tests = _as_positive_float(timeout_data.get("tests")) or timeouts.tests

    security = SecurityConfig()
    security_data = _as_dict(data.get("security"))
    if security_data:
        audit = _as_bool(security_data.get("audit"))
        if audit is not None:
            security.audit = audit

    return GovLensConfig(
        root=root,
        paths=paths,
        timeouts=timeouts,
        security=security,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_positive_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
