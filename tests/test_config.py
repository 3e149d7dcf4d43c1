"""Tests for govlens.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from govlens.config import ConfigError, GovLensConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, GovLensConfig)
    assert config.root == tmp_path.resolve()
    assert config.paths.governance == ".claude/governance.json"
    assert config.paths.checkpoints == ".claude/checkpoints"
    assert config.timeouts.command == pytest.approx(15.0)
    assert config.timeouts.audit == pytest.approx(30.0)
    assert config.timeouts.tests == pytest.approx(60.0)
    assert config.security.audit is True
    assert config.exclude_paths == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".govlens.yml"
    config_file.write_text(
        """
paths:
  governance: "ops/governance.json"
  checkpoints: "ops/checkpoints"
timeouts:
  command: 5
  audit: 12.5
  tests: 120
security:
  audit: false
exclude_paths:
  - "fixtures/"
  - "*.generated.ts"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.paths.governance == "ops/governance.json"
    assert config.paths.checkpoints == "ops/checkpoints"
    assert config.root == tmp_path.resolve()
    assert config.timeouts.command == pytest.approx(5.0)
    assert config.timeouts.audit == pytest.approx(12.5)
    assert config.timeouts.tests == pytest.approx(120.0)
    assert config.security.audit is False
    assert config.exclude_paths == ["fixtures/", "*.generated.ts"]


def test_load_config_ignores_invalid_timeouts(tmp_path: Path) -> None:
    (tmp_path / ".govlens.yml").write_text(
        "timeouts:\n  command: -1\n  tests: soon\n", encoding="utf-8"
    )

    config = load_config(tmp_path)

    assert config.timeouts.command == pytest.approx(15.0)
    assert config.timeouts.tests == pytest.approx(60.0)


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".govlens.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.exclude_paths == []


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".govlens.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_wraps_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".govlens.yml").write_text("paths: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)
