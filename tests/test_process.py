"""Tests for best-effort command execution."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from govlens import process
from govlens.process import Success, Unavailable, output_of, run_command


def test_run_command_returns_success_with_trailing_whitespace_removed(tmp_path: Path) -> None:
    outcome = run_command(
        [sys.executable, "-c", "print('  first'); print('second')"], cwd=tmp_path
    )

    assert outcome == Success("  first\nsecond")


def test_run_command_missing_binary_is_unavailable(tmp_path: Path) -> None:
    outcome = run_command(["definitely-not-a-real-binary-govlens"], cwd=tmp_path)

    assert isinstance(outcome, Unavailable)
    assert "not found" in outcome.reason
    assert output_of(outcome) is None


def test_run_command_non_zero_exit_is_unavailable(tmp_path: Path) -> None:
    outcome = run_command([sys.executable, "-c", "import sys; sys.exit(3)"], cwd=tmp_path)

    assert outcome == Unavailable("exit status 3")


def test_run_command_allow_failure_keeps_output(tmp_path: Path) -> None:
    outcome = run_command(
        [sys.executable, "-c", "print('{\"ok\": false}'); import sys; sys.exit(1)"],
        cwd=tmp_path,
        allow_failure=True,
    )

    assert output_of(outcome) == '{"ok": false}'


def test_run_command_merges_stderr_when_requested(tmp_path: Path) -> None:
    outcome = run_command(
        [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr)"],
        cwd=tmp_path,
        merge_stderr=True,
    )

    assert output_of(outcome) == "out\nerr"


def test_run_command_timeout_is_unavailable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise_timeout(*args, **kwargs):  # type: ignore[no-untyped-def]
        raise subprocess.TimeoutExpired(cmd=args[0], timeout=kwargs["timeout"])

    monkeypatch.setattr(process.subprocess, "run", _raise_timeout)

    outcome = run_command(["git", "status"], cwd=tmp_path, timeout=2)

    assert outcome == Unavailable("timed out after 2s")
