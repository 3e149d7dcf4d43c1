"""Best-effort execution of external commands.

Every call resolves to :class:`Success` or :class:`Unavailable`. Missing
binaries, timeouts and non-zero exits never raise past this module, so
collectors can treat each query independently.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from .logging import get_logger

DEFAULT_TIMEOUT = 15.0

_logger = get_logger("process")


@dataclass(frozen=True)
class Success:
    """Command completed; ``output`` is stdout without trailing whitespace."""

    output: str


@dataclass(frozen=True)
class Unavailable:
    """Command could not produce a usable result."""

    reason: str


CommandOutcome = Union[Success, Unavailable]
CommandRunner = Callable[..., CommandOutcome]


def output_of(outcome: CommandOutcome) -> Optional[str]:
    """Return the output of a successful outcome, else ``None``."""
    if isinstance(outcome, Success):
        return outcome.output
    return None


def run_command(
    args: Sequence[str],
    *,
    cwd: Path,
    timeout: float = DEFAULT_TIMEOUT,
    allow_failure: bool = False,
    merge_stderr: bool = False,
) -> CommandOutcome:
    """Run ``args`` in ``cwd`` and capture its output.

    ``allow_failure`` keeps the output of commands that report findings through
    their exit status (``npm audit``, test runners). ``merge_stderr`` appends
    stderr to stdout for tools that print summaries there.
    """
    command = list(args)
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd),
            text=True,
            capture_output=True,
            timeout=timeout,
            check=False,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        _logger.debug("Command not found: %s", command[0])
        return Unavailable(f"{command[0]} not found")
    except subprocess.TimeoutExpired:
        _logger.debug("Command timed out after %ss: %s", timeout, " ".join(command))
        return Unavailable(f"timed out after {timeout:g}s")
    except OSError as exc:
        _logger.debug("Command failed to start: %s (%s)", " ".join(command), exc)
        return Unavailable(str(exc))

    output = completed.stdout or ""
    if merge_stderr and completed.stderr:
        stdout = output.rstrip("\n")
        output = f"{stdout}\n{completed.stderr}" if stdout else completed.stderr

    if completed.returncode != 0 and not allow_failure:
        _logger.debug(
            "Command exited with %d: %s", completed.returncode, " ".join(command)
        )
        return Unavailable(f"exit status {completed.returncode}")

    return Success(output.rstrip())


__all__ = [
    "CommandOutcome",
    "CommandRunner",
    "DEFAULT_TIMEOUT",
    "Success",
    "Unavailable",
    "output_of",
    "run_command",
]
