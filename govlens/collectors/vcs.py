"""Version-control state collector backed by the git CLI."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..logging import get_logger
from ..models import Contributor, VcsStatus
from ..process import CommandRunner, DEFAULT_TIMEOUT, output_of, run_command
from .base import Collector

MAX_CONTRIBUTORS = 5

_CHANGE_CODES = frozenset("MADRCTU")
_SHORTLOG_LINE = re.compile(r"^\s*(\d+)\s+(.+?)\s*$")


class VcsCollector(Collector[VcsStatus]):
    """Derives branch, history and working-tree facts from git.

    Each git query is independent; a failed query only blanks its own field.
    """

    name = "vcs"

    def __init__(
        self,
        runner: CommandRunner | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._runner = runner or run_command
        self._timeout = timeout
        self._logger = get_logger("collectors.vcs")

    def collect(self, root: Path) -> VcsStatus:
        branch = self._git(root, "rev-parse", "--abbrev-ref", "HEAD")
        commit_count = self._git(root, "rev-list", "--count", "HEAD")
        last_commit = self._git(root, "log", "-1", "--format=%h %s (%cr)")
        status = self._git(root, "status", "--porcelain")
        shortlog = self._git(root, "shortlog", "-sn", "--no-merges", "HEAD")

        lines = [line for line in (status or "").splitlines() if line.strip()]
        modified, untracked, staged = count_status_lines(lines)

        return VcsStatus(
            branch=branch or None,
            commit_count=_as_int(commit_count),
            last_commit=last_commit or None,
            modified=modified,
            untracked=untracked,
            staged=staged,
            clean=not lines,
            contributors=parse_shortlog(shortlog or ""),
        )

    def tracked_files(self, root: Path) -> Optional[List[str]]:
        """Return tracked paths, or ``None`` outside a repository.

        NUL-separated output keeps non-ASCII and whitespace in names verbatim
        instead of C-quoting them.
        """
        output = self._git(root, "ls-files", "-z")
        if output is None:
            return None
        return [path for path in output.split("\0") if path]

    def _git(self, root: Path, *args: str) -> Optional[str]:
        outcome = self._runner(["git", *args], cwd=root, timeout=self._timeout)
        output = output_of(outcome)
        if output is None:
            self._logger.debug("git %s unavailable: %s", " ".join(args), outcome)
        return output


def count_status_lines(lines: Iterable[str]) -> Tuple[int, int, int]:
    """Return ``(modified, untracked, staged)`` counts from porcelain v1 lines.

    Every non-empty porcelain line lands in at least one bucket, so all counts
    are zero exactly when the listing is empty.
    """
    modified = untracked = staged = 0
    for line in lines:
        if line.startswith("??"):
            untracked += 1
            continue
        index_code = line[0] if line else " "
        worktree_code = line[1] if len(line) > 1 else " "
        if index_code in _CHANGE_CODES:
            staged += 1
        if worktree_code in _CHANGE_CODES:
            modified += 1
        if index_code not in _CHANGE_CODES and worktree_code not in _CHANGE_CODES:
            # Unrecognised status codes still mean the tree is dirty.
            modified += 1
    return modified, untracked, staged


def parse_shortlog(output: str, limit: int = MAX_CONTRIBUTORS) -> List[Contributor]:
    contributors: List[Contributor] = []
    for line in output.splitlines():
        match = _SHORTLOG_LINE.match(line)
        if match:
            contributors.append(Contributor(name=match.group(2), commits=int(match.group(1))))
    contributors.sort(key=lambda item: item.commits, reverse=True)
    return contributors[:limit]


def _as_int(value: Optional[str]) -> int:
    if not value:
        return 0
    try:
        return max(int(value.strip()), 0)
    except ValueError:
        return 0
