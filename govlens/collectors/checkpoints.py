"""Checkpoint store collector."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import List

from ..config import PathsConfig
from ..models import Checkpoint, CheckpointListing
from .base import Collector
from .governance import read_json

EMPTY_STORE_MESSAGE = (
    "No checkpoints found. Save a governance snapshot as a JSON file under {path} "
    "to create one."
)


class CheckpointCollector(Collector[CheckpointListing]):
    """Lists saved checkpoint metadata, newest first."""

    name = "checkpoints"

    def __init__(self, directory: str = PathsConfig.checkpoints) -> None:
        self.directory = directory

    def collect(self, root: Path) -> CheckpointListing:
        store = root / self.directory
        if not store.is_dir():
            return CheckpointListing(message=EMPTY_STORE_MESSAGE.format(path=self.directory))

        entries: List[tuple[float, Checkpoint]] = []
        for path in store.glob("*.json"):
            try:
                mtime = path.stat().st_mtime
            except OSError:
                continue
            entries.append((mtime, _build_checkpoint(path, mtime)))

        entries.sort(key=lambda item: (item[0], item[1].name), reverse=True)
        checkpoints = [checkpoint for _, checkpoint in entries]
        if not checkpoints:
            return CheckpointListing(message=EMPTY_STORE_MESSAGE.format(path=self.directory))
        return CheckpointListing(checkpoints=checkpoints)


def _build_checkpoint(path: Path, mtime: float) -> Checkpoint:
    data = read_json(path)
    description = None
    if isinstance(data, dict):
        description = data.get("description") or data.get("name")
    created = datetime.fromtimestamp(mtime, tz=UTC).isoformat().replace("+00:00", "Z")
    return Checkpoint(
        name=path.stem,
        created_at=created,
        description=str(description) if description else path.name,
    )
