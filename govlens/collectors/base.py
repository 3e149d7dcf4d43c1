"""Base classes for repository collectors."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, TypeVar

T = TypeVar("T")


class Collector(ABC, Generic[T]):
    """Contract for collectors that read one category of repository fact.

    Collectors never raise for missing or malformed inputs; they return an
    explicit "not available" value instead.
    """

    name: str = "collector"

    @abstractmethod
    def collect(self, root: Path) -> T:
        """Read external state under ``root`` into a structured fact."""
