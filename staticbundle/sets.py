"""Split strategies deciding when a generated resource set is full."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import ResourcePrototype, source_file


class SplitStrategy(ABC):
    """Tracks registered resources and signals when to start a new set."""

    @abstractmethod
    def register(self, prototype: ResourcePrototype) -> None:
        """Register the next resource written to the current set."""

    @abstractmethod
    def should_split(self) -> bool:
        """Return True once the current set reached its threshold."""

    @abstractmethod
    def reset(self) -> None:
        """Reset internal counters after a split."""


class SplitByCount(SplitStrategy):
    """Split after ``max`` resources."""

    def __init__(self, max: int) -> None:
        if max < 1:
            raise ValueError("SplitByCount requires a positive maximum")
        self.max = max
        self.current = 0

    def register(self, prototype: ResourcePrototype) -> None:
        self.current += 1

    def should_split(self) -> bool:
        return self.current >= self.max

    def reset(self) -> None:
        self.current = 0


class SplitBySize(SplitStrategy):
    """Split once the source bytes registered in a set reach ``max_bytes``.

    Sizes are taken from the discovered file metadata so a single oversized
    file still lands in a set of its own.
    """

    def __init__(self, max_bytes: int) -> None:
        if max_bytes < 1:
            raise ValueError("SplitBySize requires a positive byte budget")
        self.max_bytes = max_bytes
        self.current = 0

    def register(self, prototype: ResourcePrototype) -> None:
        self.current += source_file(prototype).size

    def should_split(self) -> bool:
        return self.current >= self.max_bytes

    def reset(self) -> None:
        self.current = 0


__all__ = ["SplitByCount", "SplitBySize", "SplitStrategy"]
