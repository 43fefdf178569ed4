"""Run-scoped identifier deduplication."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .records import RawPool


@dataclass
class DeduplicationResult:
    identifier: str
    duplicate: bool

    @property
    def is_duplicate(self) -> bool:
        return self.duplicate


class DeduplicationStore:
    """Remember every pool id let through during one run."""

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def check_and_store(self, identifier: str) -> DeduplicationResult:
        if identifier in self._seen:
            return DeduplicationResult(identifier, True)
        self._seen.add(identifier)
        return DeduplicationResult(identifier, False)

    def filter(self, batch: Iterable[RawPool]) -> list[RawPool]:
        """Keep only records whose id has not been seen, preserving order."""

        return [record for record in batch if not self.check_and_store(record.id).is_duplicate]

    @property
    def seen_count(self) -> int:
        return len(self._seen)


__all__ = ["DeduplicationResult", "DeduplicationStore"]
