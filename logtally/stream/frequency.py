from __future__ import annotations

from collections import Counter
from dataclasses import dataclass


class FrequencyTable:
    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()

    def increment(self, key: str) -> int:
        self._counts[key] += 1
        return self._counts[key]

    def size(self) -> int:
        return len(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def get(self, key: str) -> int:
        return self._counts[key]

    def total(self) -> int:
        return self._counts.total()

    def snapshot(self) -> list[tuple[str, int]]:
        """Copy of the table in insertion order."""
        return list(self._counts.items())


@dataclass
class RunCounters:
    start_time: float
    total_lines: int = 0
    hitcount: int = 0
    restcount: int = 0
    last_time_report: float = 0.0
    lines_since_report: int = 0

    def __post_init__(self) -> None:
        if not self.last_time_report:
            self.last_time_report = self.start_time
