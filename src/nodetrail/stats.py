"""Phase timing counters for a single tracking run."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Tuple

PHASES = ("vcs", "parsing", "matching")


@dataclass(slots=True)
class PhaseTimings:
    """Seconds spent per phase. One instance belongs to one run."""

    total: float = 0.0
    vcs: float = 0.0
    parsing: float = 0.0
    matching: float = 0.0

    @contextmanager
    def measure(self, phase: str) -> Iterator[None]:
        if phase != "total" and phase not in PHASES:
            raise ValueError(f"Unknown phase: {phase}")
        start = time.perf_counter()
        try:
            yield
        finally:
            setattr(self, phase, getattr(self, phase) + time.perf_counter() - start)

    def percent(self, phase: str) -> int:
        if self.total <= 0:
            return 0
        return int(getattr(self, phase) * 100 / self.total)

    def rows(self) -> List[Tuple[str, float, int]]:
        return [
            ("Total time", self.total, 100),
            ("Git operations time", self.vcs, self.percent("vcs")),
            ("Parsing time", self.parsing, self.percent("parsing")),
            ("Matching time", self.matching, self.percent("matching")),
        ]

    def format_table(self) -> str:
        width = max(len(name) for name, _, _ in self.rows())
        return "\n".join(
            f"{name:<{width}}  {seconds:10.3f}s  {percent:3d}%"
            for name, seconds, percent in self.rows()
        )
