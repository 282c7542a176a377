"""Time arithmetic for shift durations and click gaps.

All functions are pure and work on epoch seconds. Values are truncated,
never rounded. Callers must pass ``to >= from``; negative spans are not
handled.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.constants import EMPTY_MARK


@dataclass(frozen=True)
class Elapsed:
    hours: int
    minutes: int
    seconds: int

    def format(self) -> str:
        return f"{self.hours}h {self.minutes}m {self.seconds}s"


@dataclass(frozen=True)
class SinceNow:
    hours: int
    minutes: int

    def format(self) -> str:
        return f"{self.hours}h {self.minutes}m"


def elapsed(from_seconds: float, to_seconds: float) -> Elapsed:
    d = math.floor(to_seconds) - math.floor(from_seconds)
    return Elapsed(hours=d // 3600, minutes=(d % 3600) // 60, seconds=d % 60)


def since_now(from_seconds: float, *, now_seconds: Optional[float] = None) -> SinceNow:
    """Hours and minutes from ``from_seconds`` until the wall clock."""
    if now_seconds is None:
        now_seconds = time.time()
    d = math.floor(now_seconds - from_seconds)
    return SinceNow(hours=d // 3600, minutes=(d % 3600) // 60)


def gap_sequence(ordered_timestamps: Iterable[float]) -> list[str]:
    """Gap to the previous timestamp for each entry; the first has none."""
    gaps: list[str] = []
    previous: Optional[float] = None
    for ts in ordered_timestamps:
        gaps.append(EMPTY_MARK if previous is None else elapsed(previous, ts).format())
        previous = ts
    return gaps
