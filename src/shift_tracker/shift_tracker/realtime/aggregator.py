"""Merges the shift and click snapshot streams into one per-day view.

Both streams push independently and in no particular order relative to each
other. The aggregator keeps only the latest snapshot of each and rebuilds
the whole view from the pair on every push; the view is replaced, never
patched, so readers always see a consistent projection.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence

from ..clicks.model import Click
from ..clicks.repository import ClickRepository
from ..database.document_store import Unsubscribe
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository

logger = logging.getLogger(__name__)

ViewListener = Callable[["AggregateView"], None]


@dataclass(frozen=True)
class AggregateView:
    """Shifts of one day (newest check-in first) and every click grouped by shift."""

    day: date
    shifts: tuple[Shift, ...] = ()
    clicks_by_shift: Mapping[str, tuple[Click, ...]] = field(default_factory=lambda: MappingProxyType({}))
    loading: bool = True

    def clicks_for(self, shift_id: str) -> tuple[Click, ...]:
        return self.clicks_by_shift.get(shift_id, ())

    def click_count(self, shift_id: str) -> int:
        return len(self.clicks_for(shift_id))


def group_clicks(clicks: Sequence[Click]) -> Mapping[str, tuple[Click, ...]]:
    """Single pass over the click snapshot, keeping snapshot order per shift."""
    grouped: dict[str, list[Click]] = {}
    for click in clicks:
        grouped.setdefault(click.shift_id, []).append(click)
    return MappingProxyType({k: tuple(v) for k, v in grouped.items()})


def build_view(day: date, shifts: Optional[Sequence[Shift]], clicks: Optional[Sequence[Click]]) -> AggregateView:
    """Deterministic reducer over the latest snapshot of each stream.

    ``shifts`` is None until the first shift snapshot arrives (still loading).
    Clicks whose shift is not in ``shifts`` are kept in the grouping; shifts
    without clicks simply have an empty group.
    """
    return AggregateView(
        day=day,
        shifts=tuple(shifts or ()),
        clicks_by_shift=group_clicks(clicks or ()),
        loading=shifts is None,
    )


class RealtimeAggregator:
    def __init__(self, shifts: ShiftRepository, clicks: ClickRepository, *, day: date):
        self._shift_repo = shifts
        self._click_repo = clicks
        self._day = day

        self._latest_shifts: Optional[list[Shift]] = None
        self._latest_clicks: Optional[list[Click]] = None
        self._view = build_view(day, None, None)

        self._listeners: list[ViewListener] = []
        self._unsub_shifts: Optional[Unsubscribe] = None
        self._unsub_clicks: Optional[Unsubscribe] = None
        # Bumped whenever the shift subscription is replaced; stale pushes are dropped.
        self._generation = 0
        self._lock = threading.RLock()

    @property
    def day(self) -> date:
        return self._day

    @property
    def view(self) -> AggregateView:
        return self._view

    @property
    def running(self) -> bool:
        return self._unsub_clicks is not None

    def add_listener(self, listener: ViewListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return remove

    def start(self) -> None:
        if self.running:
            return
        self._unsub_clicks = self._click_repo.subscribe_all(self._on_clicks)
        try:
            self._subscribe_shifts()
        except Exception:
            self.stop()
            raise
        logger.info("Aggregator started for %s", self._day.isoformat())

    def select_day(self, day: date) -> None:
        """Swap the shift subscription to ``day``; the click subscription stays."""
        with self._lock:
            if day == self._day and self._unsub_shifts is not None:
                return
            self._drop_shift_subscription()
            self._day = day
            self._latest_shifts = None
            self._rebuild()
        if self.running:
            self._subscribe_shifts()
        logger.info("Aggregator switched to %s", day.isoformat())

    def stop(self) -> None:
        with self._lock:
            self._drop_shift_subscription()
            if self._unsub_clicks is not None:
                self._unsub_clicks()
                self._unsub_clicks = None
        logger.info("Aggregator stopped for %s", self._day.isoformat())

    def _subscribe_shifts(self) -> None:
        with self._lock:
            generation = self._generation
            day = self._day

        def on_shifts(shifts: list[Shift]) -> None:
            self._on_shifts(generation, shifts)

        unsubscribe = self._shift_repo.subscribe_day(day, on_shifts)
        with self._lock:
            if generation == self._generation:
                self._unsub_shifts = unsubscribe
                return
        # The day changed while subscribing.
        unsubscribe()

    def _drop_shift_subscription(self) -> None:
        self._generation += 1
        if self._unsub_shifts is not None:
            self._unsub_shifts()
            self._unsub_shifts = None

    def _on_shifts(self, generation: int, shifts: list[Shift]) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._latest_shifts = list(shifts)
            self._rebuild()

    def _on_clicks(self, clicks: list[Click]) -> None:
        with self._lock:
            self._latest_clicks = list(clicks)
            self._rebuild()

    def _rebuild(self) -> None:
        self._view = build_view(self._day, self._latest_shifts, self._latest_clicks)
        for listener in list(self._listeners):
            try:
                listener(self._view)
            except Exception:
                logger.exception("Aggregate view listener failed")
