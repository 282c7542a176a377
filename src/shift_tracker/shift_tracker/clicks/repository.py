from __future__ import annotations

from typing import Callable, Protocol, Sequence

from ..database.document_store import Unsubscribe
from .model import Click


class ClickRepository(Protocol):
    def append(self, *, shift_id: str, employee_id: str) -> str:
        raise NotImplementedError

    def list_for_shift(self, shift_id: str) -> Sequence[Click]:
        raise NotImplementedError

    def subscribe_all(self, on_clicks: Callable[[list[Click]], None]) -> Unsubscribe:
        """Every click, oldest first, pushed again on each change."""

        raise NotImplementedError
