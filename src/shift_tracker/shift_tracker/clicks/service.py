from __future__ import annotations

import logging
from typing import Sequence

from ..core.exceptions import NoActiveShiftError
from ..shifts.service import ShiftRegistry
from .model import Click
from .repository import ClickRepository

logger = logging.getLogger(__name__)


class ClickLog:
    """Use case: append activity clicks to an employee's open shift."""

    def __init__(self, clicks: ClickRepository, registry: ShiftRegistry):
        self._clicks = clicks
        self._registry = registry

    def record_click(self, employee_id: str) -> None:
        shift = self._registry.get_active_shift(employee_id)
        if shift is None:
            raise NoActiveShiftError()
        click_id = self._clicks.append(shift_id=shift.shift_id, employee_id=shift.employee_id)
        logger.info("Click %s recorded on shift %s", click_id, shift.shift_id)

    def list_for_shift(self, shift_id: str) -> Sequence[Click]:
        return self._clicks.list_for_shift(shift_id)

    def count_for_shift(self, shift_id: str) -> int:
        return len(self._clicks.list_for_shift(shift_id))
