from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, GracePeriod


class AttendanceRepository(Protocol):
    def list_for_period(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_grace_periods(self, *, start_date: date, end_date: date) -> Sequence[GracePeriod]:
        raise NotImplementedError
