from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import AbstractSet, Iterable, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord

logger = logging.getLogger(__name__)

HALF = Decimal("0.5")


@dataclass(frozen=True)
class AttendanceSummary:
    total_days: int
    present_days: int
    wfh_days: int
    absent_days: int
    paid_absent_days: int
    unpaid_absent_days: int
    half_days: int
    paid_leave_days: int
    weekoff_days: int
    holiday_days: int
    late_count: int
    early_checkout_count: int
    paid_days: Decimal
    not_marked_days: int
    not_marked_dates: tuple[str, ...]


def sort_and_dedupe(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    """Sort by date, keeping the last record seen for a date."""

    by_date: dict[str, AttendanceRecord] = {}
    for r in records:
        if r.work_date in by_date:
            logger.warning("Duplicate attendance for user %s on %s; keeping the latest", r.user_id, r.work_date)
        by_date[r.work_date] = r
    return [by_date[d] for d in sorted(by_date)]


def effective_attendance(
    records: Sequence[AttendanceRecord], *, excluded_dates: AbstractSet[str]
) -> list[AttendanceRecord]:
    """Records that still count after removing penalized dates."""
    return [r for r in records if r.work_date not in excluded_dates]


class AttendanceAggregator:
    """Bucket one employee's month of attendance and derive paid days.

    The first absence of the month is paid; every further absence is not.
    """

    def summarize(
        self,
        records: Sequence[AttendanceRecord],
        *,
        total_days: int,
        month_dates: Sequence[str] = (),
    ) -> AttendanceSummary:
        present = wfh = absent = half = paid_leave = weekoff = holiday = late = early = 0

        for r in records:
            status = r.status
            if status.is_present:
                present += 1
                if status == AttendanceStatus.WORK_FROM_HOME:
                    wfh += 1
            elif status == AttendanceStatus.ABSENT:
                absent += 1
            elif status == AttendanceStatus.HALF_DAY:
                half += 1
            elif status.is_paid_leave:
                paid_leave += 1
            elif status == AttendanceStatus.WEEKOFF:
                weekoff += 1
            elif status == AttendanceStatus.HOLIDAY:
                holiday += 1

            if r.is_late:
                late += 1
            if r.is_early_checkout:
                early += 1

        paid_absent = min(absent, 1)
        unpaid_absent = max(absent - 1, 0)
        paid_days = Decimal(present + weekoff + holiday + paid_leave + paid_absent) + HALF * half

        marked = {r.work_date for r in records}
        not_marked_dates = tuple(d for d in month_dates if d not in marked)

        return AttendanceSummary(
            total_days=total_days,
            present_days=present,
            wfh_days=wfh,
            absent_days=absent,
            paid_absent_days=paid_absent,
            unpaid_absent_days=unpaid_absent,
            half_days=half,
            paid_leave_days=paid_leave,
            weekoff_days=weekoff,
            holiday_days=holiday,
            late_count=late,
            early_checkout_count=early,
            paid_days=paid_days,
            not_marked_days=total_days - len(records),
            not_marked_dates=not_marked_dates,
        )
