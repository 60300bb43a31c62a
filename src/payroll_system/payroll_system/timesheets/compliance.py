from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from ..adjustments.model import AdjustmentRecord
from ..common.datetime_utils import to_naive_local
from ..common.money import ZERO, round_cents
from ..core.constants import TIMESHEET_DEADLINE_HOURS
from .model import TaskAssignment, TimesheetEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PenaltyDetail:
    penalty_date: str
    reason: str
    amount: Decimal

    def to_dict(self) -> dict:
        return {"date": self.penalty_date, "reason": self.reason, "amount": self.amount}


@dataclass(frozen=True)
class ComplianceResult:
    penalized_dates: frozenset[str] = frozenset()
    details: tuple[PenaltyDetail, ...] = field(default_factory=tuple)

    @property
    def total(self) -> Decimal:
        return round_cents(sum((d.amount for d in self.details), ZERO))


class TimesheetComplianceChecker:
    """Flag dates whose assigned tasks never got a timesheet entry.

    Once the deadline after assignment has passed, a task with no matching entry
    and no approved waiver for its date penalizes that date: one day's pay is
    fined, and the caller drops the date from the attendance it pays for.
    """

    def __init__(self, *, deadline_hours: int = TIMESHEET_DEADLINE_HOURS):
        self._deadline = timedelta(hours=int(deadline_hours))

    def check(
        self,
        *,
        user_id: int,
        tasks: Iterable[TaskAssignment],
        entries: Sequence[TimesheetEntry],
        adjustments: Iterable[AdjustmentRecord],
        daily_rate: Decimal,
        now: datetime,
    ) -> ComplianceResult:
        now = to_naive_local(now)
        own_entries = [e for e in entries if e.user_id == user_id]
        waived_dates = {
            a.adjustment_date
            for a in adjustments
            if a.user_id == user_id and a.is_waiver and a.is_approved and a.adjustment_date
        }

        penalized: list[PenaltyDetail] = []
        seen: set[str] = set()
        own_tasks = sorted(
            (t for t in tasks if user_id in t.assignee_ids),
            key=lambda t: (t.assigned_at, t.task_id),
        )
        for task in own_tasks:
            if now - to_naive_local(task.assigned_at) <= self._deadline:
                continue
            if any(e.covers(task) for e in own_entries):
                continue
            day = task.assigned_date
            if day in waived_dates:
                logger.debug("Timesheet penalty for user %s on %s waived", user_id, day)
                continue
            if day in seen:
                continue
            seen.add(day)
            penalized.append(
                PenaltyDetail(
                    penalty_date=day,
                    reason=f"Timesheet not submitted for task: {task.title}",
                    amount=round_cents(daily_rate),
                )
            )

        return ComplianceResult(penalized_dates=frozenset(seen), details=tuple(penalized))
