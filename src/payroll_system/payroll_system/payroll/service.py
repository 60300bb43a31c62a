from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..adjustments.repository import AdjustmentRepository
from ..advances.repository import AdvanceRepository
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import days_in_month, now_local, parse_month
from ..common.validators import require_month
from ..core.constants import DEFAULT_MAX_WORKERS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, PersistenceConflictError
from ..policies.repository import PolicyRepository
from ..timesheets.repository import TimesheetRepository
from ..users.repository import UserRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import EmployeeMonthInput, PayrollResult
from .repository import PayrollRepository
from .upserter import PayrollUpserter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthReadSet:
    """Everything read from storage for one invocation, fetched once and shared by all employees."""

    attendance: Sequence
    grace_minutes: dict[str, int]
    policies: Sequence
    adjustments: Sequence
    advances: Sequence
    tasks: Sequence
    timesheet_entries: Sequence
    existing_user_ids: frozenset[int]
    names: dict[int, str]


class PayrollService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        policies: PolicyRepository,
        adjustments: AdjustmentRepository,
        advances: AdvanceRepository,
        timesheets: TimesheetRepository,
        users: UserRepository,
        payroll: PayrollRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        upserter: Optional[PayrollUpserter] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._attendance = attendance
        self._policies = policies
        self._adjustments = adjustments
        self._advances = advances
        self._timesheets = timesheets
        self._users = users
        self._payroll = payroll
        self._calculator = calculator or StandardPayrollCalculator()
        self._upserter = upserter or PayrollUpserter(payroll)
        self._max_workers = max(int(max_workers), 1)

    def compute(
        self,
        *,
        current_role: Role,
        month: str,
        employee_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        """Recalculate and save payroll for a month (optionally a single employee).

        Returns ``{"month", "results", "total_processed", "errors"}``; each result
        carries ``action`` (created/updated/skipped_locked) and ``has_policy``.
        """

        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can run payroll")
        month = require_month(month)
        employee_id = int(employee_id) if employee_id else None
        now = now or now_local()

        reads = self._read_month(month=month, employee_id=employee_id)
        inputs = self._build_inputs(reads, month=month, employee_id=employee_id, now=now)
        logger.info("Computing payroll for %s: %d employee(s)", month, len(inputs))

        computed = self.preview(inputs)

        results: list[dict] = []
        errors: list[dict] = []
        for result in computed:
            try:
                outcome = self._upserter.upsert(result)
            except PersistenceConflictError as err:
                logger.exception("Payroll for user %s in %s not saved", result.user_id, month)
                errors.append({"user_id": result.user_id, "month": month, "error": str(err)})
                continue
            results.append(outcome.to_dict())

        logger.info("Payroll %s done: %d saved, %d failed", month, len(results), len(errors))
        return {"month": month, "results": results, "total_processed": len(results), "errors": errors}

    def preview(self, inputs: Sequence[EmployeeMonthInput]) -> list[PayrollResult]:
        """Run the calculator without saving anything; employees are computed in parallel."""

        if len(inputs) <= 1 or self._max_workers == 1:
            return [self._calculator.calculate(i) for i in inputs]
        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="payroll") as pool:
            return list(pool.map(self._calculator.calculate, inputs))

    def _read_month(self, *, month: str, employee_id: Optional[int]) -> MonthReadSet:
        year, month_num = parse_month(month)
        start = date(year, month_num, 1)
        end = date(year, month_num, days_in_month(year, month_num))

        attendance = self._attendance.list_for_period(start_date=start, end_date=end, user_id=employee_id)
        grace = {g.grace_date: g.minutes for g in self._attendance.list_grace_periods(start_date=start, end_date=end)}
        tasks = self._timesheets.list_tasks_assigned(start_date=start, end_date=end, user_id=employee_id)
        entries = self._timesheets.list_entries(
            task_ids=[t.task_id for t in tasks], start_date=start, end_date=end, user_id=employee_id
        )
        existing = self._payroll.list_for_month(month=month, user_id=employee_id)
        policies = self._policies.list_active(user_id=employee_id)

        user_ids = {r.user_id for r in attendance} | {r.user_id for r in existing}
        if employee_id:
            user_ids |= {p.user_id for p in policies if p.user_id == employee_id}
        names = {e.user_id: e.display_name for e in self._users.list_by_ids(sorted(user_ids))}

        return MonthReadSet(
            attendance=attendance,
            grace_minutes=grace,
            policies=policies,
            adjustments=self._adjustments.list_for_month(month=month, user_id=employee_id),
            advances=self._advances.list_active(user_id=employee_id),
            tasks=tasks,
            timesheet_entries=entries,
            existing_user_ids=frozenset(r.user_id for r in existing),
            names=names,
        )

    @staticmethod
    def _build_inputs(
        reads: MonthReadSet, *, month: str, employee_id: Optional[int], now: datetime
    ) -> list[EmployeeMonthInput]:
        attendance_by_user = defaultdict(list)
        for r in reads.attendance:
            attendance_by_user[r.user_id].append(r)
        policies_by_user = defaultdict(list)
        for p in reads.policies:
            policies_by_user[p.user_id].append(p)
        adjustments_by_user = defaultdict(list)
        for a in reads.adjustments:
            adjustments_by_user[a.user_id].append(a)
        advances_by_user = defaultdict(list)
        for a in reads.advances:
            advances_by_user[a.user_id].append(a)
        entries_by_user = defaultdict(list)
        for e in reads.timesheet_entries:
            entries_by_user[e.user_id].append(e)

        user_ids = set(attendance_by_user) | set(reads.existing_user_ids)
        if employee_id:
            # An explicit filter also reaches employees known only by an active policy.
            user_ids = {employee_id} & (user_ids | set(policies_by_user))

        return [
            EmployeeMonthInput(
                user_id=user_id,
                employee_name=reads.names.get(user_id),
                month=month,
                policies=tuple(policies_by_user[user_id]),
                attendance=tuple(attendance_by_user[user_id]),
                tasks=tuple(t for t in reads.tasks if user_id in t.assignee_ids),
                timesheet_entries=tuple(entries_by_user[user_id]),
                adjustments=tuple(adjustments_by_user[user_id]),
                advances=tuple(advances_by_user[user_id]),
                grace_minutes=reads.grace_minutes,
                now=now,
            )
            for user_id in sorted(user_ids)
        ]
