from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

import pytest

from src.payroll_system.payroll_system.attendance.model import AttendanceRecord
from src.payroll_system.payroll_system.common.datetime_utils import month_dates, parse_month
from src.payroll_system.payroll_system.core.enums import AttendanceStatus, PayrollStatus
from src.payroll_system.payroll_system.core.exceptions import PersistenceConflictError, RecordNotFoundError
from src.payroll_system.payroll_system.payroll.model import PayrollRecord
from src.payroll_system.payroll_system.payroll.service import PayrollService
from src.payroll_system.payroll_system.payroll.workflow import PayrollWorkflowService
from src.payroll_system.payroll_system.policies.model import CompensationPolicy
from src.payroll_system.payroll_system.users.model import Employee


def _in_range(value: str, start: date, end: date) -> bool:
    return start.isoformat() <= value <= end.isoformat()


class FakeAttendanceRepo:
    def __init__(self):
        self.records: list[AttendanceRecord] = []
        self.grace_periods = []
        self.calls = 0

    def list_for_period(self, *, start_date, end_date, user_id=None):
        self.calls += 1
        return [
            r
            for r in self.records
            if _in_range(r.work_date, start_date, end_date) and (not user_id or r.user_id == user_id)
        ]

    def list_grace_periods(self, *, start_date, end_date):
        return [g for g in self.grace_periods if _in_range(g.grace_date, start_date, end_date)]


class FakePolicyRepo:
    def __init__(self):
        self.policies: list[CompensationPolicy] = []

    def list_active(self, *, user_id=None):
        return [p for p in self.policies if p.is_active and (not user_id or p.user_id == user_id)]


class FakeAdjustmentRepo:
    def __init__(self):
        self.adjustments = []

    def list_for_month(self, *, month, user_id=None):
        return [a for a in self.adjustments if a.month == month and (not user_id or a.user_id == user_id)]


class FakeAdvanceRepo:
    def __init__(self):
        self.advances = {}

    def add(self, advance):
        self.advances[advance.advance_id] = advance

    def list_active(self, *, user_id=None):
        return [
            a
            for a in self.advances.values()
            if a.status.value == "active" and (not user_id or a.user_id == user_id)
        ]


class FakeTimesheetRepo:
    def __init__(self):
        self.tasks = []
        self.entries = []

    def list_tasks_assigned(self, *, start_date, end_date, user_id=None):
        return [
            t
            for t in self.tasks
            if _in_range(t.assigned_date, start_date, end_date) and (not user_id or user_id in t.assignee_ids)
        ]

    def list_entries(self, *, task_ids, start_date, end_date, user_id=None):
        return [e for e in self.entries if not user_id or e.user_id == user_id]


class FakeUserRepo:
    def __init__(self):
        self.users: dict[int, Employee] = {}

    def list_by_ids(self, user_ids):
        return [self.users[u] for u in user_ids if u in self.users]


class _FakeSlot:
    def __init__(self, repo: "FakePayrollRepo", user_id: int, month: str):
        self._repo = repo
        self._user_id = user_id
        self._month = month
        self.existing = repo.records.get((user_id, month))

    def insert(self, fields):
        if self._repo.insert_conflicts > 0:
            # Another writer wins the race and creates the row first.
            self._repo.insert_conflicts -= 1
            self._repo.put(user_id=self._user_id, month=self._month, fields={})
            raise PersistenceConflictError("duplicate (user_id, month)")
        return self._repo.put(user_id=self._user_id, month=self._month, fields=dict(fields))

    def update(self, fields):
        assert not self.existing.locked
        updated = replace(self.existing, fields=dict(fields))
        self._repo.records[(self._user_id, self._month)] = updated
        return updated


class _FakePaymentSlot:
    def __init__(self, repo: "FakePayrollRepo", payroll_id: int):
        self._repo = repo
        self.existing = repo.get_by_id(payroll_id)
        self.staged_advances = []
        self.staged_record = None

    def active_advances(self):
        return self._repo.advances.list_active(user_id=self.existing.user_id)

    def pay(self, *, payment_date, advances):
        self.staged_advances = list(advances)
        if self._repo.fail_payment:
            raise RecordNotFoundError(f"Payroll record {self.existing.payroll_id} could not be marked paid")
        self.staged_record = replace(self.existing, status=PayrollStatus.PAID, locked=True, payment_date=payment_date)
        return self.staged_record

    def commit(self):
        for a in self.staged_advances:
            self._repo.advances.advances[a.advance_id] = a
        if self.staged_record is not None:
            self._repo.records[(self.existing.user_id, self.existing.month)] = self.staged_record


class FakePayrollRepo:
    def __init__(self):
        self.records: dict[tuple[int, str], PayrollRecord] = {}
        self._next_id = 1
        self.insert_conflicts = 0
        self.always_conflict = False
        self.fail_payment = False
        self.advances = FakeAdvanceRepo()

    def put(self, *, user_id, month, fields, locked=False, status=PayrollStatus.DRAFT) -> PayrollRecord:
        existing = self.records.get((user_id, month))
        payroll_id = existing.payroll_id if existing else self._next_id
        if not existing:
            self._next_id += 1
        record = PayrollRecord(
            payroll_id=payroll_id, user_id=user_id, month=month, fields=fields, status=status, locked=locked
        )
        self.records[(user_id, month)] = record
        return record

    def list_for_month(self, *, month, user_id=None):
        return [r for (u, m), r in self.records.items() if m == month and (not user_id or u == user_id)]

    def get_by_id(self, payroll_id):
        for r in self.records.values():
            if r.payroll_id == int(payroll_id):
                return r
        return None

    @contextmanager
    def hold(self, *, user_id, month):
        if self.always_conflict:
            raise PersistenceConflictError("lock wait timeout")
        yield _FakeSlot(self, user_id, month)

    @contextmanager
    def settle(self, *, payroll_id):
        slot = _FakePaymentSlot(self, payroll_id)
        yield slot
        slot.commit()

    def update_workflow(
        self, *, payroll_id, status, locked, approved_by=None, approved_at=None
    ):
        record = self.get_by_id(payroll_id)
        if record is None:
            return False
        self.records[(record.user_id, record.month)] = replace(
            record,
            status=status,
            locked=locked,
            approved_by=approved_by if approved_by is not None else record.approved_by,
            approved_at=approved_at if approved_at is not None else record.approved_at,
        )
        return True


class Repos:
    def __init__(self):
        self.attendance = FakeAttendanceRepo()
        self.policies = FakePolicyRepo()
        self.adjustments = FakeAdjustmentRepo()
        self.advances = FakeAdvanceRepo()
        self.timesheets = FakeTimesheetRepo()
        self.users = FakeUserRepo()
        self.payroll = FakePayrollRepo()
        self.payroll.advances = self.advances


@pytest.fixture
def repos() -> Repos:
    return Repos()


@pytest.fixture
def payroll_service(repos) -> PayrollService:
    return PayrollService(
        repos.attendance,
        repos.policies,
        repos.adjustments,
        repos.advances,
        repos.timesheets,
        repos.users,
        repos.payroll,
        max_workers=2,
    )


@pytest.fixture
def workflow_service(repos) -> PayrollWorkflowService:
    return PayrollWorkflowService(repos.payroll)


@pytest.fixture
def month_attendance():
    """Build a full month of on-time attendance, with per-date overrides."""

    def build(user_id: int, month: str, overrides=None) -> list[AttendanceRecord]:
        overrides = overrides or {}
        year, month_num = parse_month(month)
        records = []
        for day in month_dates(year, month_num):
            if day in overrides:
                value = overrides[day]
                if value is None:
                    continue
                if isinstance(value, AttendanceRecord):
                    records.append(value)
                    continue
                records.append(AttendanceRecord(user_id=user_id, work_date=day, status=value))
                continue
            d = date.fromisoformat(day)
            records.append(
                AttendanceRecord(
                    user_id=user_id,
                    work_date=day,
                    status=AttendanceStatus.CHECKED_OUT,
                    check_in_time=datetime(d.year, d.month, d.day, 9, 55),
                    check_out_time=datetime(d.year, d.month, d.day, 18, 5),
                )
            )
        return records

    return build


@pytest.fixture
def basic_policy():
    def build(user_id: int = 1, **kwargs) -> CompensationPolicy:
        kwargs.setdefault("basic_salary", Decimal("30000"))
        return CompensationPolicy(policy_id=100 + user_id, user_id=user_id, **kwargs)

    return build
