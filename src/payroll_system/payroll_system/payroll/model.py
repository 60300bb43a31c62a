from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..adjustments.model import AdjustmentRecord
from ..advances.model import AdvanceRecord
from ..attendance.model import AttendanceRecord
from ..common.money import ZERO
from ..core.enums import PayrollStatus, UpsertAction
from ..policies.model import CompensationPolicy
from ..timesheets.model import TaskAssignment, TimesheetEntry


@dataclass(frozen=True)
class EmployeeMonthInput:
    """Everything the calculator needs for one employee and month, already fetched."""

    user_id: int
    employee_name: Optional[str]
    month: str
    policies: Sequence[CompensationPolicy] = ()
    attendance: Sequence[AttendanceRecord] = ()
    tasks: Sequence[TaskAssignment] = ()
    timesheet_entries: Sequence[TimesheetEntry] = ()
    adjustments: Sequence[AdjustmentRecord] = ()
    advances: Sequence[AdvanceRecord] = ()
    grace_minutes: Mapping[str, int] = field(default_factory=dict)
    now: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollResult:
    """Computed salary of one employee for one month (the fields persisted on the record)."""

    user_id: int
    employee_name: str
    month: str
    has_policy: bool

    # Attendance
    total_working_days: int
    total_paid_days: Decimal
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
    not_marked_days: int
    not_marked_dates: list[str]
    attendance_percentage: int

    # Rates
    per_day_rate: Decimal = ZERO
    daily_rate: Decimal = ZERO

    # Earnings
    basic_salary: Decimal = ZERO
    hra: Decimal = ZERO
    travelling_allowance: Decimal = ZERO
    children_education_allowance: Decimal = ZERO
    fixed_incentive: Decimal = ZERO
    employer_incentive: Decimal = ZERO
    earned_gross: Decimal = ZERO
    base_salary: Decimal = ZERO

    # Attendance-driven penalties
    attendance_adjustments: Decimal = ZERO
    daily_details: list[dict] = field(default_factory=list)
    timesheet_penalty_deduction: Decimal = ZERO
    penalty_details: list[dict] = field(default_factory=list)

    # Statutory, employee side
    employee_pf: Decimal = ZERO
    employee_esi: Decimal = ZERO
    labour_welfare_employee: Decimal = ZERO
    total_employee_deduction: Decimal = ZERO

    # Statutory, employer side
    employer_pf: Decimal = ZERO
    employer_esi: Decimal = ZERO
    labour_welfare_employer: Decimal = ZERO
    ex_gratia: Decimal = ZERO
    total_employer_contribution: Decimal = ZERO

    late_penalty: Decimal = ZERO
    absent_deduction: Decimal = ZERO

    additions: Decimal = ZERO
    other_deductions: Decimal = ZERO
    adjustments_net: Decimal = ZERO
    advance_recovery: Decimal = ZERO

    gross_salary: Decimal = ZERO
    total_deductions: Decimal = ZERO
    net_salary: Decimal = ZERO
    cash_in_hand: Decimal = ZERO
    ctc_monthly: Decimal = ZERO
    ctc_annual: Decimal = ZERO

    def to_fields(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PayrollRecord:
    """Stored payroll row: computed fields plus workflow state."""

    payroll_id: int
    user_id: int
    month: str
    fields: Mapping[str, Any]
    status: PayrollStatus = PayrollStatus.DRAFT
    locked: bool = False
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    payment_date: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.fields,
            "id": self.payroll_id,
            "user_id": self.user_id,
            "month": self.month,
            "status": self.status.value,
            "locked": self.locked,
            "approved_by": self.approved_by,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "payment_date": self.payment_date,
        }


@dataclass(frozen=True)
class UpsertOutcome:
    action: UpsertAction
    record: PayrollRecord

    def to_dict(self) -> dict[str, Any]:
        return {**self.record.to_dict(), "action": self.action.value}
