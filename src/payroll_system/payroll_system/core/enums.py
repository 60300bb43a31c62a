from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Actor role passed explicitly into services."""

    ADMIN = "admin"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Day status as stored by the attendance subsystem."""

    PRESENT = "present"
    CHECKED_OUT = "checked_out"
    WORK_FROM_HOME = "work_from_home"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    LEAVE = "leave"
    SICK_LEAVE = "sick_leave"
    CASUAL_LEAVE = "casual_leave"
    WEEKOFF = "weekoff"
    HOLIDAY = "holiday"

    @property
    def is_present(self) -> bool:
        return self in PRESENT_STATUSES

    @property
    def is_paid_leave(self) -> bool:
        return self in PAID_LEAVE_STATUSES


PRESENT_STATUSES = frozenset(
    {AttendanceStatus.PRESENT, AttendanceStatus.CHECKED_OUT, AttendanceStatus.WORK_FROM_HOME}
)
PAID_LEAVE_STATUSES = frozenset(
    {AttendanceStatus.LEAVE, AttendanceStatus.SICK_LEAVE, AttendanceStatus.CASUAL_LEAVE}
)


class AdjustmentType(str, Enum):
    BONUS = "bonus"
    INCENTIVE = "incentive"
    REIMBURSEMENT = "reimbursement"
    ALLOWANCE = "allowance"
    PENALTY = "penalty"
    DEDUCTION = "deduction"
    PENALTY_WAIVER = "penalty_waiver"

    @property
    def is_addition(self) -> bool:
        return self in ADDITIVE_ADJUSTMENT_TYPES


ADDITIVE_ADJUSTMENT_TYPES = frozenset(
    {AdjustmentType.BONUS, AdjustmentType.INCENTIVE, AdjustmentType.REIMBURSEMENT, AdjustmentType.ALLOWANCE}
)


class RequestStatus(str, Enum):
    """Approval state shared by adjustments and other requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AdvanceStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class PayrollStatus(str, Enum):
    DRAFT = "draft"
    LOCKED = "locked"
    APPROVED = "approved"
    PAID = "paid"


class UpsertAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED_LOCKED = "skipped_locked"
