from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..advances.recovery import AdvanceRecoveryResolver
from ..common.datetime_utils import now_local, parse_iso_date
from ..core.enums import PayrollStatus, Role
from ..core.exceptions import AuthorizationError, RecordNotFoundError, ValidationError
from .model import PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollWorkflowService:
    """Status transitions on saved payroll records.

    Approved and paid records stay locked so a later ``compute`` run cannot
    overwrite what was signed off.
    """

    def __init__(
        self,
        payroll: PayrollRepository,
        *,
        advance_resolver: Optional[AdvanceRecoveryResolver] = None,
    ):
        self._payroll = payroll
        self._resolver = advance_resolver or AdvanceRecoveryResolver()

    def lock(self, *, current_role: Role, record_id: int) -> PayrollRecord:
        record = self._get_for_admin(current_role, record_id)
        if record.status == PayrollStatus.PAID:
            raise ValidationError("Paid payroll is already final")
        return self._transition(record, status=PayrollStatus.LOCKED, locked=True)

    def unlock(self, *, current_role: Role, record_id: int) -> PayrollRecord:
        record = self._get_for_admin(current_role, record_id)
        if record.status in (PayrollStatus.APPROVED, PayrollStatus.PAID):
            raise ValidationError(f"Cannot unlock payroll that is {record.status.value}")
        return self._transition(record, status=PayrollStatus.DRAFT, locked=False)

    def approve(self, *, current_role: Role, record_id: int, approved_by: int) -> PayrollRecord:
        record = self._get_for_admin(current_role, record_id)
        if record.status == PayrollStatus.PAID:
            raise ValidationError("Payroll has already been paid")
        return self._transition(
            record,
            status=PayrollStatus.APPROVED,
            locked=True,
            approved_by=int(approved_by),
            approved_at=now_local(),
        )

    def mark_paid(
        self,
        *,
        current_role: Role,
        record_id: int,
        payment_date: Optional[str] = None,
    ) -> PayrollRecord:
        """Mark a record paid and recover this month's advance installments.

        Runs in one transaction holding the payroll row: if the status write
        fails, no advance balance is reduced.
        """

        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change payroll status")
        try:
            paid_on = parse_iso_date(payment_date).isoformat() if payment_date else date.today().isoformat()
        except ValueError as err:
            raise ValidationError("payment_date must be given as YYYY-MM-DD") from err

        with self._payroll.settle(payroll_id=int(record_id)) as slot:
            record = slot.existing
            if record is None:
                raise RecordNotFoundError(f"Payroll record {record_id} not found")
            if record.status == PayrollStatus.PAID:
                raise ValidationError("Payroll has already been paid")

            updated = self._resolver.apply(slot.active_advances(), month=record.month)
            paid = slot.pay(payment_date=paid_on, advances=updated)

        if updated:
            logger.info(
                "Recovered %d advance installment(s) for user %s in %s", len(updated), record.user_id, record.month
            )
        logger.info("Payroll %s: %s -> %s", record.payroll_id, record.status.value, paid.status.value)
        return paid

    def _get_for_admin(self, current_role: Role, record_id: int) -> PayrollRecord:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change payroll status")
        record = self._payroll.get_by_id(int(record_id))
        if record is None:
            raise RecordNotFoundError(f"Payroll record {record_id} not found")
        return record

    def _transition(
        self,
        record: PayrollRecord,
        *,
        status: PayrollStatus,
        locked: bool,
        approved_by: Optional[int] = None,
        approved_at: Optional[datetime] = None,
    ) -> PayrollRecord:
        ok = self._payroll.update_workflow(
            payroll_id=record.payroll_id,
            status=status,
            locked=locked,
            approved_by=approved_by,
            approved_at=approved_at,
        )
        if not ok:
            raise RecordNotFoundError(f"Payroll record {record.payroll_id} not found")
        logger.info("Payroll %s: %s -> %s", record.payroll_id, record.status.value, status.value)
        return self._payroll.get_by_id(record.payroll_id)
