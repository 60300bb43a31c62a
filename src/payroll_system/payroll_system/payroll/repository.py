from __future__ import annotations

from datetime import datetime
from typing import Any, ContextManager, Mapping, Optional, Protocol, Sequence

from ..advances.model import AdvanceRecord
from ..core.enums import PayrollStatus
from .model import PayrollRecord


class PayrollSlot(Protocol):
    """The (employee, month) row held for writing.

    ``existing`` is read under the same lock the write happens under, so a lock
    set by another actor cannot slip in between the check and the write.
    """

    existing: Optional[PayrollRecord]

    def insert(self, fields: Mapping[str, Any]) -> PayrollRecord:
        """Raises PersistenceConflictError when another writer created the row first."""

        raise NotImplementedError

    def update(self, fields: Mapping[str, Any]) -> PayrollRecord:
        raise NotImplementedError


class PaymentSlot(Protocol):
    """A payroll row held for payment together with its owner's active advances.

    The status check, the advance balances and the paid status are all written
    in the one transaction that holds the row.
    """

    existing: Optional[PayrollRecord]

    def active_advances(self) -> Sequence[AdvanceRecord]:
        raise NotImplementedError

    def pay(self, *, payment_date: str, advances: Sequence[AdvanceRecord]) -> PayrollRecord:
        """Save the reduced advance balances and mark the row paid."""

        raise NotImplementedError


class PayrollRepository(Protocol):
    def list_for_month(self, *, month: str, user_id: Optional[int] = None) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def hold(self, *, user_id: int, month: str) -> ContextManager[PayrollSlot]:
        raise NotImplementedError

    def settle(self, *, payroll_id: int) -> ContextManager[PaymentSlot]:
        raise NotImplementedError

    def update_workflow(
        self,
        *,
        payroll_id: int,
        status: PayrollStatus,
        locked: bool,
        approved_by: Optional[int] = None,
        approved_at: Optional[datetime] = None,
    ) -> bool:
        raise NotImplementedError
