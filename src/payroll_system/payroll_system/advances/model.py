from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import AdvanceStatus


@dataclass(frozen=True)
class AdvanceRecord:
    """Salary advance recovered in monthly installments."""

    advance_id: int
    user_id: int
    advance_amount: Decimal
    installment_amount: Decimal
    remaining_balance: Decimal
    recovery_start_month: str
    status: AdvanceStatus = AdvanceStatus.ACTIVE
