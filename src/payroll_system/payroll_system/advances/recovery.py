from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable

from ..common.money import ZERO
from ..core.enums import AdvanceStatus
from .model import AdvanceRecord


@dataclass(frozen=True)
class Installment:
    advance: AdvanceRecord
    amount: Decimal


class AdvanceRecoveryResolver:
    """Installments due from active advances for a month.

    ``recovery_start_month`` and ``month`` are both fixed-width YYYY-MM, so a plain
    string comparison orders them correctly.
    """

    def installments(self, advances: Iterable[AdvanceRecord], *, month: str) -> list[Installment]:
        due: list[Installment] = []
        for adv in advances:
            if adv.status != AdvanceStatus.ACTIVE or adv.recovery_start_month > month:
                continue
            amount = max(min(adv.installment_amount, adv.remaining_balance), ZERO)
            if amount:
                due.append(Installment(advance=adv, amount=amount))
        return due

    def recovery_for(self, advances: Iterable[AdvanceRecord], *, month: str) -> Decimal:
        return sum((i.amount for i in self.installments(advances, month=month)), ZERO)

    def apply(self, advances: Iterable[AdvanceRecord], *, month: str) -> list[AdvanceRecord]:
        """Balances after this month's installments are paid; advances reaching zero close."""

        updated: list[AdvanceRecord] = []
        for inst in self.installments(advances, month=month):
            remaining = inst.advance.remaining_balance - inst.amount
            status = AdvanceStatus.CLOSED if remaining <= ZERO else AdvanceStatus.ACTIVE
            updated.append(replace(inst.advance, remaining_balance=max(remaining, ZERO), status=status))
        return updated
