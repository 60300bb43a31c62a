from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ..common.money import ZERO, round_cents
from .model import AdjustmentRecord


@dataclass(frozen=True)
class AdjustmentTotals:
    additions: Decimal = ZERO
    deductions: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.additions - self.deductions


class AdjustmentAggregator:
    """Net approved adjustments; penalty waivers are informational and never counted."""

    def aggregate(self, adjustments: Iterable[AdjustmentRecord]) -> AdjustmentTotals:
        additions = ZERO
        deductions = ZERO
        for adj in adjustments:
            if not adj.is_approved or adj.is_waiver:
                continue
            if adj.adjustment_type.is_addition:
                additions += adj.amount
            else:
                deductions += abs(adj.amount)
        return AdjustmentTotals(additions=round_cents(additions), deductions=round_cents(deductions))
