from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import AdjustmentType, RequestStatus


@dataclass(frozen=True)
class AdjustmentRecord:
    """Ad-hoc salary adjustment raised for one employee and month."""

    adjustment_id: int
    user_id: int
    month: str
    adjustment_type: AdjustmentType
    amount: Decimal
    status: RequestStatus
    adjustment_date: Optional[str] = None
    reason: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.status == RequestStatus.APPROVED

    @property
    def is_waiver(self) -> bool:
        return self.adjustment_type == AdjustmentType.PENALTY_WAIVER
