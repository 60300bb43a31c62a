from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AdjustmentRecord


class AdjustmentRepository(Protocol):
    def list_for_month(self, *, month: str, user_id: Optional[int] = None) -> Sequence[AdjustmentRecord]:
        raise NotImplementedError
