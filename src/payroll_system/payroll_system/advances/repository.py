from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AdvanceRecord


class AdvanceRepository(Protocol):
    def list_active(self, *, user_id: Optional[int] = None) -> Sequence[AdvanceRecord]:
        raise NotImplementedError
