from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CompensationPolicy


class PolicyRepository(Protocol):
    def list_active(self, *, user_id: Optional[int] = None) -> Sequence[CompensationPolicy]:
        """Active policies, most recently updated first."""

        raise NotImplementedError
