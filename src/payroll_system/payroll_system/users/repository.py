from __future__ import annotations

from typing import Protocol, Sequence

from .model import Employee


class UserRepository(Protocol):
    """Employee directory used for display-name resolution only."""

    def list_by_ids(self, user_ids: Sequence[int]) -> Sequence[Employee]:
        raise NotImplementedError
