from __future__ import annotations

import logging
from typing import Iterable, Optional

from .model import CompensationPolicy

logger = logging.getLogger(__name__)


class PolicyResolver:
    """Pick the active compensation policy of one employee.

    A missing policy is not an error: callers get None and fall back to an
    attendance-only result.
    """

    def resolve(self, user_id: int, policies: Iterable[CompensationPolicy]) -> Optional[CompensationPolicy]:
        active = [p for p in policies if p.user_id == user_id and p.is_active]
        if not active:
            return None
        if len(active) > 1:
            logger.warning(
                "User %s has %d active policies; using policy %s", user_id, len(active), active[0].policy_id
            )
        return active[0]
