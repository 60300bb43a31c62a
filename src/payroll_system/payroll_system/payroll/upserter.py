from __future__ import annotations

import logging

from ..core.constants import DEFAULT_UPSERT_ATTEMPTS
from ..core.enums import UpsertAction
from ..core.exceptions import PersistenceConflictError
from .model import PayrollResult, UpsertOutcome
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollUpserter:
    """Save a computed result as the (employee, month) payroll record.

    Locked records are reported back untouched. A create that loses a race
    against a concurrent writer is retried, and the retry finds the row and
    updates it (or skips it if it is locked by then).
    """

    def __init__(self, payroll: PayrollRepository, *, attempts: int = DEFAULT_UPSERT_ATTEMPTS):
        self._payroll = payroll
        self._attempts = max(int(attempts), 1)

    def upsert(self, result: PayrollResult) -> UpsertOutcome:
        fields = result.to_fields()
        last_error: PersistenceConflictError | None = None

        for attempt in range(1, self._attempts + 1):
            try:
                with self._payroll.hold(user_id=result.user_id, month=result.month) as slot:
                    existing = slot.existing
                    if existing is None:
                        return UpsertOutcome(UpsertAction.CREATED, slot.insert(fields))
                    if existing.locked:
                        logger.info("Payroll %s (user %s, %s) is locked; skipped", existing.payroll_id, result.user_id, result.month)
                        return UpsertOutcome(UpsertAction.SKIPPED_LOCKED, existing)
                    return UpsertOutcome(UpsertAction.UPDATED, slot.update(fields))
            except PersistenceConflictError as err:
                last_error = err
                logger.warning(
                    "Upsert conflict for user %s in %s (attempt %d/%d): %s",
                    result.user_id,
                    result.month,
                    attempt,
                    self._attempts,
                    err,
                )

        raise PersistenceConflictError(
            f"Could not save payroll for user {result.user_id} in {result.month} after {self._attempts} attempts"
        ) from last_error
