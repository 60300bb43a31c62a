from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import TaskAssignment, TimesheetEntry


class TimesheetRepository(Protocol):
    def list_tasks_assigned(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[TaskAssignment]:
        raise NotImplementedError

    def list_entries(
        self,
        *,
        task_ids: Sequence[int],
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[TimesheetEntry]:
        """Entries for the given tasks, plus any entry dated inside the period."""

        raise NotImplementedError
