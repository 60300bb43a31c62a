from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class TaskAssignment:
    """A task handed to one or more employees; the assignment time starts the timesheet deadline."""

    task_id: int
    title: str
    assignee_ids: tuple[int, ...]
    assigned_at: datetime

    @property
    def assigned_date(self) -> str:
        return self.assigned_at.date().isoformat()


@dataclass(frozen=True)
class TimesheetEntry:
    user_id: int
    entry_date: str
    task_id: Optional[int] = None
    task_title: Optional[str] = None

    def covers(self, task: TaskAssignment) -> bool:
        if self.task_id is not None and self.task_id == task.task_id:
            return True
        return self.task_title == task.title and self.entry_date == task.assigned_date
