from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import TaskAssignment, TimesheetEntry
from .repository import TimesheetRepository


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_tasks_assigned(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[TaskAssignment]:
        where = ["t.created_at >= %s", "t.created_at < %s + INTERVAL 1 DAY"]
        params: list = [datetime.combine(start_date, time.min), end_date]
        if user_id:
            where.append("ta.user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT t.task_id, t.title, t.created_at, ta.user_id
                FROM tasks t
                JOIN task_assignees ta ON ta.task_id = t.task_id
                WHERE {' AND '.join(where)}
                ORDER BY t.created_at, t.task_id
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        assignees: dict[int, list[int]] = defaultdict(list)
        heads: dict[int, dict] = {}
        for r in rows:
            task_id = int(r["task_id"])
            heads.setdefault(task_id, r)
            assignees[task_id].append(int(r["user_id"]))

        return [
            TaskAssignment(
                task_id=task_id,
                title=r["title"],
                assignee_ids=tuple(assignees[task_id]),
                assigned_at=r["created_at"],
            )
            for task_id, r in heads.items()
        ]

    def list_entries(
        self,
        *,
        task_ids: Sequence[int],
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[TimesheetEntry]:
        match = ["entry_date BETWEEN %s AND %s"]
        params: list = [start_date, end_date]
        if task_ids:
            match.append(f"task_id IN ({in_clause(task_ids)})")
            params.extend(int(t) for t in task_ids)

        sql = f"""
            SELECT user_id, task_id, task_title, entry_date
            FROM timesheet_entries
            WHERE ({' OR '.join(match)})
        """
        if user_id:
            sql += " AND user_id=%s"
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                TimesheetEntry(
                    user_id=int(r["user_id"]),
                    entry_date=r["entry_date"].isoformat(),
                    task_id=int(r["task_id"]) if r.get("task_id") is not None else None,
                    task_title=r.get("task_title"),
                )
                for r in fetchall(cur)
            ]
