from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord, GracePeriod
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_period(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        where = ["work_date BETWEEN %s AND %s"]
        params: list = [start_date, end_date]
        if user_id:
            where.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, user_id, work_date, status, check_in_time, check_out_time,
                       is_late, late_minutes, is_early_checkout
                FROM attendance_records
                WHERE {' AND '.join(where)}
                ORDER BY user_id, work_date
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            return [
                AttendanceRecord(
                    attendance_id=int(r["attendance_id"]),
                    user_id=int(r["user_id"]),
                    work_date=r["work_date"].isoformat(),
                    status=AttendanceStatus(r["status"]),
                    check_in_time=r.get("check_in_time"),
                    check_out_time=r.get("check_out_time"),
                    is_late=bool(r.get("is_late")),
                    late_minutes=int(r.get("late_minutes") or 0),
                    is_early_checkout=bool(r.get("is_early_checkout")),
                )
                for r in rows
            ]

    def list_grace_periods(self, *, start_date: date, end_date: date) -> Sequence[GracePeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT grace_date, minutes
                FROM grace_periods
                WHERE grace_date BETWEEN %s AND %s
                ORDER BY grace_date
                """,
                (start_date, end_date),
            )
            return [
                GracePeriod(grace_date=r["grace_date"].isoformat(), minutes=int(r["minutes"]))
                for r in fetchall(cur)
            ]
