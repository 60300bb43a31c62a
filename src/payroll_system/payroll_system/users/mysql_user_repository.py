from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import Employee
from .repository import UserRepository


def _row_to_employee(row: dict) -> Employee:
    return Employee(
        user_id=int(row["user_id"]),
        full_name=row.get("full_name") or "",
        email=row.get("email"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_by_ids(self, user_ids: Sequence[int]) -> Sequence[Employee]:
        if not user_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, full_name, email
                FROM users
                WHERE user_id IN ({in_clause(user_ids)})
                """,
                tuple(int(u) for u in user_ids),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]
