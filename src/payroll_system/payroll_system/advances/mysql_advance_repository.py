from __future__ import annotations

from typing import Optional, Sequence

from ..common.money import to_decimal
from ..core.enums import AdvanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AdvanceRecord
from .repository import AdvanceRepository

ADVANCE_COLUMNS = """
    advance_id, user_id, advance_amount, installment_amount, remaining_balance,
    recovery_start_month, status
"""


def row_to_advance(r: dict) -> AdvanceRecord:
    return AdvanceRecord(
        advance_id=int(r["advance_id"]),
        user_id=int(r["user_id"]),
        advance_amount=to_decimal(r["advance_amount"]),
        installment_amount=to_decimal(r["installment_amount"]),
        remaining_balance=to_decimal(r["remaining_balance"]),
        recovery_start_month=r["recovery_start_month"],
        status=AdvanceStatus(r["status"]),
    )


class MySQLAdvanceRepository(AdvanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, *, user_id: Optional[int] = None) -> Sequence[AdvanceRecord]:
        where = ["status=%s"]
        params: list = [AdvanceStatus.ACTIVE.value]
        if user_id:
            where.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {ADVANCE_COLUMNS} FROM salary_advances WHERE {' AND '.join(where)} ORDER BY advance_id",
                tuple(params),
            )
            return [row_to_advance(r) for r in fetchall(cur)]
