from __future__ import annotations

from typing import Optional, Sequence

from ..common.money import to_decimal
from ..core.enums import AdjustmentType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AdjustmentRecord
from .repository import AdjustmentRepository


class MySQLAdjustmentRepository(AdjustmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_month(self, *, month: str, user_id: Optional[int] = None) -> Sequence[AdjustmentRecord]:
        where = ["month=%s"]
        params: list = [month]
        if user_id:
            where.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT adjustment_id, user_id, month, adjustment_type, amount, status, adjustment_date, reason
                FROM salary_adjustments
                WHERE {' AND '.join(where)}
                ORDER BY adjustment_id
                """,
                tuple(params),
            )
            return [
                AdjustmentRecord(
                    adjustment_id=int(r["adjustment_id"]),
                    user_id=int(r["user_id"]),
                    month=r["month"],
                    adjustment_type=AdjustmentType(r["adjustment_type"]),
                    amount=to_decimal(r["amount"]),
                    status=RequestStatus(r["status"]),
                    adjustment_date=r["adjustment_date"].isoformat() if r.get("adjustment_date") else None,
                    reason=r.get("reason"),
                )
                for r in fetchall(cur)
            ]
