from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Any, Iterator, Mapping, Optional, Sequence

import mysql.connector

from ..advances.model import AdvanceRecord
from ..advances.mysql_advance_repository import ADVANCE_COLUMNS, row_to_advance
from ..core.enums import AdvanceStatus, PayrollStatus
from ..core.exceptions import PersistenceConflictError, RecordNotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_write_conflict
from .model import PayrollRecord
from .repository import PaymentSlot, PayrollRepository, PayrollSlot

_COLUMNS = """
    payroll_id, user_id, month, status, locked, details,
    approved_by, approved_at, payment_date
"""

# Scalar copies of a few computed fields, for reporting queries.
_SUMMARY_FIELDS = ("has_policy", "total_paid_days", "base_salary", "gross_salary", "total_deductions", "net_salary")


def _row_to_record(r: dict) -> PayrollRecord:
    details = r.get("details") or "{}"
    if isinstance(details, (bytes, bytearray)):
        details = details.decode("utf-8")
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        user_id=int(r["user_id"]),
        month=r["month"],
        fields=json.loads(details) if isinstance(details, str) else dict(details),
        status=PayrollStatus(r["status"]),
        locked=bool(r["locked"]),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        payment_date=r["payment_date"].isoformat() if r.get("payment_date") else None,
    )


def _summary_params(fields: Mapping[str, Any]) -> tuple:
    return tuple(fields.get(name) for name in _SUMMARY_FIELDS)


class _MySQLPayrollSlot(PayrollSlot):
    def __init__(self, cur, *, user_id: int, month: str, existing: Optional[PayrollRecord]):
        self._cur = cur
        self._user_id = user_id
        self._month = month
        self.existing = existing

    def insert(self, fields: Mapping[str, Any]) -> PayrollRecord:
        try:
            self._cur.execute(
                """
                INSERT INTO payroll_records(
                    user_id, month, status, locked,
                    has_policy, total_paid_days, base_salary, gross_salary, total_deductions, net_salary,
                    details
                )
                VALUES(%s,%s,%s,0,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    self._user_id,
                    self._month,
                    PayrollStatus.DRAFT.value,
                    *_summary_params(fields),
                    json.dumps(fields, default=str),
                ),
            )
        except mysql.connector.Error as err:
            if is_write_conflict(err):
                raise PersistenceConflictError(
                    f"Payroll for user {self._user_id} in {self._month} was created concurrently"
                ) from err
            raise
        return PayrollRecord(
            payroll_id=int(self._cur.lastrowid),
            user_id=self._user_id,
            month=self._month,
            fields=dict(fields),
        )

    def update(self, fields: Mapping[str, Any]) -> PayrollRecord:
        try:
            self._cur.execute(
                """
                UPDATE payroll_records
                SET has_policy=%s, total_paid_days=%s, base_salary=%s, gross_salary=%s,
                    total_deductions=%s, net_salary=%s, details=%s
                WHERE payroll_id=%s AND locked=0
                """,
                (*_summary_params(fields), json.dumps(fields, default=str), self.existing.payroll_id),
            )
        except mysql.connector.Error as err:
            if is_write_conflict(err):
                raise PersistenceConflictError(
                    f"Payroll {self.existing.payroll_id} could not be updated"
                ) from err
            raise
        return PayrollRecord(
            payroll_id=self.existing.payroll_id,
            user_id=self.existing.user_id,
            month=self.existing.month,
            fields=dict(fields),
            status=self.existing.status,
            locked=self.existing.locked,
            approved_by=self.existing.approved_by,
            approved_at=self.existing.approved_at,
            payment_date=self.existing.payment_date,
        )


class _MySQLPaymentSlot(PaymentSlot):
    def __init__(self, cur, *, existing: Optional[PayrollRecord]):
        self._cur = cur
        self.existing = existing

    def active_advances(self) -> Sequence[AdvanceRecord]:
        self._cur.execute(
            f"""
            SELECT {ADVANCE_COLUMNS} FROM salary_advances
            WHERE user_id=%s AND status=%s
            ORDER BY advance_id
            FOR UPDATE
            """,
            (self.existing.user_id, AdvanceStatus.ACTIVE.value),
        )
        return [row_to_advance(r) for r in fetchall(self._cur)]

    def pay(self, *, payment_date: str, advances: Sequence[AdvanceRecord]) -> PayrollRecord:
        if advances:
            self._cur.executemany(
                "UPDATE salary_advances SET remaining_balance=%s, status=%s WHERE advance_id=%s",
                [(a.remaining_balance, a.status.value, a.advance_id) for a in advances],
            )
        self._cur.execute(
            """
            UPDATE payroll_records
            SET status=%s, locked=1, payment_date=%s
            WHERE payroll_id=%s AND status<>%s
            """,
            (PayrollStatus.PAID.value, payment_date, self.existing.payroll_id, PayrollStatus.PAID.value),
        )
        if self._cur.rowcount != 1:
            raise RecordNotFoundError(f"Payroll record {self.existing.payroll_id} could not be marked paid")
        return replace(self.existing, status=PayrollStatus.PAID, locked=True, payment_date=payment_date)


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_month(self, *, month: str, user_id: Optional[int] = None) -> Sequence[PayrollRecord]:
        where = ["month=%s"]
        params: list = [month]
        if user_id:
            where.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_records WHERE {' AND '.join(where)} ORDER BY user_id",
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    @contextmanager
    def hold(self, *, user_id: int, month: str) -> Iterator[PayrollSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM payroll_records WHERE user_id=%s AND month=%s FOR UPDATE",
                    (int(user_id), month),
                )
            except mysql.connector.Error as err:
                if is_write_conflict(err):
                    raise PersistenceConflictError(f"Payroll for user {user_id} in {month} is busy") from err
                raise
            row = fetchone(cur)
            yield _MySQLPayrollSlot(
                cur,
                user_id=int(user_id),
                month=month,
                existing=_row_to_record(row) if row else None,
            )

    @contextmanager
    def settle(self, *, payroll_id: int) -> Iterator[PaymentSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s FOR UPDATE", (int(payroll_id),))
            except mysql.connector.Error as err:
                if is_write_conflict(err):
                    raise PersistenceConflictError(f"Payroll record {payroll_id} is busy") from err
                raise
            row = fetchone(cur)
            yield _MySQLPaymentSlot(cur, existing=_row_to_record(row) if row else None)

    def update_workflow(
        self,
        *,
        payroll_id: int,
        status: PayrollStatus,
        locked: bool,
        approved_by: Optional[int] = None,
        approved_at: Optional[datetime] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET status=%s, locked=%s,
                    approved_by=COALESCE(%s, approved_by),
                    approved_at=COALESCE(%s, approved_at)
                WHERE payroll_id=%s
                """,
                (status.value, int(bool(locked)), approved_by, approved_at, int(payroll_id)),
            )
            return cur.rowcount > 0
