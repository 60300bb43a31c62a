from __future__ import annotations

from typing import Optional, Sequence

from ..common.money import to_decimal
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import CompensationPolicy, statutory_rate
from .repository import PolicyRepository

_STATUTORY_FIELDS = (
    "employee_pf",
    "employer_pf",
    "employee_esi",
    "employer_esi",
    "labour_welfare_employee",
    "labour_welfare_employer",
    "ex_gratia",
)

_COMPONENT_FIELDS = (
    "basic_salary",
    "hra",
    "travelling_allowance",
    "children_education_allowance",
    "fixed_incentive",
    "employer_incentive",
)


def _row_to_policy(r: dict) -> CompensationPolicy:
    kwargs = {name: to_decimal(r.get(name)) for name in _COMPONENT_FIELDS}
    for name in _STATUTORY_FIELDS:
        kwargs[name] = statutory_rate(r.get(f"{name}_mode"), r.get(f"{name}_value"))
    return CompensationPolicy(
        policy_id=int(r["policy_id"]),
        user_id=int(r["user_id"]),
        user_name=r.get("user_name"),
        late_penalty_per_minute=to_decimal(r.get("late_penalty_per_minute")),
        late_penalty_enabled=r.get("late_penalty_enabled") is None or bool(r["late_penalty_enabled"]),
        is_active=bool(r.get("is_active")),
        **kwargs,
    )


class MySQLPolicyRepository(PolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, *, user_id: Optional[int] = None) -> Sequence[CompensationPolicy]:
        where = ["is_active=1"]
        params: list = []
        if user_id:
            where.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT *
                FROM salary_policies
                WHERE {' AND '.join(where)}
                ORDER BY updated_at DESC, policy_id DESC
                """,
                tuple(params),
            )
            return [_row_to_policy(r) for r in fetchall(cur)]
