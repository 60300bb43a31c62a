from __future__ import annotations

from dataclasses import dataclass

from .adjustments.mysql_adjustment_repository import MySQLAdjustmentRepository
from .advances.mysql_advance_repository import MySQLAdvanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .core.constants import DEFAULT_MAX_WORKERS, DEFAULT_UPSERT_ATTEMPTS
from .database.connection import DBConfig, DatabaseConnection
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .payroll.upserter import PayrollUpserter
from .payroll.workflow import PayrollWorkflowService
from .policies.mysql_policy_repository import MySQLPolicyRepository
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .users.mysql_user_repository import MySQLUserRepository


@dataclass(frozen=True)
class Container:
    payroll_service: PayrollService
    payroll_workflow_service: PayrollWorkflowService


def build_container(*, db_config: dict, settings=None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    attendance_repo = MySQLAttendanceRepository(conn)
    policies_repo = MySQLPolicyRepository(conn)
    adjustments_repo = MySQLAdjustmentRepository(conn)
    advances_repo = MySQLAdvanceRepository(conn)
    timesheets_repo = MySQLTimesheetRepository(conn)
    users_repo = MySQLUserRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)

    max_workers = int(getattr(settings, "PAYROLL_MAX_WORKERS", DEFAULT_MAX_WORKERS))
    attempts = int(getattr(settings, "PAYROLL_UPSERT_ATTEMPTS", DEFAULT_UPSERT_ATTEMPTS))

    payroll_service = PayrollService(
        attendance_repo,
        policies_repo,
        adjustments_repo,
        advances_repo,
        timesheets_repo,
        users_repo,
        payroll_repo,
        upserter=PayrollUpserter(payroll_repo, attempts=attempts),
        max_workers=max_workers,
    )
    payroll_workflow_service = PayrollWorkflowService(payroll_repo)

    return Container(
        payroll_service=payroll_service,
        payroll_workflow_service=payroll_workflow_service,
    )
