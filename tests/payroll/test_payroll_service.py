from datetime import datetime
from decimal import Decimal

import pytest

from src.payroll_system.payroll_system.attendance.model import AttendanceRecord, GracePeriod
from src.payroll_system.payroll_system.core.enums import AttendanceStatus, Role
from src.payroll_system.payroll_system.core.exceptions import AuthorizationError, ValidationError
from src.payroll_system.payroll_system.users.model import Employee

MONTH = "2026-04"
NOW = datetime(2026, 5, 1, 9, 0)


@pytest.fixture
def seeded(repos, month_attendance, basic_policy):
    repos.attendance.records = month_attendance(1, MONTH) + month_attendance(
        2, MONTH, {"2026-04-06": AttendanceStatus.ABSENT}
    )
    repos.policies.policies = [basic_policy(1)]
    repos.users.users = {1: Employee(user_id=1, full_name="Asha"), 2: Employee(user_id=2, full_name="Ravi")}
    return repos


def _by_user(data):
    return {r["user_id"]: r for r in data["results"]}


def test_compute_creates_a_record_per_employee(seeded, payroll_service):
    data = payroll_service.compute(current_role=Role.ADMIN, month=MONTH, now=NOW)

    assert data["month"] == MONTH
    assert data["total_processed"] == 2
    assert data["errors"] == []
    results = _by_user(data)
    assert results[1]["action"] == "created"
    assert results[1]["has_policy"] is True
    assert results[1]["employee_name"] == "Asha"
    assert results[1]["net_salary"] == Decimal("30000")
    assert results[2]["has_policy"] is False
    assert results[2]["net_salary"] == Decimal("0")


def test_recompute_is_idempotent(seeded, payroll_service):
    first = _by_user(payroll_service.compute(current_role=Role.ADMIN, month=MONTH, now=NOW))
    second = _by_user(payroll_service.compute(current_role=Role.ADMIN, month=MONTH, now=NOW))

    assert second[1]["action"] == "updated"
    for user_id in (1, 2):
        a = {k: v for k, v in first[user_id].items() if k != "action"}
        b = {k: v for k, v in second[user_id].items() if k != "action"}
        assert a == b
    assert len(seeded.payroll.records) == 2


def test_locked_record_is_reported_and_not_overwritten(seeded, payroll_service):
    seeded.payroll.put(user_id=1, month=MONTH, fields={"net_salary": "12345"}, locked=True)

    data = payroll_service.compute(current_role=Role.ADMIN, month=MONTH, now=NOW)

    results = _by_user(data)
    assert results[1]["action"] == "skipped_locked"
    assert results[1]["net_salary"] == "12345"
    assert seeded.payroll.records[(1, MONTH)].fields == {"net_salary": "12345"}
    assert results[2]["action"] == "created"


def test_employee_with_existing_record_but_no_attendance_is_recomputed(seeded, payroll_service):
    seeded.payroll.put(user_id=3, month=MONTH, fields={"net_salary": "999"})

    data = payroll_service.compute(current_role=Role.ADMIN, month=MONTH, now=NOW)

    results = _by_user(data)
    assert results[3]["action"] == "updated"
    assert results[3]["total_paid_days"] == Decimal("0")
    assert results[3]["employee_name"] == "3"


def test_employee_filter_limits_the_run(seeded, payroll_service):
    data = payroll_service.compute(current_role=Role.ADMIN, month=MONTH, employee_id=2, now=NOW)

    assert [r["user_id"] for r in data["results"]] == [2]
    assert (1, MONTH) not in seeded.payroll.records


def test_filtered_employee_without_attendance_still_gets_a_record(seeded, payroll_service, basic_policy):
    seeded.policies.policies.append(basic_policy(4))

    data = payroll_service.compute(current_role=Role.ADMIN, month=MONTH, employee_id=4, now=NOW)

    result = data["results"][0]
    assert result["user_id"] == 4
    assert result["has_policy"] is True
    assert result["net_salary"] == Decimal("0")


def test_unknown_employee_filter_saves_nothing(seeded, payroll_service):
    data = payroll_service.compute(current_role=Role.ADMIN, month=MONTH, employee_id=999, now=NOW)

    assert data["results"] == []
    assert data["total_processed"] == 0
    assert data["errors"] == []
    assert (999, MONTH) not in seeded.payroll.records


def test_persistence_conflicts_become_errors(seeded, payroll_service):
    seeded.payroll.always_conflict = True

    data = payroll_service.compute(current_role=Role.ADMIN, month=MONTH, now=NOW)

    assert data["total_processed"] == 0
    assert sorted(e["user_id"] for e in data["errors"]) == [1, 2]


def test_grace_periods_are_applied(seeded, payroll_service, month_attendance):
    seeded.attendance.records = [
        r
        if r.work_date != "2026-04-15"
        else AttendanceRecord(
            user_id=1,
            work_date="2026-04-15",
            status=AttendanceStatus.CHECKED_OUT,
            check_in_time=datetime(2026, 4, 15, 10, 20),
            check_out_time=datetime(2026, 4, 15, 18, 0),
        )
        for r in month_attendance(1, MONTH)
    ]
    seeded.attendance.grace_periods = [GracePeriod(grace_date="2026-04-15", minutes=30)]

    data = payroll_service.compute(current_role=Role.ADMIN, month=MONTH, now=NOW)

    assert _by_user(data)[1]["attendance_adjustments"] == Decimal("0")


def test_invalid_month_is_rejected(payroll_service):
    with pytest.raises(ValidationError):
        payroll_service.compute(current_role=Role.ADMIN, month="2026-13")


def test_staff_cannot_run_payroll(seeded, payroll_service):
    with pytest.raises(AuthorizationError):
        payroll_service.compute(current_role=Role.STAFF, month=MONTH)
    assert seeded.attendance.calls == 0
