"""Example: compute one employee's month with the pure calculator (no Flask, no database).

Controllers and the MySQL repositories only feed ``EmployeeMonthInput``; the numbers
all come from ``StandardPayrollCalculator``.
"""

import json
from datetime import datetime
from decimal import Decimal

from src.payroll_system.payroll_system.attendance.model import AttendanceRecord
from src.payroll_system.payroll_system.core.enums import AttendanceStatus
from src.payroll_system.payroll_system.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.payroll_system.payroll_system.payroll.model import EmployeeMonthInput
from src.payroll_system.payroll_system.policies.model import CompensationPolicy, Percentage


def main():
    policy = CompensationPolicy(
        policy_id=1,
        user_id=7,
        basic_salary=Decimal("30000"),
        hra=Decimal("12000"),
        employee_pf=Percentage(Decimal("12")),
        employer_pf=Percentage(Decimal("12")),
    )
    attendance = [
        AttendanceRecord(
            user_id=7,
            work_date="2026-01-05",
            status=AttendanceStatus.CHECKED_OUT,
            check_in_time=datetime(2026, 1, 5, 11, 15),
            check_out_time=datetime(2026, 1, 5, 18, 30),
        ),
        AttendanceRecord(user_id=7, work_date="2026-01-06", status=AttendanceStatus.ABSENT),
    ]
    result = StandardPayrollCalculator().calculate(
        EmployeeMonthInput(
            user_id=7,
            employee_name="Example Employee",
            month="2026-01",
            policies=[policy],
            attendance=attendance,
            now=datetime(2026, 2, 1, 9, 0),
        )
    )
    print(json.dumps(result.to_fields(), indent=2, default=str))


if __name__ == "__main__":
    main()
