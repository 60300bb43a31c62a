from __future__ import annotations

import logging
from decimal import Decimal

from ...adjustments.aggregator import AdjustmentAggregator
from ...advances.recovery import AdvanceRecoveryResolver
from ...attendance.aggregator import AttendanceAggregator, AttendanceSummary, effective_attendance, sort_and_dedupe
from ...attendance.penalty_evaluator import TimingPenaltyEvaluator
from ...common.datetime_utils import days_in_month, month_dates, now_local, parse_month
from ...common.money import round_cents, round_whole
from ...policies.model import daily_rate
from ...policies.resolver import PolicyResolver
from ...timesheets.compliance import TimesheetComplianceChecker
from ..model import EmployeeMonthInput, PayrollResult
from .base import PayrollCalculator
from .deductions import DeductionCalculator
from .earnings import EarningsCalculator

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
MONTHS_PER_YEAR = 12


class StandardPayrollCalculator(PayrollCalculator):
    """The one salary computation for an employee and month.

    Pure: reads only ``EmployeeMonthInput`` (plus the clock when ``now`` is not
    given) and never touches storage, so batch runs, previews and tests all go
    through the same numbers.
    """

    def __init__(
        self,
        *,
        policy_resolver: PolicyResolver | None = None,
        attendance_aggregator: AttendanceAggregator | None = None,
        timing_evaluator: TimingPenaltyEvaluator | None = None,
        compliance_checker: TimesheetComplianceChecker | None = None,
        earnings_calculator: EarningsCalculator | None = None,
        deduction_calculator: DeductionCalculator | None = None,
        adjustment_aggregator: AdjustmentAggregator | None = None,
        advance_resolver: AdvanceRecoveryResolver | None = None,
    ):
        self._policies = policy_resolver or PolicyResolver()
        self._aggregator = attendance_aggregator or AttendanceAggregator()
        self._timing = timing_evaluator or TimingPenaltyEvaluator()
        self._compliance = compliance_checker or TimesheetComplianceChecker()
        self._earnings = earnings_calculator or EarningsCalculator()
        self._deductions = deduction_calculator or DeductionCalculator()
        self._adjustments = adjustment_aggregator or AdjustmentAggregator()
        self._advances = advance_resolver or AdvanceRecoveryResolver()

    def calculate(self, data: EmployeeMonthInput) -> PayrollResult:
        year, month_num = parse_month(data.month)
        total_days = days_in_month(year, month_num)
        dates = month_dates(year, month_num)
        in_month = set(dates)

        policy = self._policies.resolve(data.user_id, data.policies)
        rate = daily_rate(policy, total_days)

        records = sort_and_dedupe(
            r for r in data.attendance if r.user_id == data.user_id and r.work_date in in_month
        )
        compliance = self._compliance.check(
            user_id=data.user_id,
            tasks=data.tasks,
            entries=data.timesheet_entries,
            adjustments=data.adjustments,
            daily_rate=rate,
            now=data.now or now_local(),
        )
        effective = effective_attendance(records, excluded_dates=compliance.penalized_dates)
        summary = self._aggregator.summarize(effective, total_days=total_days, month_dates=dates)

        name = data.employee_name or (policy.user_name if policy else None) or str(data.user_id)
        attendance_fields = self._attendance_fields(summary)

        if policy is None:
            logger.info("No active policy for user %s in %s; attendance-only result", data.user_id, data.month)
            return PayrollResult(
                user_id=data.user_id,
                employee_name=name,
                month=data.month,
                has_policy=False,
                **attendance_fields,
            )

        timing = self._timing.evaluate(effective, daily_rate=rate, grace_minutes=data.grace_minutes)
        earnings = self._earnings.calculate(policy, paid_days=summary.paid_days, total_days=total_days)
        deductions = self._deductions.calculate(policy, earnings=earnings, summary=summary)
        adjustments = self._adjustments.aggregate(
            a for a in data.adjustments if a.user_id == data.user_id and a.month == data.month
        )
        advance_recovery = self._advances.recovery_for(
            (a for a in data.advances if a.user_id == data.user_id), month=data.month
        )

        attendance_adjustments = timing.total
        timesheet_penalty = compliance.total
        gross_salary = earnings.base_salary + attendance_adjustments
        total_deductions = (
            deductions.late_penalty
            + deductions.absent_deduction
            + deductions.total_employee
            + advance_recovery
            + adjustments.deductions
            + timesheet_penalty
        )
        net_salary = round_cents(gross_salary + adjustments.additions - total_deductions)
        ctc_monthly = round_cents(earnings.earned_gross + attendance_adjustments + deductions.total_employer)

        return PayrollResult(
            user_id=data.user_id,
            employee_name=name,
            month=data.month,
            has_policy=True,
            **attendance_fields,
            per_day_rate=deductions.per_day_rate,
            daily_rate=round_cents(rate),
            basic_salary=earnings.basic_salary,
            hra=earnings.hra,
            travelling_allowance=earnings.travelling_allowance,
            children_education_allowance=earnings.children_education_allowance,
            fixed_incentive=earnings.fixed_incentive,
            employer_incentive=earnings.employer_incentive,
            earned_gross=earnings.earned_gross,
            base_salary=earnings.base_salary,
            attendance_adjustments=attendance_adjustments,
            daily_details=[d.to_dict() for d in timing.days],
            timesheet_penalty_deduction=timesheet_penalty,
            penalty_details=[p.to_dict() for p in compliance.details],
            employee_pf=deductions.employee_pf,
            employee_esi=deductions.employee_esi,
            labour_welfare_employee=deductions.labour_welfare_employee,
            total_employee_deduction=deductions.total_employee,
            employer_pf=deductions.employer_pf,
            employer_esi=deductions.employer_esi,
            labour_welfare_employer=deductions.labour_welfare_employer,
            ex_gratia=deductions.ex_gratia,
            total_employer_contribution=deductions.total_employer,
            late_penalty=deductions.late_penalty,
            absent_deduction=deductions.absent_deduction,
            additions=adjustments.additions,
            other_deductions=adjustments.deductions,
            adjustments_net=adjustments.net,
            advance_recovery=advance_recovery,
            gross_salary=round_cents(gross_salary),
            total_deductions=round_cents(total_deductions),
            net_salary=net_salary,
            cash_in_hand=net_salary,
            ctc_monthly=ctc_monthly,
            ctc_annual=ctc_monthly * MONTHS_PER_YEAR,
        )

    @staticmethod
    def _attendance_fields(summary: AttendanceSummary) -> dict:
        total = summary.total_days
        percentage = int(round_whole(summary.paid_days / Decimal(total) * HUNDRED)) if total else 0
        return {
            "total_working_days": total,
            "total_paid_days": summary.paid_days,
            "present_days": summary.present_days,
            "wfh_days": summary.wfh_days,
            "absent_days": summary.absent_days,
            "paid_absent_days": summary.paid_absent_days,
            "unpaid_absent_days": summary.unpaid_absent_days,
            "half_days": summary.half_days,
            "paid_leave_days": summary.paid_leave_days,
            "weekoff_days": summary.weekoff_days,
            "holiday_days": summary.holiday_days,
            "late_count": summary.late_count,
            "early_checkout_count": summary.early_checkout_count,
            "not_marked_days": summary.not_marked_days,
            "not_marked_dates": list(summary.not_marked_dates),
            "attendance_percentage": percentage,
        }
