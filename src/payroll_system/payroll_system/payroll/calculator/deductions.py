from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ...attendance.aggregator import AttendanceSummary
from ...common.money import ZERO, round_cents, round_whole
from ...core.constants import LATE_PENALTY_MULTIPLIER
from ...policies.model import CompensationPolicy, apply_rate, paid_ratio
from .earnings import Earnings


@dataclass(frozen=True)
class Deductions:
    employee_pf: Decimal = ZERO
    employee_esi: Decimal = ZERO
    labour_welfare_employee: Decimal = ZERO

    employer_pf: Decimal = ZERO
    employer_esi: Decimal = ZERO
    labour_welfare_employer: Decimal = ZERO
    ex_gratia: Decimal = ZERO
    employer_incentive: Decimal = ZERO

    late_penalty: Decimal = ZERO
    absent_deduction: Decimal = ZERO
    per_day_rate: Decimal = ZERO

    @property
    def total_employee(self) -> Decimal:
        return self.employee_pf + self.employee_esi + self.labour_welfare_employee

    @property
    def total_employer(self) -> Decimal:
        return (
            self.employer_pf
            + self.employer_esi
            + self.labour_welfare_employer
            + self.ex_gratia
            + self.employer_incentive
        )


class DeductionCalculator:
    """Statutory contributions, late penalty and unpaid-absence deduction.

    Percentage rates are taken on earned basic (PF, ex-gratia) or earned gross
    (ESI, labour welfare); fixed amounts are pro-rated by paid days.
    """

    def __init__(self, *, late_multiplier: int = LATE_PENALTY_MULTIPLIER):
        self._late_multiplier = Decimal(late_multiplier)

    def calculate(
        self,
        policy: CompensationPolicy,
        *,
        earnings: Earnings,
        summary: AttendanceSummary,
    ) -> Deductions:
        ratio = paid_ratio(summary.paid_days, summary.total_days)
        basic = earnings.basic_salary
        gross = earnings.earned_gross

        per_day_rate = policy.monthly_gross / Decimal(summary.total_days)

        late_penalty = ZERO
        if policy.late_penalty_enabled:
            late_penalty = round_cents(Decimal(summary.late_count) * policy.late_penalty_per_minute * self._late_multiplier)

        return Deductions(
            employee_pf=apply_rate(policy.employee_pf, basis=basic, paid_ratio=ratio),
            employee_esi=apply_rate(policy.employee_esi, basis=gross, paid_ratio=ratio),
            labour_welfare_employee=apply_rate(policy.labour_welfare_employee, basis=gross, paid_ratio=ratio),
            employer_pf=apply_rate(policy.employer_pf, basis=basic, paid_ratio=ratio),
            employer_esi=apply_rate(policy.employer_esi, basis=gross, paid_ratio=ratio),
            labour_welfare_employer=apply_rate(policy.labour_welfare_employer, basis=gross, paid_ratio=ratio),
            ex_gratia=apply_rate(policy.ex_gratia, basis=basic, paid_ratio=ratio),
            employer_incentive=earnings.employer_incentive,
            late_penalty=late_penalty,
            absent_deduction=round_whole(Decimal(summary.unpaid_absent_days) * per_day_rate),
            per_day_rate=round_cents(per_day_rate),
        )
