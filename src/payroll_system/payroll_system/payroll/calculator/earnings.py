from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ...common.money import ZERO, round_whole
from ...policies.model import CompensationPolicy


@dataclass(frozen=True)
class Earnings:
    basic_salary: Decimal = ZERO
    hra: Decimal = ZERO
    travelling_allowance: Decimal = ZERO
    children_education_allowance: Decimal = ZERO
    fixed_incentive: Decimal = ZERO
    employer_incentive: Decimal = ZERO

    @property
    def earned_gross(self) -> Decimal:
        return (
            self.basic_salary
            + self.hra
            + self.travelling_allowance
            + self.children_education_allowance
            + self.fixed_incentive
        )

    @property
    def base_salary(self) -> Decimal:
        return self.earned_gross + self.employer_incentive


class EarningsCalculator:
    """Pro-rate each policy component by paid days; the employer incentive is paid in full."""

    def calculate(self, policy: CompensationPolicy, *, paid_days: Decimal, total_days: int) -> Earnings:
        days = Decimal(total_days)

        def earned(monthly: Decimal) -> Decimal:
            return round_whole(monthly / days * paid_days)

        return Earnings(
            basic_salary=earned(policy.basic_salary),
            hra=earned(policy.hra),
            travelling_allowance=earned(policy.travelling_allowance),
            children_education_allowance=earned(policy.children_education_allowance),
            fixed_incentive=earned(policy.fixed_incentive),
            employer_incentive=policy.employer_incentive,
        )
