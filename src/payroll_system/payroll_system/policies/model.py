from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from ..common.money import ONE, ZERO, round_whole, to_decimal
from ..core.exceptions import ValidationError

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Percentage:
    """Statutory amount as a percentage of a monthly basis (earned basic or earned gross)."""

    rate: Decimal

    def amount(self, *, basis: Decimal, paid_ratio: Decimal) -> Decimal:
        return round_whole(basis * self.rate / HUNDRED)


@dataclass(frozen=True)
class Fixed:
    """Statutory amount fixed per month, pro-rated by paid days."""

    amount_per_month: Decimal

    def amount(self, *, basis: Decimal, paid_ratio: Decimal) -> Decimal:
        return round_whole(self.amount_per_month * paid_ratio)


StatutoryRate = Union[Percentage, Fixed]

RATE_MODES = {"percentage": Percentage, "fixed": Fixed}


def statutory_rate(mode: Optional[str], value) -> Optional[StatutoryRate]:
    """Build the tagged rate for one policy field.

    ``mode`` is ``"percentage"``, ``"fixed"`` or empty; a zero value means the
    field does not apply.
    """

    if not mode:
        return None
    cls = RATE_MODES.get(str(mode).lower())
    if cls is None:
        raise ValidationError(f"Unknown statutory rate mode: {mode!r}")
    amount = to_decimal(value)
    if amount < ZERO:
        raise ValidationError("Statutory rate cannot be negative")
    if amount == ZERO:
        return None
    return cls(amount)


def apply_rate(rate: Optional[StatutoryRate], *, basis: Decimal, paid_ratio: Decimal) -> Decimal:
    if rate is None:
        return ZERO
    return rate.amount(basis=basis, paid_ratio=paid_ratio)


@dataclass(frozen=True)
class CompensationPolicy:
    policy_id: int
    user_id: int
    user_name: Optional[str] = None

    basic_salary: Decimal = ZERO
    hra: Decimal = ZERO
    travelling_allowance: Decimal = ZERO
    children_education_allowance: Decimal = ZERO
    fixed_incentive: Decimal = ZERO
    employer_incentive: Decimal = ZERO

    employee_pf: Optional[StatutoryRate] = None
    employer_pf: Optional[StatutoryRate] = None
    employee_esi: Optional[StatutoryRate] = None
    employer_esi: Optional[StatutoryRate] = None
    labour_welfare_employee: Optional[StatutoryRate] = None
    labour_welfare_employer: Optional[StatutoryRate] = None
    ex_gratia: Optional[StatutoryRate] = None

    late_penalty_per_minute: Decimal = ZERO
    late_penalty_enabled: bool = True
    is_active: bool = True

    @property
    def monthly_gross(self) -> Decimal:
        """Pro-ratable components; the employer incentive is not part of it."""
        return (
            self.basic_salary
            + self.hra
            + self.travelling_allowance
            + self.children_education_allowance
            + self.fixed_incentive
        )

    @property
    def monthly_gross_with_incentive(self) -> Decimal:
        return self.monthly_gross + self.employer_incentive


def daily_rate(policy: Optional[CompensationPolicy], total_days: int) -> Decimal:
    """Full day's pay used for timing and timesheet penalties."""
    if policy is None or total_days <= 0:
        return ZERO
    return policy.monthly_gross_with_incentive / Decimal(total_days)


def paid_ratio(paid_days: Decimal, total_days: int) -> Decimal:
    if total_days <= 0:
        return ZERO
    return min(paid_days / Decimal(total_days), ONE)
