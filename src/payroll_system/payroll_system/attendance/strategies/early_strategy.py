from __future__ import annotations

from decimal import Decimal

from ...core.constants import (
    EARLY_CHECKOUT_HALF_DAY_MINUTE,
    EXPECTED_CHECK_OUT_END_MINUTE,
    EXPECTED_CHECK_OUT_START_MINUTE,
)
from .base import TimingDecision, TimingStrategy, TimingTier

# Upper bounds are exclusive: leaving at 17:00 sharp is already the mildest tier.
EARLY_CHECKOUT_TIERS: tuple[TimingTier, ...] = (
    TimingTier(EARLY_CHECKOUT_HALF_DAY_MINUTE, Decimal("1"), "Early checkout (full deduction)"),
    TimingTier(EXPECTED_CHECK_OUT_START_MINUTE, Decimal("0.5"), "Early checkout"),
    TimingTier(EXPECTED_CHECK_OUT_END_MINUTE, Decimal("0.25"), "Early checkout", recurring=True),
)


class EarlyLeaveStrategy(TimingStrategy):
    """Early check-out (only evaluated when check-in was on time)."""

    def __init__(self, tiers: tuple[TimingTier, ...] = EARLY_CHECKOUT_TIERS):
        self._tiers = tiers

    def decide(self, *, minute: int) -> TimingDecision:
        for tier in self._tiers:
            if minute < tier.upper_minute:
                return TimingDecision(fraction=tier.fraction, reason=tier.reason, recurring=tier.recurring)
        return TimingDecision(fraction=Decimal("0"))
