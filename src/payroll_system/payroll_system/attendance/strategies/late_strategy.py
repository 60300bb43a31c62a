from __future__ import annotations

from decimal import Decimal

from .base import TimingDecision, TimingStrategy, TimingTier

# Upper bounds are inclusive: 11:00 still falls in the first tier.
LATE_CHECKIN_TIERS: tuple[TimingTier, ...] = (
    TimingTier(11 * 60, Decimal("0.25"), "Late check-in", recurring=True),
    TimingTier(12 * 60, Decimal("0.5"), "Very late check-in"),
    TimingTier(14 * 60, Decimal("0.5"), "Extremely late check-in"),
    TimingTier(16 * 60, Decimal("0.75"), "Excessively late check-in"),
)
LATE_CHECKIN_FLOOR = TimingDecision(fraction=Decimal("1"), reason="Full deduction for very late check-in")


class LateStrategy(TimingStrategy):
    """Late check-in, tiered by how far past the expected time it happened."""

    def __init__(self, tiers: tuple[TimingTier, ...] = LATE_CHECKIN_TIERS):
        self._tiers = tiers

    def decide(self, *, minute: int) -> TimingDecision:
        for tier in self._tiers:
            if minute <= tier.upper_minute:
                return TimingDecision(fraction=tier.fraction, reason=tier.reason, recurring=tier.recurring)
        return LATE_CHECKIN_FLOOR
