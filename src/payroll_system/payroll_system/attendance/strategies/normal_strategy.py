from __future__ import annotations

from decimal import Decimal

from .base import TimingDecision, TimingStrategy


class NormalStrategy(TimingStrategy):
    """On-time check-in, or check-out at/after the end of the window."""

    def decide(self, *, minute: int) -> TimingDecision:
        return TimingDecision(fraction=Decimal("0"))
