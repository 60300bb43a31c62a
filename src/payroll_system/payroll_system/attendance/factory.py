from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import EXPECTED_CHECK_OUT_END_MINUTE
from .strategies.base import TimingStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class TimingStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, minute: int, expected_minute: int) -> TimingStrategy:
        if minute <= expected_minute:
            return NormalStrategy()
        return LateStrategy()

    def for_checkout(self, *, minute: int) -> TimingStrategy:
        if minute >= EXPECTED_CHECK_OUT_END_MINUTE:
            return NormalStrategy()
        return EarlyLeaveStrategy()
