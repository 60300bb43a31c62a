from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TimingDecision:
    """Share of the day's pay to deduct for one check-in or check-out.

    ``recurring`` marks the mild tiers whose repeats are counted as a streak;
    every other decision resets the streak.
    """

    fraction: Decimal
    reason: str = ""
    recurring: bool = False


@dataclass(frozen=True)
class TimingTier:
    upper_minute: int
    fraction: Decimal
    reason: str
    recurring: bool = False


class TimingStrategy(ABC):
    """Strategy Pattern: encapsulate how a check-in/check-out time is penalized."""

    @abstractmethod
    def decide(self, *, minute: int) -> TimingDecision:
        raise NotImplementedError
