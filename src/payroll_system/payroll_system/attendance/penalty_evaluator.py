from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import minute_of_day, parse_timestamp
from ..common.money import ZERO, round_cents
from ..core.constants import CONSECUTIVE_LABEL_THRESHOLD, EXPECTED_CHECK_IN_MINUTE
from .factory import TimingStrategyFactory
from .model import AttendanceRecord
from .strategies.base import TimingDecision


@dataclass(frozen=True)
class DailyAdjustment:
    work_date: str
    status: str
    check_in: Optional[str]
    check_out: Optional[str]
    amount: Decimal
    reason: str

    def to_dict(self) -> dict:
        return {
            "date": self.work_date,
            "status": self.status,
            "check_in": self.check_in,
            "check_out": self.check_out,
            "adjustment": self.amount,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class TimingEvaluation:
    days: tuple[DailyAdjustment, ...]

    @property
    def total(self) -> Decimal:
        return sum((d.amount for d in self.days), ZERO)


class _Streak:
    def __init__(self) -> None:
        self.count = 0

    def record(self, decision: TimingDecision) -> None:
        self.count = self.count + 1 if decision.recurring else 0

    def reset(self) -> None:
        self.count = 0

    def label(self, decision: TimingDecision) -> str:
        if decision.recurring and self.count >= CONSECUTIVE_LABEL_THRESHOLD:
            return f"{decision.reason} (consecutive)"
        return decision.reason


def _hhmm(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


class TimingPenaltyEvaluator:
    """Walk one employee's attendance in date order and price late check-ins/early check-outs.

    Each present day is priced against ``daily_rate``; check-out tiers are only looked
    at when the check-in was on time. Streak counters only change the reason label,
    never the amount.
    """

    def __init__(
        self,
        *,
        strategy_factory: TimingStrategyFactory | None = None,
        expected_check_in_minute: int = EXPECTED_CHECK_IN_MINUTE,
        tz: Optional[tzinfo] = None,
    ):
        self._factory = strategy_factory or TimingStrategyFactory()
        self._expected_check_in = int(expected_check_in_minute)
        self._tz = tz

    def evaluate(
        self,
        records: Sequence[AttendanceRecord],
        *,
        daily_rate: Decimal,
        grace_minutes: Mapping[str, int] | None = None,
    ) -> TimingEvaluation:
        grace_minutes = grace_minutes or {}
        late_streak = _Streak()
        early_streak = _Streak()
        days: list[DailyAdjustment] = []

        for rec in sorted(records, key=lambda r: r.work_date):
            check_in = parse_timestamp(rec.check_in_time, tz=self._tz)
            check_out = parse_timestamp(rec.check_out_time, tz=self._tz)

            if not rec.status.is_present or check_in is None:
                late_streak.reset()
                early_streak.reset()
                days.append(self._day(rec, check_in, check_out, ZERO, []))
                continue

            fraction = ZERO
            reasons: list[str] = []

            expected = self._expected_check_in + int(grace_minutes.get(rec.work_date, 0))
            in_minute = minute_of_day(check_in)
            decision = self._factory.for_checkin(minute=in_minute, expected_minute=expected).decide(minute=in_minute)
            late_streak.record(decision)
            if decision.fraction:
                fraction += decision.fraction
                reasons.append(late_streak.label(decision))

            if in_minute <= expected and check_out is not None:
                out_minute = minute_of_day(check_out)
                decision = self._factory.for_checkout(minute=out_minute).decide(minute=out_minute)
                early_streak.record(decision)
                if decision.fraction:
                    fraction += decision.fraction
                    reasons.append(early_streak.label(decision))

            amount = round_cents(daily_rate * fraction)
            amount = -amount if amount else ZERO
            days.append(self._day(rec, check_in, check_out, amount, reasons))

        return TimingEvaluation(days=tuple(days))

    @staticmethod
    def _day(
        rec: AttendanceRecord,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        amount: Decimal,
        reasons: list[str],
    ) -> DailyAdjustment:
        return DailyAdjustment(
            work_date=rec.work_date,
            status=rec.status.value,
            check_in=_hhmm(check_in),
            check_out=_hhmm(check_out),
            amount=amount,
            reason="; ".join(reasons),
        )
