from datetime import datetime
from decimal import Decimal

from src.payroll_system.payroll_system.attendance.model import AttendanceRecord
from src.payroll_system.payroll_system.attendance.penalty_evaluator import TimingPenaltyEvaluator
from src.payroll_system.payroll_system.core.enums import AttendanceStatus

RATE = Decimal("1000")


def _day(day: int, check_in, check_out=None, status=AttendanceStatus.CHECKED_OUT) -> AttendanceRecord:
    def at(value):
        if value is None or isinstance(value, str):
            return value
        hour, minute = value
        return datetime(2026, 4, day, hour, minute)

    return AttendanceRecord(
        user_id=1,
        work_date=f"2026-04-{day:02d}",
        status=status,
        check_in_time=at(check_in),
        check_out_time=at(check_out),
    )


def _evaluate(records, **kwargs):
    return TimingPenaltyEvaluator().evaluate(records, daily_rate=RATE, **kwargs)


def test_on_time_day_has_no_adjustment():
    result = _evaluate([_day(1, (10, 0), (18, 0))])

    assert result.days[0].amount == Decimal("0")
    assert result.days[0].reason == ""
    assert result.total == Decimal("0")


def test_one_minute_late_costs_a_quarter_day():
    result = _evaluate([_day(1, (10, 1), (18, 0))])

    assert result.days[0].amount == Decimal("-250")
    assert result.days[0].reason == "Late check-in"


def test_late_check_in_skips_checkout_rules():
    result = _evaluate([_day(1, (11, 15), (18, 30))])

    assert result.days[0].amount == Decimal("-500")
    assert result.days[0].reason == "Very late check-in"
    assert result.days[0].check_in == "11:15"
    assert result.days[0].check_out == "18:30"


def test_late_check_in_with_early_checkout_only_charges_late():
    result = _evaluate([_day(1, (12, 30), (15, 0))])

    assert result.days[0].amount == Decimal("-500")


def test_early_checkout_tiers():
    result = _evaluate([_day(1, (9, 55), (13, 0)), _day(2, (9, 55), (16, 0)), _day(3, (9, 55), (17, 30))])

    assert [d.amount for d in result.days] == [Decimal("-1000"), Decimal("-500"), Decimal("-250")]
    assert result.days[0].reason == "Early checkout (full deduction)"
    assert result.total == Decimal("-1750")


def test_third_consecutive_late_day_is_labelled():
    result = _evaluate([_day(d, (10, 30), (18, 0)) for d in (1, 2, 3)])

    assert [d.reason for d in result.days] == ["Late check-in", "Late check-in", "Late check-in (consecutive)"]
    assert all(d.amount == Decimal("-250") for d in result.days)


def test_absence_breaks_the_streak():
    records = [
        _day(1, (10, 30), (18, 0)),
        _day(2, (10, 30), (18, 0)),
        _day(3, None, status=AttendanceStatus.ABSENT),
        _day(4, (10, 30), (18, 0)),
    ]

    result = _evaluate(records)

    assert result.days[3].reason == "Late check-in"
    assert result.days[2].amount == Decimal("0")


def test_malformed_timestamp_is_treated_as_no_check_in():
    result = _evaluate([_day(1, "not-a-time", "also-bad")])

    assert result.days[0].amount == Decimal("0")
    assert result.days[0].check_in is None


def test_iso_string_timestamps_are_accepted():
    result = _evaluate([_day(1, "2026-04-01T10:45:00", "2026-04-01T18:10:00")])

    assert result.days[0].amount == Decimal("-250")


def test_grace_period_moves_expected_check_in():
    result = _evaluate([_day(1, (10, 20), (18, 0))], grace_minutes={"2026-04-01": 30})

    assert result.days[0].amount == Decimal("0")


def test_zero_rate_produces_zero_not_negative_zero():
    result = TimingPenaltyEvaluator().evaluate([_day(1, (11, 15))], daily_rate=Decimal("0"))

    assert str(result.days[0].amount) == "0"
