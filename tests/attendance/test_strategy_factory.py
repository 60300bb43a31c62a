from decimal import Decimal

from src.payroll_system.payroll_system.attendance.factory import TimingStrategyFactory
from src.payroll_system.payroll_system.attendance.strategies.early_strategy import EarlyLeaveStrategy
from src.payroll_system.payroll_system.attendance.strategies.late_strategy import LateStrategy
from src.payroll_system.payroll_system.attendance.strategies.normal_strategy import NormalStrategy


def test_factory_checkin_on_time():
    factory = TimingStrategyFactory()
    strategy = factory.for_checkin(minute=10 * 60, expected_minute=10 * 60)

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_late_one_minute_after_expected():
    factory = TimingStrategyFactory()
    strategy = factory.for_checkin(minute=10 * 60 + 1, expected_minute=10 * 60)

    assert isinstance(strategy, LateStrategy)


def test_factory_checkin_within_grace_is_on_time():
    factory = TimingStrategyFactory()
    strategy = factory.for_checkin(minute=10 * 60 + 20, expected_minute=10 * 60 + 30)

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkout_after_window_is_normal():
    factory = TimingStrategyFactory()

    assert isinstance(factory.for_checkout(minute=18 * 60), NormalStrategy)
    assert isinstance(factory.for_checkout(minute=17 * 60 + 59), EarlyLeaveStrategy)


def test_late_tiers_have_inclusive_upper_bounds():
    late = LateStrategy()

    assert late.decide(minute=11 * 60).fraction == Decimal("0.25")
    assert late.decide(minute=11 * 60 + 1).fraction == Decimal("0.5")
    assert late.decide(minute=14 * 60).reason == "Extremely late check-in"
    assert late.decide(minute=16 * 60).fraction == Decimal("0.75")
    assert late.decide(minute=16 * 60 + 1).fraction == Decimal("1")


def test_early_tiers_have_exclusive_upper_bounds():
    early = EarlyLeaveStrategy()

    assert early.decide(minute=13 * 60 + 59).fraction == Decimal("1")
    assert early.decide(minute=14 * 60).fraction == Decimal("0.5")
    assert early.decide(minute=17 * 60).fraction == Decimal("0.25")
    assert early.decide(minute=17 * 60).recurring is True
