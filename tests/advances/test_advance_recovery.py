from decimal import Decimal

from src.payroll_system.payroll_system.advances.model import AdvanceRecord
from src.payroll_system.payroll_system.advances.recovery import AdvanceRecoveryResolver
from src.payroll_system.payroll_system.core.enums import AdvanceStatus


def _advance(advance_id=1, installment="2000", remaining="3000", start="2026-03", status=AdvanceStatus.ACTIVE):
    return AdvanceRecord(
        advance_id=advance_id,
        user_id=1,
        advance_amount=Decimal("6000"),
        installment_amount=Decimal(installment),
        remaining_balance=Decimal(remaining),
        recovery_start_month=start,
        status=status,
    )


def test_recovery_is_installment_capped_by_balance():
    resolver = AdvanceRecoveryResolver()

    assert resolver.recovery_for([_advance()], month="2026-04") == Decimal("2000")
    assert resolver.recovery_for([_advance(remaining="1500")], month="2026-04") == Decimal("1500")


def test_advance_not_yet_due_or_closed_is_skipped():
    resolver = AdvanceRecoveryResolver()
    advances = [_advance(start="2026-05"), _advance(advance_id=2, status=AdvanceStatus.CLOSED)]

    assert resolver.recovery_for(advances, month="2026-04") == Decimal("0")


def test_recovery_sums_multiple_advances():
    resolver = AdvanceRecoveryResolver()
    advances = [_advance(), _advance(advance_id=2, installment="500", start="2026-04")]

    assert resolver.recovery_for(advances, month="2026-04") == Decimal("2500")


def test_apply_reduces_balance_and_closes_paid_off_advance():
    resolver = AdvanceRecoveryResolver()

    updated = resolver.apply([_advance(), _advance(advance_id=2, remaining="800")], month="2026-04")

    assert updated[0].remaining_balance == Decimal("1000")
    assert updated[0].status == AdvanceStatus.ACTIVE
    assert updated[1].remaining_balance == Decimal("0")
    assert updated[1].status == AdvanceStatus.CLOSED
