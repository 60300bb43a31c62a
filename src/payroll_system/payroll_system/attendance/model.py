from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from ..core.enums import AttendanceStatus

# Raw check-in/out value as delivered by the attendance subsystem (may be unparsable).
RawTimestamp = Union[datetime, str, None]


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar date."""

    user_id: int
    work_date: str
    status: AttendanceStatus
    check_in_time: RawTimestamp = None
    check_out_time: RawTimestamp = None
    is_late: bool = False
    late_minutes: int = 0
    is_early_checkout: bool = False
    attendance_id: Optional[int] = None


@dataclass(frozen=True)
class GracePeriod:
    """Company-wide grace (e.g. bad weather) that pushes the expected check-in for one date."""

    grace_date: str
    minutes: int
