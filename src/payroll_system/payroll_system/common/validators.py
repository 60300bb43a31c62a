from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def require_month(value: str | None) -> str:
    """Validate a fixed-width YYYY-MM month key.

    The fixed width matters: recovery-start months are compared as strings.
    """

    if not isinstance(value, str) or not _MONTH_RE.match(value.strip()):
        raise ValidationError("month must be given as YYYY-MM")
    return value.strip()
