from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Directory entry; payroll only reads it to label results."""

    user_id: int
    full_name: str
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        if self.email:
            return self.email.split("@")[0]
        return str(self.user_id)
