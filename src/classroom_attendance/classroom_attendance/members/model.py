from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Member:
    """Domain entity: an enrolled member (student) of a class."""

    member_id: str
    full_name: str
    roll_code: str
    class_id: str
    guardian_contact: Optional[str] = None


@dataclass(frozen=True)
class Cohort:
    """A (class, subject) pairing that scopes attendance and assessment data.

    ``subject_id=None`` means the whole class across every subject; analytics
    use that scope, marking attendance never does.
    """

    class_id: str
    subject_id: Optional[str] = None

    @property
    def is_class_wide(self) -> bool:
        return self.subject_id is None


def roll_order_key(member: Member) -> tuple:
    """Sort key for roll order: numeric roll codes sort numerically."""
    code = (member.roll_code or "").strip()
    if code.isdigit():
        return (0, int(code), member.member_id)
    return (1, code, member.member_id)
