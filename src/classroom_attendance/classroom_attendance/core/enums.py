from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Who is calling: operators mark attendance, members view their standing."""

    OPERATOR = "operator"
    MEMBER = "member"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class NotificationPriority(str, Enum):
    MEDIUM = "medium"
    HIGH = "high"
