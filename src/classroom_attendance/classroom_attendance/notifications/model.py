from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.enums import NotificationPriority


@dataclass(frozen=True)
class NotificationPayload:
    title: str
    message: str
    priority: NotificationPriority
    kind: str = "attendance_alert"
    entity_type: str = "attendance"
    entity_id: str = ""
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NotificationSummary:
    """Best-effort delivery counts reported alongside a successful commit."""

    sent: int = 0
    failed: int = 0
