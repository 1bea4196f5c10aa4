from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus, NotificationPriority
from .model import NotificationPayload, NotificationSummary
from .notifier import Notifier

logger = logging.getLogger(__name__)


def attendance_alert(record: AttendanceRecord) -> NotificationPayload:
    on = record.attendance_date.isoformat()
    if record.status == AttendanceStatus.LATE:
        title = "Late Attendance Alert"
        message = f"You were marked late on {on}. Please be punctual next time."
        priority = NotificationPriority.MEDIUM
    else:
        title = "Absence Alert"
        message = f"You were marked absent on {on}. Please contact your instructor."
        priority = NotificationPriority.HIGH

    return NotificationPayload(
        title=title,
        message=message,
        priority=priority,
        entity_id=record.class_id,
        data={
            "status": record.status.value,
            "date": on,
            "class_id": record.class_id,
            "subject_id": record.subject_id,
            "member_id": record.member_id,
            "late_minutes": record.late_minutes,
        },
    )


def notify_affected(records: Iterable[AttendanceRecord], notifier: Notifier) -> NotificationSummary:
    """Alert every late or absent member once.

    Delivery is best-effort: failures are logged and counted, never raised.
    """

    sent = failed = 0
    notified: set[tuple[str, date]] = set()
    for r in records:
        if r.status == AttendanceStatus.PRESENT or (r.member_id, r.attendance_date) in notified:
            continue
        notified.add((r.member_id, r.attendance_date))
        try:
            notifier.notify(r.member_id, attendance_alert(r))
            sent += 1
        except Exception:
            failed += 1
            logger.warning("attendance alert failed member=%s date=%s", r.member_id, r.attendance_date, exc_info=True)
    return NotificationSummary(sent=sent, failed=failed)
