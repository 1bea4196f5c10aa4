from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .analytics.service import AnalyticsService
from .assessments.mysql_assessment_repository import MySQLAssessmentRepository
from .assessments.repository import AssessmentRepository
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_CLASS_START, DEFAULT_LATE_CUTOFF_MINUTES
from .database.connection import DatabaseConnection
from .members.mysql_enrollment_repository import MySQLEnrollmentRepository
from .members.repository import EnrollmentRepository
from .notifications.mysql_outbox import MySQLNotificationOutbox
from .notifications.notifier import LoggingNotifier, Notifier
from .timing.policy import ClassTimingPolicy


@dataclass(frozen=True)
class Container:
    enrollment_repo: EnrollmentRepository
    attendance_repo: AttendanceRepository
    assessments_repo: AssessmentRepository
    notifier: Notifier
    timing_policy: ClassTimingPolicy

    attendance_service: AttendanceService
    analytics_service: AnalyticsService

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    enrollment: EnrollmentRepository,
    attendance: AttendanceRepository,
    assessments: AssessmentRepository,
    notifier: Notifier,
    policy: ClassTimingPolicy,
    conn: Optional[DatabaseConnection] = None,
    **service_kwargs: Any,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    attendance_service = AttendanceService(
        attendance,
        enrollment,
        policy,
        notifier=notifier,
        strategy_factory=AttendanceStrategyFactory(),
        **service_kwargs,
    )
    analytics_service = AnalyticsService(attendance, assessments, enrollment)

    return Container(
        enrollment_repo=enrollment,
        attendance_repo=attendance,
        assessments_repo=assessments,
        notifier=notifier,
        timing_policy=policy,
        attendance_service=attendance_service,
        analytics_service=analytics_service,
        conn=conn,
    )


def build_container(*, db_config: dict, timing: Optional[Mapping[str, Any]] = None, notify_outbox: bool = True) -> Container:
    timing = dict(timing or {})
    conn = DatabaseConnection.from_settings(db_config)

    policy = ClassTimingPolicy.from_settings(
        start=str(timing.get("start", DEFAULT_CLASS_START)),
        cutoff_minutes=int(timing.get("cutoff_minutes", DEFAULT_LATE_CUTOFF_MINUTES)),
        overrides=timing.get("overrides"),
    )
    notifier: Notifier = MySQLNotificationOutbox(conn) if notify_outbox else LoggingNotifier()

    return assemble(
        enrollment=MySQLEnrollmentRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        assessments=MySQLAssessmentRepository(conn),
        notifier=notifier,
        policy=policy,
        conn=conn,
    )
