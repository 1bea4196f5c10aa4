"""Example: drive the service layer directly (no Flask).

Controllers stay thin; marking, committing and analytics all live in services.
"""

import importlib
import logging
import sys

from config import get_settings_module

from src.classroom_attendance.classroom_attendance.container import build_container
from src.classroom_attendance.classroom_attendance.core.enums import AttendanceStatus

logger = logging.getLogger("example_usage")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        timing={"start": settings.CLASS_START_TIME, "cutoff_minutes": settings.LATE_CUTOFF_MINUTES},
        notify_outbox=False,
    )

    class_id = sys.argv[1] if len(sys.argv) > 1 else "c-10a"
    subject_id = sys.argv[2] if len(sys.argv) > 2 else "s-math"

    recorder = container.attendance_service.open_session(recorder_id="demo-operator", class_id=class_id, subject_id=subject_id)
    for member in recorder.roster:
        recorder.mark(member.member_id, AttendanceStatus.PRESENT)
    result = recorder.commit()
    logger.info("committed %d records", result.committed_count)

    report = container.analytics_service.cohort_report(class_id)
    logger.info("rollup: %s", report.rollup)


if __name__ == "__main__":
    main()
