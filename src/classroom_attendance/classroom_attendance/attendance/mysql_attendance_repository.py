from __future__ import annotations

from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceFilter, AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, records: Sequence[AttendanceRecord]) -> None:
        if not records:
            return

        # One transaction: db_cursor rolls back every row if any write fails.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance_records(
                    member_id, class_id, subject_id, attendance_date,
                    status, arrival_time, late_minutes, recorded_by, committed_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    arrival_time=VALUES(arrival_time),
                    late_minutes=VALUES(late_minutes),
                    recorded_by=VALUES(recorded_by),
                    committed_at=VALUES(committed_at)
                """,
                [
                    (
                        r.member_id,
                        r.class_id,
                        r.subject_id,
                        r.attendance_date,
                        r.status.value,
                        r.arrival_time,
                        r.late_minutes,
                        r.recorded_by,
                        r.committed_at,
                    )
                    for r in records
                ],
            )

    def find(self, flt: AttendanceFilter) -> Sequence[AttendanceRecord]:
        clauses = ["class_id=%s"]
        params: list[object] = [flt.class_id]

        if flt.subject_id is not None:
            clauses.append("subject_id=%s")
            params.append(flt.subject_id)
        if flt.member_id is not None:
            clauses.append("member_id=%s")
            params.append(flt.member_id)
        if flt.start is not None:
            clauses.append("attendance_date >= %s")
            params.append(flt.start)
        if flt.end is not None:
            clauses.append("attendance_date <= %s")
            params.append(flt.end)
        if flt.status is not None:
            clauses.append("status=%s")
            params.append(flt.status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT member_id, class_id, subject_id, attendance_date, status,
                       arrival_time, late_minutes, recorded_by, committed_at
                FROM attendance_records
                WHERE {where}
                ORDER BY attendance_date DESC, member_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceRecord(
                    member_id=str(r["member_id"]),
                    class_id=str(r["class_id"]),
                    subject_id=str(r["subject_id"]),
                    attendance_date=r["attendance_date"],
                    status=AttendanceStatus(r["status"]),
                    arrival_time=r.get("arrival_time"),
                    late_minutes=int(r["late_minutes"]) if r.get("late_minutes") is not None else None,
                    recorded_by=str(r["recorded_by"]),
                    committed_at=r["committed_at"],
                )
                for r in rows
            ]
