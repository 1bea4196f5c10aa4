from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import NotFound
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Cohort, Member
from .repository import EnrollmentRepository


def _to_member(r: dict) -> Member:
    return Member(
        member_id=str(r["member_id"]),
        full_name=r["full_name"],
        roll_code=str(r.get("roll_code") or ""),
        class_id=str(r["class_id"]),
        guardian_contact=r.get("guardian_contact"),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def members_of(self, cohort: Cohort) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id FROM classes WHERE class_id=%s", (cohort.class_id,))
            if not fetchone(cur):
                raise NotFound(f"Unknown class {cohort.class_id!r}")

            if cohort.is_class_wide:
                cur.execute(
                    """
                    SELECT member_id, full_name, roll_code, class_id, guardian_contact
                    FROM members
                    WHERE class_id=%s AND is_deleted=0
                    ORDER BY roll_code, member_id
                    """,
                    (cohort.class_id,),
                )
                return [_to_member(r) for r in fetchall(cur)]

            cur.execute("SELECT subject_id FROM subjects WHERE subject_id=%s", (cohort.subject_id,))
            if not fetchone(cur):
                raise NotFound(f"Unknown subject {cohort.subject_id!r}")

            cur.execute(
                """
                SELECT DISTINCT m.member_id, m.full_name, m.roll_code, m.class_id, m.guardian_contact
                FROM cohort_enrollments ce
                JOIN members m ON m.member_id = ce.member_id
                WHERE ce.class_id=%s AND ce.subject_id=%s AND ce.is_active=1 AND m.is_deleted=0
                ORDER BY m.roll_code, m.member_id
                """,
                (cohort.class_id, cohort.subject_id),
            )
            return [_to_member(r) for r in fetchall(cur)]

    def cohorts_for(self, member_id: str) -> Sequence[Cohort]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT class_id, subject_id
                FROM cohort_enrollments
                WHERE member_id=%s AND is_active=1
                ORDER BY class_id, subject_id
                """,
                (member_id,),
            )
            return [Cohort(class_id=str(r["class_id"]), subject_id=str(r["subject_id"])) for r in fetchall(cur)]

    def get_member(self, member_id: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT member_id, full_name, roll_code, class_id, guardian_contact
                FROM members
                WHERE member_id=%s AND is_deleted=0
                """,
                (member_id,),
            )
            r = fetchone(cur)
            return _to_member(r) if r else None
