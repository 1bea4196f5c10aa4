from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AssessmentFilter, AssessmentResult, normalize_percentage
from .repository import AssessmentRepository


class MySQLAssessmentRepository(AssessmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_assessments(self, flt: AssessmentFilter) -> Sequence[AssessmentResult]:
        clauses = ["a.class_id=%s"]
        params: list[object] = [flt.class_id]

        if flt.subject_id is not None:
            clauses.append("a.subject_id=%s")
            params.append(flt.subject_id)
        if flt.member_id is not None:
            clauses.append("r.member_id=%s")
            params.append(flt.member_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.member_id, r.assessment_id, a.class_id, a.subject_id, s.subject_name,
                       r.score, a.max_score, r.percentage, r.recorded_at
                FROM assessment_results r
                JOIN assessments a ON a.assessment_id = r.assessment_id
                JOIN subjects s ON s.subject_id = a.subject_id
                WHERE {where}
                ORDER BY r.recorded_at DESC, r.result_id DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AssessmentResult(
                    member_id=str(r["member_id"]),
                    assessment_id=str(r["assessment_id"]),
                    class_id=str(r["class_id"]),
                    subject_id=str(r["subject_id"]),
                    subject_name=r["subject_name"],
                    score=float(r["score"]) if r.get("score") is not None else None,
                    max_score=float(r.get("max_score") or 0),
                    percentage=normalize_percentage(r.get("percentage")),
                    recorded_at=r["recorded_at"],
                )
                for r in rows
            ]

    def count_defined(self, *, class_id: str, subject_id: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if subject_id is None:
                cur.execute("SELECT COUNT(*) AS n FROM assessments WHERE class_id=%s", (class_id,))
            else:
                cur.execute(
                    "SELECT COUNT(*) AS n FROM assessments WHERE class_id=%s AND subject_id=%s",
                    (class_id, subject_id),
                )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def count_defined_by_subject(self, *, class_id: str) -> Mapping[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.subject_name, COUNT(*) AS n
                FROM assessments a
                JOIN subjects s ON s.subject_id = a.subject_id
                WHERE a.class_id=%s
                GROUP BY s.subject_name
                """,
                (class_id,),
            )
            return {r["subject_name"]: int(r["n"]) for r in fetchall(cur)}
