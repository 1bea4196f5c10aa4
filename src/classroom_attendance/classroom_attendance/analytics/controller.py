from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.http import member_required, operator_required, to_jsonable
from ..container import Container


def register(app: Flask, container: Container) -> None:
    analytics = container.analytics_service

    @app.route("/me/analytics", methods=["GET"], endpoint="member_analytics")
    @member_required
    def member_analytics():
        view = analytics.member_analytics(g.user_id)
        m = view.metrics
        return jsonify(
            {
                "success": True,
                "attendance_rate": m.attendance_rate,
                "average_score": m.average_score,
                "completion": to_jsonable(m.completion),
                "rank_in_class": view.ranking.rank,
                "total_ranked": view.ranking.total_ranked,
                "trend": view.trend.value,
                "recent_scores": list(view.recent_scores),
                "subjects": to_jsonable(m.subjects),
            }
        )

    @app.route("/operator/analytics/<class_id>", methods=["GET"], endpoint="cohort_analytics")
    @operator_required
    def cohort_analytics(class_id: str):
        report = analytics.cohort_report(class_id, request.args.get("subject_id") or None)
        return jsonify(
            {
                "success": True,
                "rollup": to_jsonable(report.rollup),
                "members": to_jsonable(report.members),
            }
        )

    @app.route("/operator/analytics", methods=["GET"], endpoint="operator_overview")
    @operator_required
    def operator_overview():
        class_ids = [c for c in (request.args.get("class_ids") or "").split(",") if c.strip()]
        reports = analytics.operator_overview(c.strip() for c in class_ids)
        return jsonify({"success": True, "classes": [to_jsonable(r.rollup) for r in reports]})
