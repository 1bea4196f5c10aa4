from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..common.http import member_required, operator_required, to_jsonable
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFound, ValidationError
from ..container import Container
from .model import AttendanceFilter
from .recorder import AttendanceRecorder


def _parse_status(value: Optional[str]) -> AttendanceStatus:
    try:
        return AttendanceStatus((value or "").strip().lower())
    except ValueError:
        raise ValidationError("Status must be present, late or absent")


def _optional_date(value: Optional[str]) -> Optional[date]:
    return parse_iso_date(value) if value else None


def _arrival(value: Optional[str], on: date) -> Optional[datetime]:
    if not value:
        return None
    return datetime.combine(on, parse_clock_time(value))


def _session_view(recorder: AttendanceRecorder, on: date) -> dict:
    committed_by_member = recorder.load_committed(on)
    rows = []
    for m in recorder.roster:
        committed = committed_by_member.get(m.member_id)
        rows.append(
            {
                "member_id": m.member_id,
                "full_name": m.full_name,
                "roll_code": m.roll_code,
                "draft": to_jsonable(recorder.draft_entry(m.member_id)),
                "committed": to_jsonable(committed),
                "action": "edit" if committed else "create",
            }
        )
    return {
        "class_id": recorder.cohort.class_id,
        "subject_id": recorder.cohort.subject_id,
        "date": on.isoformat(),
        "drafted": len(recorder.draft),
        "members": rows,
    }


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _recorder(class_id: str, subject_id: str) -> AttendanceRecorder:
        return service.get_session(recorder_id=g.user_id, class_id=class_id, subject_id=subject_id)

    @app.route("/operator/sessions", methods=["POST"], endpoint="open_session")
    @operator_required
    def open_session():
        data = request.get_json(silent=True) or {}
        recorder = service.open_session(
            recorder_id=g.user_id,
            class_id=data.get("class_id"),
            subject_id=data.get("subject_id"),
        )
        return jsonify({"success": True, **_session_view(recorder, recorder.draft.on)}), 201

    @app.route("/operator/sessions/<class_id>/<subject_id>", methods=["GET"], endpoint="show_session")
    @operator_required
    def show_session(class_id: str, subject_id: str):
        recorder = _recorder(class_id, subject_id)
        on = _optional_date(request.args.get("date")) or recorder.draft.on
        return jsonify({"success": True, **_session_view(recorder, on)})

    @app.route("/operator/sessions/<class_id>/<subject_id>", methods=["DELETE"], endpoint="close_session")
    @operator_required
    def close_session(class_id: str, subject_id: str):
        service.close_session(recorder_id=g.user_id, class_id=class_id, subject_id=subject_id)
        return jsonify({"success": True})

    @app.route("/operator/sessions/<class_id>/<subject_id>/marks", methods=["POST"], endpoint="mark_member")
    @operator_required
    def mark_member(class_id: str, subject_id: str):
        recorder = _recorder(class_id, subject_id)
        data = request.get_json(silent=True) or {}
        member_id = (data.get("member_id") or "").strip()
        if not member_id:
            raise ValidationError("member_id is required")

        entry = recorder.mark(
            member_id,
            _parse_status(data.get("status")),
            _arrival(data.get("arrival_time"), recorder.draft.on),
        )
        return jsonify({"success": True, "entry": to_jsonable(entry)})

    @app.route("/operator/sessions/<class_id>/<subject_id>/draft", methods=["DELETE"], endpoint="clear_draft")
    @operator_required
    def clear_draft(class_id: str, subject_id: str):
        _recorder(class_id, subject_id).clear()
        return jsonify({"success": True})

    @app.route("/operator/sessions/<class_id>/<subject_id>/commit", methods=["POST"], endpoint="commit_draft")
    @operator_required
    def commit_draft(class_id: str, subject_id: str):
        recorder = _recorder(class_id, subject_id)
        data = request.get_json(silent=True) or {}
        result = recorder.commit(_optional_date(data.get("date")))
        return jsonify(
            {
                "success": True,
                "message": "Attendance marked successfully",
                "committed_count": result.committed_count,
                "notifications": to_jsonable(result.notifications),
            }
        )

    @app.route("/operator/attendance", methods=["PUT"], endpoint="amend_attendance")
    @operator_required
    def amend_attendance():
        data = request.get_json(silent=True) or {}
        on = parse_iso_date(data.get("date") or "")
        record = service.amend(
            recorder_id=g.user_id,
            member_id=(data.get("member_id") or "").strip(),
            class_id=(data.get("class_id") or "").strip(),
            subject_id=(data.get("subject_id") or "").strip(),
            on=on,
            status=_parse_status(data.get("status")),
            arrival_time=_arrival(data.get("arrival_time"), on),
        )
        return jsonify({"success": True, "record": to_jsonable(record)})

    @app.route("/operator/attendance", methods=["GET"], endpoint="operator_attendance")
    @operator_required
    def operator_attendance():
        class_id = (request.args.get("class_id") or "").strip()
        if not class_id:
            raise ValidationError("class_id is required")

        status = request.args.get("status")
        flt = AttendanceFilter(
            class_id=class_id,
            subject_id=request.args.get("subject_id") or None,
            member_id=request.args.get("member_id") or None,
            start=_optional_date(request.args.get("start")),
            end=_optional_date(request.args.get("end")),
            status=_parse_status(status) if status else None,
        )
        result, summary = service.report(flt)
        return jsonify(
            {
                "success": result.ok,
                "error": result.error,
                "records": to_jsonable(result.records),
                "summary": to_jsonable(summary),
                "sessions": to_jsonable(service.queries.sessions(result.records)),
            }
        )

    @app.route("/me/cohorts", methods=["GET"], endpoint="member_cohorts")
    @member_required
    def member_cohorts():
        cohorts = container.enrollment_repo.cohorts_for(g.user_id)
        return jsonify({"success": True, "cohorts": to_jsonable(list(cohorts))})

    @app.route("/me/attendance", methods=["GET"], endpoint="member_attendance")
    @member_required
    def member_attendance():
        member = container.enrollment_repo.get_member(g.user_id)
        if not member:
            raise NotFound("Member record not found")

        flt = AttendanceFilter(
            class_id=member.class_id,
            subject_id=request.args.get("subject_id") or None,
            member_id=member.member_id,
            start=_optional_date(request.args.get("start")),
            end=_optional_date(request.args.get("end")),
        )
        result, summary = service.report(flt)
        return jsonify(
            {
                "success": result.ok,
                "error": result.error,
                "records": to_jsonable(result.records),
                "summary": to_jsonable(summary),
            }
        )
