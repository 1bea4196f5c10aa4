from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any

from flask import g, jsonify, request

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, NotFound, StoreError, ValidationError

logger = logging.getLogger(__name__)


def to_jsonable(value: Any) -> Any:
    """Dataclasses/enums/dates -> plain JSON types (ISO dates, enum values)."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out = {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
        if hasattr(value, "percent"):
            out["percent"] = value.percent
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(v) for v in value]
    return value


def error_response(e: Exception):
    if isinstance(e, ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400
    if isinstance(e, AuthorizationError):
        return jsonify({"success": False, "message": str(e)}), 403
    if isinstance(e, NotFound):
        return jsonify({"success": False, "message": str(e)}), 404
    if isinstance(e, StoreError):
        logger.error("store error: %s", e)
        return jsonify({"success": False, "message": "Storage temporarily unavailable"}), 503
    logger.exception("unhandled error")
    return jsonify({"success": False, "message": "Internal error"}), 500


def register_error_handlers(app) -> None:
    app.register_error_handler(DomainError, error_response)


def identify() -> None:
    """Read caller identity set by the upstream gateway (authentication is not done here)."""
    g.user_id = (request.headers.get("X-User-Id") or "").strip()
    try:
        g.role = Role((request.headers.get("X-Role") or "").strip().lower())
    except ValueError:
        g.role = None


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            identify()
            if not g.user_id or g.role != role:
                return error_response(AuthorizationError(f"{role.value} access required"))
            return view(*args, **kwargs)

        return wrapper

    return decorator


operator_required = role_required(Role.OPERATOR)
member_required = role_required(Role.MEMBER)
