from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DailyLimitReachedError,
    DomainError,
    DuplicateScanError,
    NotFoundError,
    ScannerBusyError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (DailyLimitReachedError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (DuplicateScanError, 429),
    (ScannerBusyError, 429),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def ok(message: str = "OK", status: int = 200, **payload: Any):
    return jsonify({"success": True, "message": message, **payload}), status


def install_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        return fail(str(e), status_for(e))

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", 500)


def current_account() -> Optional[Dict[str, Any]]:
    if "account_id" not in session:
        return None
    return {
        "account_id": session["account_id"],
        "role": Role(session["role"]),
        "email": session.get("email"),
        "name": session.get("name"),
    }


def account_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "account_id" not in session:
            raise AuthenticationError("Please sign in to continue")
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "account_id" not in session:
                raise AuthenticationError("Please sign in to continue")
            if session.get("role") not in allowed:
                raise AuthorizationError("You do not have permission")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def to_jsonable(value: Any) -> Any:
    """Dataclasses, enums and dates to plain JSON values (dates as ISO 8601)."""

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value
