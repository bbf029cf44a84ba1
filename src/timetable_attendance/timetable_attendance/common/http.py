from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidTransition,
    NotConfigured,
    RemoteFailure,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthorizationError, 403),
    (NotConfigured, 404),
    (InvalidTransition, 409),
    (RemoteFailure, 502),
    (ValidationError, 400),
)


def json_errors(view):
    """Map domain exceptions to JSON error responses: {"message": ...}."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls)), 400)
            if status >= 500:
                logger.error(f"{request.method} {request.path} failed: {e}")
            else:
                logger.warning(f"{request.method} {request.path} rejected: {e}")
            return jsonify({"message": str(e)}), status
        except Exception:
            logger.exception(f"{request.method} {request.path} crashed")
            return jsonify({"message": "Internal server error"}), 500

    return wrapper


def current_role() -> Role:
    """Role stored in the session by the (external) login flow."""

    try:
        return Role(session.get("role"))
    except ValueError:
        raise AuthorizationError("Not signed in")


def current_user_id() -> Optional[int]:
    value = session.get("user_id")
    return int(value) if value is not None else None


def arg(name: str, *, required: bool = True, source: Optional[dict] = None) -> Optional[str]:
    values = request.args if source is None else source
    value = values.get(name)
    if value is None or str(value).strip() == "":
        if required:
            raise ValidationError(f"{name} is required")
        return None
    return str(value).strip()


def date_arg(name: str, *, source: Optional[dict] = None) -> date:
    value = arg(name, source=source)
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")


def int_arg(name: str, *, required: bool = True, source: Optional[dict] = None) -> Optional[int]:
    value = arg(name, required=required, source=source)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be a number")
