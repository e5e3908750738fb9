"""Flask glue shared by the feature controllers: auth guards and error mapping."""

from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, session

from .core.enums import Role
from .core.exceptions import (
    AlreadyReviewed,
    AppError,
    AuthenticationError,
    DomainError,
    Forbidden,
    InsufficientBalance,
    InternalError,
    NotFound,
    OverlappingRequest,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses before their bases.
_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (Forbidden, 403),
    (NotFound, 404),
    (OverlappingRequest, 409),
    (AlreadyReviewed, 409),
    (InsufficientBalance, 422),
)


def status_for(error: AppError) -> int:
    if isinstance(error, InternalError):
        return 500
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def error_response(error: AppError):
    body = {"code": error.code, "message": error.message}
    details = error.details()
    if details:
        body["details"] = details
    return jsonify(body), status_for(error)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        return error_response(error)

    @app.errorhandler(InternalError)
    def handle_internal_error(error: InternalError):
        logger.error("Internal error: %s", error, extra={"event": "internal_error"})
        return error_response(error)


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session["role"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"code": "AUTH_REQUIRED", "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"code": "AUTH_REQUIRED", "message": "Please log in to continue"}), 401
        if session.get("role") != Role.ADMIN.value:
            return error_response(Forbidden("Administrator privileges required"))
        return view(*args, **kwargs)

    return wrapper
