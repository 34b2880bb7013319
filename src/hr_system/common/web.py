"""Shared Flask helpers: JSON envelope, session identity and error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional, Type, TypeVar

import pydantic
from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, DomainError, ForbiddenError
from ..users.model import Actor

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200):
    payload: dict[str, Any] = {"success": True}
    if data is not None:
        payload["data"] = data
    if message:
        payload["message"] = message
    return jsonify(payload), status


def fail(message: str, *, code: str, status: int):
    return jsonify({"success": False, "message": message, "code": code}), status


def current_actor() -> Actor:
    if "user_id" not in session:
        raise AuthenticationError("Authentication required")
    employee_id = session.get("employee_id")
    return Actor(
        user_id=int(session["user_id"]),
        employee_id=int(employee_id) if employee_id is not None else None,
        role=Role(session.get("role", Role.EMPLOYEE.value)),
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_actor()
        return view(*args, **kwargs)

    return wrapper


def role_required(*roles: Role | str):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            actor = current_actor()
            if not actor.has_role(*roles):
                raise ForbiddenError(f"Access denied. Required roles: {', '.join(sorted(Role(r).value for r in roles))}")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def own_employee_id(actor: Actor, requested: Optional[int]) -> Optional[int]:
    """Employees only see their own data; other roles may pick any employee."""
    if actor.role == Role.EMPLOYEE:
        employee_id = require_employee(actor)
        if requested is not None and requested != employee_id:
            raise ForbiddenError("You can only access your own records")
        return employee_id
    return requested


def require_employee(actor: Actor) -> int:
    if actor.employee_id is None:
        raise ForbiddenError("No employee profile is linked to this account")
    return actor.employee_id


def parse_body(schema: Type[SchemaT]) -> SchemaT:
    return schema.model_validate(request.get_json(silent=True) or {})


def parse_query(schema: Type[SchemaT]) -> SchemaT:
    return schema.model_validate(request.args.to_dict())


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        return fail(str(err) or err.code, code=err.code, status=err.status)

    @app.errorhandler(pydantic.ValidationError)
    def handle_validation_error(err: pydantic.ValidationError):
        first = err.errors()[0] if err.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid input"))
        return fail(message, code="VALIDATION_ERROR", status=400)

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return fail(err.description or err.name, code=err.name.upper().replace(" ", "_"), status=err.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", code="INTERNAL_ERROR", status=500)
