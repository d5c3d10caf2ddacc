"""Custom exceptions and RFC 7807 Problem Detail error handlers."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

BASE_ERROR_URI = "https://hr-records.local/errors"


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all application exceptions → RFC 7807 JSON."""

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
        errors: Optional[dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        self.errors = errors
        super().__init__(detail)


class NotFoundException(AppException):
    """404 — entity not found."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(
            status_code=404,
            error_type="not-found",
            title=f"{entity_type} Not Found",
            detail=f"{entity_type} with id '{entity_id}' does not exist.",
        )


class ConflictError(AppException):
    """409 — unique-constraint / duplicate / referential integrity."""

    def __init__(self, field: str, value: Any, detail: Optional[str] = None) -> None:
        super().__init__(
            status_code=409,
            error_type="conflict",
            title="Conflict",
            detail=detail or f"An entry with {field}='{value}' already exists.",
            errors={field: [f"'{value}' is already in use."]} if detail is None else None,
        )


class ValidationException(AppException):
    """422 — field-level form validation failures."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__(
            status_code=422,
            error_type="validation-error",
            title="Validation Error",
            detail="One or more fields failed validation.",
            errors=errors,
        )


class BackendError(AppException):
    """502 — the record store rejected or failed the request."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=502,
            error_type="backend-error",
            title="Backend Request Failed",
            detail=detail,
        )


class LoginRequired(Exception):
    """No authenticated session — the caller is sent to the login route."""

    def __init__(self, reason: str = "Authentication required.") -> None:
        self.reason = reason
        super().__init__(reason)


# ── SQLAlchemy translation ──────────────────────────────────────────

def translate_db_error(
    exc: SQLAlchemyError,
    *,
    entity_type: str,
    entity_id: Any = None,
) -> AppException:
    """Map a SQLAlchemy error onto the application hierarchy."""
    message = str(getattr(exc, "orig", None) or exc).strip()
    if isinstance(exc, IntegrityError):
        lowered = message.lower()
        if "unique" in lowered or "duplicate" in lowered:
            return ConflictError(f"{entity_type.lower()}_id", entity_id)
        return ConflictError(
            "reference",
            entity_id,
            detail=f"{entity_type} '{entity_id}' violates a reference: {message}",
        )
    return BackendError(message or exc.__class__.__name__)


# ── RFC 7807 builder ────────────────────────────────────────────────

def _build_problem_detail(exc: AppException, request: Request) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{exc.error_type}",
        "title": exc.title,
        "status": exc.status_code,
        "detail": exc.detail,
        "instance": str(request.url.path),
    }
    if exc.errors:
        body["errors"] = exc.errors
    return body


def field_errors(errors: list[dict[str, Any]], *, skip_location: bool = True) -> dict[str, list[str]]:
    """Group pydantic error dicts by field name."""
    grouped: dict[str, list[str]] = {}
    for err in errors:
        loc = err.get("loc", ())
        if skip_location and len(loc) > 1 and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        name = ".".join(str(p) for p in loc) if loc else "form"
        grouped.setdefault(name, []).append(err.get("msg", "Invalid value"))
    return grouped


# ── FastAPI handlers ────────────────────────────────────────────────

async def _handle_app_exception(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_build_problem_detail(exc, request),
        media_type="application/problem+json",
    )


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "type": f"{BASE_ERROR_URI}/validation-error",
            "title": "Validation Error",
            "status": 422,
            "detail": "Request validation failed.",
            "instance": str(request.url.path),
            "errors": field_errors(exc.errors()),
        },
        media_type="application/problem+json",
    )


async def _handle_login_required(
    request: Request,
    exc: LoginRequired,
) -> RedirectResponse:
    from hr_records.config import settings

    return RedirectResponse(url=settings.LOGIN_ROUTE, status_code=307)


# ── Registration helper (called from main.py) ──────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""
    app.add_exception_handler(AppException, _handle_app_exception)          # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(LoginRequired, _handle_login_required)        # type: ignore[arg-type]
