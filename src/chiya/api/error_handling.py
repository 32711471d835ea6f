from __future__ import annotations

import logging
import os
import traceback
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from chiya.api.dependencies import AccessDeniedError, InsufficientPermissionsError
from chiya.api.middleware.request_id import get_request_id
from chiya.application.ports.security import ExpiredTokenError, InvalidTokenError
from chiya.application.use_cases.login_user import AccountDeactivatedError, InvalidCredentialsError
from chiya.application.use_cases.register_user import UserAlreadyExistsError
from chiya.application.use_cases.session_tokens import (
    InvalidRefreshTokenError,
    RefreshTokenRequiredError,
    TokenUserDeactivatedError,
    TokenUserNotFoundError,
)
from chiya.application.use_cases.user_profile import (
    EmailTakenError,
    IncorrectPasswordError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


def _is_production() -> bool:
    return os.getenv("APP_ENV", "dev").lower() in {"prod", "production"}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None) or get_request_id()


def _error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "error",
            "error": {
                "code": code,
                "message": message,
                "details": jsonable_encoder(details or {}),
            },
            "requestId": _request_id(request),
        },
    )


def _exception_handler(status_code: int, code: str, message: str | None = None):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            request,
            status_code=status_code,
            code=code,
            message=message or str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 405:
        code = "METHOD_NOT_ALLOWED"
    return _error_response(request, status_code=http_exc.status_code, code=code, message=message)


async def _validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        request,
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": validation_exc.errors()},
    )


async def _integrity_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("integrity_error", exc_info=True)
    return _error_response(
        request,
        status_code=400,
        code="DUPLICATE_VALUE",
        message="A record with this value already exists",
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", extra={"path": request.url.path})
    if _is_production():
        return _error_response(
            request,
            status_code=500,
            code="INTERNAL_ERROR",
            message=GENERIC_ERROR_MESSAGE,
        )
    return _error_response(
        request,
        status_code=500,
        code="INTERNAL_ERROR",
        message=str(exc) or GENERIC_ERROR_MESSAGE,
        details={"stack": "".join(traceback.format_exception(exc))},
    )


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[Exception], int, str, str | None]] = [
        (UserAlreadyExistsError, 400, "USER_EXISTS", None),
        (EmailTakenError, 400, "EMAIL_TAKEN", None),
        (IncorrectPasswordError, 400, "INCORRECT_PASSWORD", None),
        (RefreshTokenRequiredError, 400, "REFRESH_TOKEN_REQUIRED", None),
        (InvalidCredentialsError, 401, "INVALID_CREDENTIALS", None),
        (AccountDeactivatedError, 401, "ACCOUNT_DEACTIVATED", None),
        (TokenUserDeactivatedError, 401, "ACCOUNT_DEACTIVATED", None),
        (TokenUserNotFoundError, 401, "INVALID_TOKEN", None),
        (InvalidRefreshTokenError, 401, "INVALID_REFRESH_TOKEN", None),
        (AccessDeniedError, 401, "ACCESS_DENIED", None),
        (
            ExpiredTokenError,
            401,
            "TOKEN_EXPIRED",
            "Your token has expired. Please log in again.",
        ),
        (InvalidTokenError, 401, "INVALID_TOKEN", "Invalid token."),
        (InsufficientPermissionsError, 403, "FORBIDDEN", None),
        (UserNotFoundError, 404, "USER_NOT_FOUND", None),
        (ValueError, 400, "INVALID_REQUEST", None),
    ]

    for exc_cls, status_code, code, message in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code, message))

    app.add_exception_handler(IntegrityError, _integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
