"""
astroblog.api.errors

Response envelope and exception handlers.

Responsibilities:
- Define the `{success, data, error, message}` envelope used by content endpoints.
- Translate authorization error kinds into 401/403 responses.
- Render HTTP errors and invalid input in the same envelope shape.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from astroblog.auth.errors import AuthenticationRequired, AuthorizationError
from astroblog.observability.logging import get_logger
from astroblog.validation import Invalid, violations_from

log = get_logger(__name__)

# Spelled as a literal: the starlette constant name for 422 differs between releases.
HTTP_422 = 422


class ApiResponse(BaseModel):
    success: bool
    data: Any = None
    error: str | None = None
    message: str | None = None


def ok(data: Any = None, *, message: str | None = None) -> dict[str, Any]:
    return ApiResponse(success=True, data=data, message=message).model_dump(exclude_none=True)


def failure(
    status_code: int,
    error: str,
    *,
    message: str | None = None,
    data: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ApiResponse(success=False, error=error, message=message, data=data)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers
    )


def invalid_input(result: Invalid) -> JSONResponse:
    return failure(HTTP_422, "Validation failed", data=result.as_dict())


async def _authorization_error(_: Request, exc: AuthorizationError) -> JSONResponse:
    log.info("authorization_denied", reason=exc.reason.value, error=exc.message)
    if isinstance(exc, AuthenticationRequired):
        return failure(
            HTTP_401_UNAUTHORIZED, exc.message, headers={"WWW-Authenticate": "Bearer"}
        )
    return failure(HTTP_403_FORBIDDEN, exc.message)


async def _http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return failure(exc.status_code, str(exc.detail), headers=exc.headers)


async def _request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
    return invalid_input(Invalid(violations_from(exc.errors())))


def install_exception_handlers(app: FastAPI) -> None:
    # Starlette types handlers as taking `Exception`; each is registered for its own class.
    app.add_exception_handler(AuthorizationError, _authorization_error)
    app.add_exception_handler(StarletteHTTPException, _http_exception)
    app.add_exception_handler(RequestValidationError, _request_validation)


# --- Module Notes -----------------------------------------------------------
# Every `AuthorizationError` reaching the app ends up as a 401/403 response here;
# handlers never downgrade a denial to a success.
