"""Structured JSON error responses."""

from __future__ import annotations

import logging
from typing import Any, Optional, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from stackchess.errors import ChessError

logger = logging.getLogger(__name__)

STATUS_CODES = {
    400: "bad_request",
    404: "not_found",
    409: "conflict",
    422: "unprocessable_entity",
}


def error_envelope(
    *,
    code: str,
    message: str,
    request_id: str,
    field_errors: Optional[list[dict[str, str]]] = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": {"code": code, "message": message, "request_id": request_id}}
    if field_errors:
        payload["error"]["field_errors"] = field_errors
    return payload


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")


def _code_for(status_code: int) -> str:
    if status_code >= 500:
        return "internal_error"
    return STATUS_CODES.get(status_code, "error")


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, HTTPException):
        return await unhandled_exception_handler(request, exc)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    payload = error_envelope(code=_code_for(exc.status_code), message=message, request_id=_request_id(request))
    return JSONResponse(status_code=exc.status_code, content=payload)


async def chess_error_handler(request: Request, exc: Exception) -> JSONResponse:
    payload = error_envelope(code="bad_request", message=str(exc), request_id=_request_id(request))
    return JSONResponse(status_code=400, content=payload)


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    rve = cast(RequestValidationError, exc)
    errors = []
    for err in rve.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part is not None)
        errors.append({"field": loc, "code": err.get("type", "value_error"), "message": err.get("msg", "invalid value")})
    payload = error_envelope(
        code="unprocessable_entity",
        message="Validation error",
        request_id=_request_id(request),
        field_errors=errors,
    )
    return JSONResponse(status_code=422, content=payload)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)
    logger.exception("Unhandled exception", extra={"request_id": request_id})
    payload = error_envelope(code="internal_error", message="Internal Server Error", request_id=request_id)
    return JSONResponse(status_code=500, content=payload)


def install_error_handlers(app) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ChessError, chess_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
