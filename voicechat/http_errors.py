"""Uniform JSON error envelope and app-wide exception handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from voicechat.schemas import ErrorResponse

log = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /api/health",
    "POST /api/chat",
    "GET /audio/:filename",
    "DELETE /api/cleanup",
    "GET /api/config",
]


def error_response(
    status_code: int,
    error: str,
    *,
    error_type: str | None = None,
    details: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=error, type=error_type, details=details)
    return JSONResponse(
        body.model_dump(exclude_none=True), status_code=status_code, headers=headers
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


async def _on_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(
        400,
        "Invalid request body",
        error_type="validation_error",
        details=_format_validation_errors(exc),
    )


async def _on_http_error(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # 405 is reported as an unknown endpoint: routes are matched on method + path.
    if exc.status_code in (404, 405):
        return JSONResponse(
            {"error": "Endpoint not found", "availableEndpoints": AVAILABLE_ENDPOINTS},
            status_code=404,
        )
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


async def _on_unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return error_response(500, "Something went wrong!", error_type="unhandled_error")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _on_validation_error)
    app.add_exception_handler(StarletteHTTPException, _on_http_error)
    app.add_exception_handler(Exception, _on_unhandled_error)
