# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exception handlers mapping domain errors to the JSON error envelope.

Every failure leaves the API as:

    {"success": false, "error": {"kind": "...", "message": "..."}}
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domains.errors import PortalError, ValidationError
from src.models.common import ErrorBody, ErrorResponse

logger = logging.getLogger(__name__)


def error_response(status_code: int, body: ErrorBody) -> JSONResponse:
    """Build an error envelope response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=body).model_dump(exclude_none=True),
    )


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Render a domain error."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.kind)
    return error_response(exc.status_code, ErrorBody(**exc.to_dict()))


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render FastAPI body/path validation failures as ValidationError."""
    fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorBody(
            kind=ValidationError.kind,
            message="Request validation failed",
            details={"fields": fields},
        ),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render an unexpected error without leaking its text."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorBody(kind="InternalError", message="Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error envelope handlers to an application."""
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
