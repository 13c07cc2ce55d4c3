"""Error Handlers - every failure leaves the API as the same JSON envelope.

Invariants:
    - WaitlistError keeps its own status and code
    - Body, path and query validation failures are 400 VALIDATION_ERROR
    - Anything else is 500 INTERNAL_ERROR with no internals in the body
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import ErrorCategory, ErrorSeverity, WaitlistError

logger = logging.getLogger(__name__)


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


async def handle_waitlist_error(request: Request, exc: WaitlistError):
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        "%s on %s: %s", exc.code, request.url.path, exc.message,
        extra={
            "error_code": exc.code,
            "status_code": exc.http_status,
            "path": request.url.path,
            "ban_id": exc.context.ban_id,
            "account_id": exc.context.account_id,
            "entity_id": exc.context.entity_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.info(
        "Rejected request to %s: %s",
        request.url.path, ", ".join(d["field"] for d in details),
        extra={"path": request.url.path, "status_code": 400},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
            details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        "Unhandled %s on %s", type(exc).__name__, request.url.path,
        exc_info=exc,
        extra={"path": request.url.path, "status_code": 500},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WaitlistError, handle_waitlist_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
