"""
Custom exception hierarchy for the telesales gamification service.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class TelesalesException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidInputError(TelesalesException):
    """Malformed input reached a core engine (bad date, negative counter, NaN)."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_INPUT"

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details: dict[str, Any] = {}
        if field is not None:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message=message, details=details)


class DataUnavailableError(TelesalesException):
    """A persistence collaborator failed. The caller decides whether to retry."""
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "DATA_UNAVAILABLE"

    def __init__(self, source: str, reason: str | None = None):
        details: dict[str, Any] = {"source": source}
        if reason:
            details["reason"] = reason
        super().__init__(
            message=f"Could not read or write {source}.",
            details=details,
        )


class AgentNotFoundError(TelesalesException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "AGENT_NOT_FOUND"

    def __init__(self, agent_id: int):
        super().__init__(
            message=f"Agent {agent_id} does not exist.",
            details={"agent_id": agent_id},
        )


class LeadNotFoundError(TelesalesException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "LEAD_NOT_FOUND"

    def __init__(self, lead_id: int):
        super().__init__(
            message=f"Lead {lead_id} does not exist.",
            details={"lead_id": lead_id},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def telesales_exception_handler(request: Request, exc: TelesalesException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
