"""Centralised translation of exceptions into API error responses.

Every error leaving the API has the same body::

    {"errorCode": "...", "message": "...", "details": [...],
     "timestamp": "YYYY-MM-DD HH:MM:SS", "path": "/api/v1/..."}

``details`` is only present when there is something to list (validation
failures).  Domain modules register their exception classes in
``ERROR_TABLE`` through ``register_error``; the DRF ``EXCEPTION_HANDLER``
setting points at ``api_exception_handler``, which consults the table.
Views therefore never catch domain exceptions themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Type

import structlog
from django.http import Http404
from django.utils import timezone
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    MethodNotAllowed,
    ParseError,
    UnsupportedMediaType,
)
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response

logger = structlog.get_logger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


# ---------------------------------------------------------------------------
# Error table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ErrorKind:
    status_code: int
    error_code: str


ERROR_TABLE: Dict[Type[BaseException], ErrorKind] = {}

_FRAMEWORK_CODES: Dict[Type[APIException], str] = {
    MethodNotAllowed: "METHOD_NOT_ALLOWED",
    UnsupportedMediaType: "UNSUPPORTED_MEDIA_TYPE",
}


def register_error(
    exc_class: Type[BaseException], status_code: int, error_code: str
) -> None:
    """Map a domain exception class to an HTTP status and error code."""
    ERROR_TABLE[exc_class] = ErrorKind(status_code, error_code)


def lookup_error(exc: BaseException) -> Optional[ErrorKind]:
    """Return the registered kind for ``exc``, honouring subclassing."""
    for klass in type(exc).__mro__:
        kind = ERROR_TABLE.get(klass)
        if kind is not None:
            return kind
    return None


# ---------------------------------------------------------------------------
# Response body
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Wire shape of every API error."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    error_code: str = Field(alias="errorCode")
    message: str
    details: Optional[List[str]] = None
    timestamp: datetime = Field(default_factory=timezone.localtime)
    path: str

    @field_serializer("timestamp")
    def _format_timestamp(self, value: datetime) -> str:
        return value.strftime("%Y-%m-%d %H:%M:%S")

    def to_response(self, status_code: int) -> Response:
        body = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return Response(body, status=status_code)


# ---------------------------------------------------------------------------
# Validation message helpers
# ---------------------------------------------------------------------------


def pydantic_messages(exc: PydanticValidationError) -> List[str]:
    """Flatten a Pydantic error into one human-readable line per violation."""
    messages: List[str] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"])
        if error["type"] == "value_error":
            messages.append(str(error["ctx"]["error"]))
        elif error["type"] == "missing":
            messages.append(f"{field} is required")
        elif field:
            messages.append(f"{field}: {error['msg']}")
        else:
            messages.append(error["msg"])
    return messages


def drf_messages(detail: Any, prefix: str = "") -> List[str]:
    """Flatten a DRF ``ValidationError.detail`` (str, list or dict)."""
    if isinstance(detail, dict):
        messages: List[str] = []
        for key, value in detail.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            messages.extend(drf_messages(value, name))
        return messages
    if isinstance(detail, list):
        messages = []
        for item in detail:
            messages.extend(drf_messages(item, prefix))
        return messages
    return [f"{prefix}: {detail}" if prefix else str(detail)]


# ---------------------------------------------------------------------------
# DRF exception handler
# ---------------------------------------------------------------------------


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER``: render any exception as an ``ErrorResponse``."""
    request = context.get("request")
    path = request.path if request is not None else ""
    log = logger.bind(path=path, exception=type(exc).__name__)

    kind = lookup_error(exc)
    if kind is not None:
        log.warning("api.domain_error", error_code=kind.error_code, message=str(exc))
        if kind.error_code == VALIDATION_ERROR:
            return ErrorResponse(
                error_code=VALIDATION_ERROR,
                message="Invalid input data",
                details=[str(exc)],
                path=path,
            ).to_response(kind.status_code)
        return ErrorResponse(
            error_code=kind.error_code, message=str(exc), path=path
        ).to_response(kind.status_code)

    if isinstance(exc, PydanticValidationError):
        details = pydantic_messages(exc)
        log.warning("api.validation_error", details=details)
        return ErrorResponse(
            error_code=VALIDATION_ERROR,
            message="Invalid input data",
            details=details,
            path=path,
        ).to_response(status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, (DRFValidationError, ParseError)):
        details = drf_messages(exc.detail)
        log.warning("api.validation_error", details=details)
        return ErrorResponse(
            error_code=VALIDATION_ERROR,
            message="Invalid input data",
            details=details,
            path=path,
        ).to_response(status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, APIException):
        code = _FRAMEWORK_CODES.get(type(exc), str(exc.default_code).upper())
        log.warning("api.framework_error", error_code=code)
        return ErrorResponse(
            error_code=code, message=str(exc.detail), path=path
        ).to_response(exc.status_code)

    if isinstance(exc, Http404):
        log.warning("api.not_found")
        return ErrorResponse(
            error_code="NOT_FOUND", message="Resource not found", path=path
        ).to_response(status.HTTP_404_NOT_FOUND)

    log.exception("api.unexpected_error")
    return ErrorResponse(
        error_code=INTERNAL_SERVER_ERROR,
        message="An unexpected error occurred",
        path=path,
    ).to_response(status.HTTP_500_INTERNAL_SERVER_ERROR)
