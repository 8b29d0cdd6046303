"""Response envelope and error handling shared by all routers."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from nexus.errors import FileTooLargeError, RateNotFoundError
from nexus.models import Pagination

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_CODES = {
    400: "BAD_REQUEST",
    403: "AUTHORIZATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "FILE_TOO_LARGE",
    500: "INTERNAL_ERROR",
    501: "NOT_IMPLEMENTED",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""

    success: bool = True
    message: str = "Success"
    data: Optional[T] = None
    pagination: Optional[Pagination] = None
    timestamp: datetime = Field(default_factory=_now)


class ApiError(HTTPException):
    """HTTP error with a machine-readable code."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.code = code or STATUS_CODES.get(status_code, "ERROR")
        self.errors = errors


def success_response(
    data: Any = None,
    message: str = "Success",
    pagination: Optional[Pagination] = None,
) -> ApiResponse:
    """Wrap a payload in the success envelope."""
    return ApiResponse(data=data, message=message, pagination=pagination)


def not_found(resource: str) -> ApiError:
    return ApiError(404, f"{resource} not found")


def bad_request(error: ValueError) -> ApiError:
    """Translate a domain ValueError into a 400 (or 413 for oversized uploads)."""
    if isinstance(error, FileTooLargeError):
        return ApiError(413, str(error), code="FILE_TOO_LARGE")
    return ApiError(400, str(error), code=getattr(error, "code", "BAD_REQUEST"))


def rate_not_found(error: RateNotFoundError) -> ApiError:
    return ApiError(404, str(error), code="RATE_NOT_FOUND")


def server_error(error: Exception) -> ApiError:
    return ApiError(500, str(error) or "Internal server error")


def _error_body(
    request: Request,
    message: str,
    code: str,
    errors: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    body = {
        "success": False,
        "message": message,
        "code": code,
        "timestamp": _now().isoformat(),
        "path": request.url.path,
        "method": request.method,
    }
    if errors:
        body["errors"] = errors
    return body


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render any HTTPException in the error envelope."""
    code = getattr(exc, "code", None) or STATUS_CODES.get(exc.status_code, "ERROR")
    errors = getattr(exc, "errors", None)
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(
            _error_body(request, str(exc.detail), code, errors)
        ),
        headers=getattr(exc, "headers", None),
    )


def _plain(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool, list, dict)) or value is None:
        return value
    return str(value)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400 VALIDATION_ERROR."""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
            "message": error.get("msg"),
            "value": _plain(error.get("input")),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(
            _error_body(request, "Validation failed", "VALIDATION_ERROR", errors)
        ),
    )


def validation_error(error: ValidationError) -> ApiError:
    """400 for a model built inside a handler, e.g. from form fields."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg"),
            "value": _plain(err.get("input")),
        }
        for err in error.errors()
    ]
    return ApiError(400, "Validation failed", code="VALIDATION_ERROR", errors=errors)
