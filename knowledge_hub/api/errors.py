"""
API error taxonomy

Every failure a handler reports to the caller is raised as an ApiError
subclass and rendered by api_error_handler into the ErrorResponse shape.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    kind = "InternalError"

    def __init__(self, message: str, kind: Optional[str] = None, detail: Optional[str] = None):
        self.message = message
        if kind:
            self.kind = kind
        self.detail = detail
        super().__init__(message)


class RequestValidationFailed(ApiError):
    """Request is well-formed but violates a field rule.

    kind is one of MissingRequiredField, NoUpdatableFields, MissingMessage,
    InvalidRequest.
    """

    status_code = 400
    kind = "MissingRequiredField"


class InvalidReference(ApiError):
    """A version/category/module id does not reference an existing row."""

    status_code = 400
    kind = "InvalidReference"

    def __init__(self, message: str = "Invalid reference in version_id/category_id/module_id"):
        super().__init__(message)


class MissingApiKey(ApiError):
    status_code = 401
    kind = "MissingApiKey"

    def __init__(self, message: str = "API key required"):
        super().__init__(message)


class InvalidApiKey(ApiError):
    status_code = 403
    kind = "InvalidApiKey"

    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message)


class NotFound(ApiError):
    status_code = 404
    kind = "NotFound"

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class StorageFailure(ApiError):
    status_code = 500
    kind = "StorageFailure"


class UpstreamFailure(ApiError):
    status_code = 500
    kind = "UpstreamFailure"


def error_body(error: ApiError) -> dict:
    """Build the JSON body for an ApiError; detail is only exposed on 5xx."""
    return {
        "error": error.message,
        "kind": error.kind,
        "detail": error.detail if error.status_code >= 500 else None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def describe_validation_errors(errors) -> str:
    """Flatten pydantic error entries into "field: message" pairs."""
    parts = []
    for err in errors:
        # Drop the "body"/"query" prefix FastAPI puts in front of field names
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query")]
        parts.append(f"{'.'.join(loc) or 'body'}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def to_api_error(exc: RequestValidationError) -> ApiError:
    """Map a request that failed schema validation onto the taxonomy.

    A path value that does not parse (e.g. /api/articles/abc) cannot name
    an existing row, so it is reported as NotFound. Anything else in the
    request is an InvalidRequest.
    """
    errors = exc.errors()
    if any(err.get("loc", ())[:1] == ("path",) for err in errors):
        return NotFound()
    return RequestValidationFailed(describe_validation_errors(errors), kind="InvalidRequest")


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """FastAPI exception handler for ApiError"""
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed with %s: %s",
            request.method,
            request.url.path,
            exc.kind,
            exc.detail or exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI's schema validation errors in the ErrorResponse shape"""
    error = to_api_error(exc)
    logger.info("%s %s rejected: %s", request.method, request.url.path, error.message)
    return JSONResponse(status_code=error.status_code, content=error_body(error))
