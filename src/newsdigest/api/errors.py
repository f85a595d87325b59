"""API error taxonomy and JSON envelope handlers."""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base error rendered as `{success: false, error, ...extra}`."""

    status_code = 500

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_envelope(self) -> dict[str, Any]:
        return {"success": False, "error": self.message, **self.extra}


class ValidationError(ApiError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(ApiError):
    """Id does not resolve to a record."""

    status_code = 404

    def __init__(self, message: str = "Summary not found", **extra: Any) -> None:
        super().__init__(message, **extra)


class UnavailableError(ApiError):
    """Connection or store failure. Messages stay generic."""

    status_code = 500


class UpstreamError(ApiError):
    """A third-party API did not return a usable response."""

    status_code = 502


@contextmanager
def store_errors(message: str, **extra: Any) -> Iterator[None]:
    """Map any store or connection failure to UnavailableError.

    Args:
        message: Generic message reported to the caller
        **extra: Additional envelope fields (e.g. data=[] for lists)
    """
    try:
        yield
    except ApiError:
        raise
    except Exception as e:
        logger.exception(f"{message}: {e}")
        raise UnavailableError(message, **extra) from e


def format_errors(errors: Sequence[Any]) -> str:
    """Render pydantic error dicts as a single readable line."""
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        msg = error.get("msg", "Invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def _is_list_request(request: Request) -> bool:
    return request.method == "GET" and request.url.path.rstrip("/").endswith("/summaries")


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render ApiError subclasses as JSON envelopes."""
    return JSONResponse(exc.to_envelope(), status_code=exc.status_code)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI request validation failures as 400 envelopes."""
    envelope: dict[str, Any] = {"success": False, "error": format_errors(exc.errors())}
    if _is_list_request(request):
        envelope["data"] = []
    return JSONResponse(envelope, status_code=400)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the envelope handlers to an application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
