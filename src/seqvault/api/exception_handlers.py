"""
Error envelope for the seqvault HTTP API.

Every failure leaves the service in the same shape:

    {"success": false, "message": ..., "errors": [{"code", "message", "details"}],
     "data": null, "metadata": {"error_code": ...}}

Upload errors (SeqVaultError subclasses) keep their error code and details
so clients can act on ``CHUNK_HASH_MISMATCH`` or ``SESSION_EXPIRED`` without
parsing messages. Throttled requests carry a ``Retry-After`` header.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.exceptions import SeqVaultError, get_http_status_code

logger = logging.getLogger(__name__)

EnvelopeFormatter = Callable[..., Dict[str, Any]]


def upload_error_envelope(
    message: str,
    errors: Optional[List[Dict[str, Any]]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "errors": errors or [],
        "data": None,
        "metadata": metadata or {},
    }


class ExceptionHandlerRegistry:
    """Renders upload failures into the error envelope.

    Storage and backend outages (5xx) are logged with the request route and
    error details; client errors are left to the audit trail.
    """

    def __init__(self, response_formatter: Optional[EnvelopeFormatter] = None, is_production: bool = True):
        self.response_formatter = response_formatter or upload_error_envelope
        self.is_production = is_production

    def register_handlers(self, app: FastAPI) -> None:
        app.add_exception_handler(SeqVaultError, self.handle_seqvault_error)
        app.add_exception_handler(ValueError, self.handle_value_error)
        app.add_exception_handler(Exception, self.handle_unexpected_error)

    async def handle_seqvault_error(self, request: Request, exc: SeqVaultError) -> JSONResponse:
        status_code = get_http_status_code(exc)
        if status_code >= 500:
            logger.error(
                f"{exc.error_code} ({status_code}) on {request.method} {request.url.path}: "
                f"{exc.message} {exc.details}"
            )

        headers = None
        retry_after = getattr(exc, "retry_after", None)
        if retry_after is not None:
            headers = {"Retry-After": str(retry_after)}

        return JSONResponse(
            status_code=status_code,
            content=self.response_formatter(
                message=exc.message,
                errors=[exc.to_dict()],
                metadata={"error_code": exc.error_code},
            ),
            headers=headers,
        )

    async def handle_value_error(self, request: Request, exc: ValueError) -> JSONResponse:
        """Malformed identifiers and parameters that slipped past request models."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=self.response_formatter(
                message=str(exc),
                errors=[{"code": "INVALID_REQUEST", "message": str(exc), "details": {}}],
                metadata={"error_code": "INVALID_REQUEST"},
            ),
        )

    async def handle_unexpected_error(self, request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}")
        message = "An unexpected error occurred" if self.is_production else str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=self.response_formatter(
                message=message,
                metadata={"error_code": "INTERNAL_ERROR"},
            ),
        )


def register_exception_handlers(
    app: FastAPI,
    response_formatter: Optional[EnvelopeFormatter] = None,
    is_production: bool = True,
) -> None:
    """Install the seqvault error envelope on ``app``."""
    ExceptionHandlerRegistry(response_formatter, is_production).register_handlers(app)
