"""Error responses for the product API.

Maps domain failures onto HTTP:
- not found              -> 404
- invalid request        -> 400
- store of record failed -> 503
- anything else          -> 500

Cache failures never reach this module.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from productcache.api.responses import ApiErrorResponse
from productcache.errors import StoreError
from productcache.observability.logging import correlation_id_var, request_id_var

logger = logging.getLogger(__name__)


class ProductApiError(HTTPException):
    """Base exception for product API errors."""

    def __init__(self, status_code: int, text: str):
        self.text = text
        super().__init__(status_code=status_code, detail=text)

    def to_response(self) -> ApiErrorResponse:
        return _error_body(self.text)


class NotFoundError(ProductApiError):
    """Product not found (404)."""

    def __init__(self, product_id: int):
        super().__init__(
            status_code=404,
            text=f"Product with ID {product_id} was not found.",
        )


class BadRequestError(ProductApiError):
    """Invalid request (400)."""

    def __init__(self, text: str):
        super().__init__(status_code=400, text=text)


class ServiceUnavailableError(ProductApiError):
    """Store of record unavailable (503)."""

    def __init__(self, text: str = "Store unavailable. Please retry later."):
        super().__init__(status_code=503, text=text)


class InternalServerError(ProductApiError):
    """Internal server error (500)."""

    def __init__(self, text: str = "Internal server error. Please contact support."):
        super().__init__(status_code=500, text=text)


def _error_body(message: str) -> ApiErrorResponse:
    return ApiErrorResponse(
        message=message,
        trace_id=correlation_id_var.get() or None,
        request_id=request_id_var.get() or None,
    )


def _json(status_code: int, body: ApiErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


async def product_api_exception_handler(request: Request, exc: ProductApiError) -> JSONResponse:
    """Exception handler for product API errors."""
    return _json(exc.status_code, exc.to_response())


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Exception handler for malformed requests."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return _json(400, BadRequestError(f"Invalid request: {details}").to_response())


async def store_exception_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Exception handler for store of record failures."""
    logger.error(f"Store failure during {request.method} {request.url.path}: {exc}")
    return _json(503, ServiceUnavailableError().to_response())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler for unexpected errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=exc)
    return _json(500, InternalServerError().to_response())
