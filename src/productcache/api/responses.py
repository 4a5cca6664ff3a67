"""Response envelopes for the product API.

Every successful body is ``{"success": true, "message": ..., "data": ...}``;
every error body is ``{"success": false, "message": ..., "traceId": ...,
"requestId": ...}``.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for successful responses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    message: str | None = None
    data: T | None = None

    @classmethod
    def ok(cls, data: T, message: str | None = None) -> ApiResponse[T]:
        return cls(success=True, message=message, data=data)


class ApiErrorResponse(BaseModel):
    """Envelope for error responses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = False
    message: str
    trace_id: str | None = None
    request_id: str | None = None
