"""Pydantic schemas for API responses."""

from server.schemas.common import ErrorResponse
from server.schemas.transfer import (
    HealthResponse,
    ReadinessResponse,
    ServiceStatusResponse,
    UploadAcknowledgment,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "ReadinessResponse",
    "ServiceStatusResponse",
    "UploadAcknowledgment",
]
