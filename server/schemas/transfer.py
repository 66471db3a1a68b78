"""Pydantic schemas for the transfer endpoints."""

from pydantic import BaseModel


class UploadAcknowledgment(BaseModel):
    """Response model for a drained upload."""
    status: str = "ok"
    bytes_received: int


class ServiceStatusResponse(BaseModel):
    """Response model for the root endpoint."""
    message: str
    status: str


class HealthResponse(BaseModel):
    """Response model for liveness checks."""
    status: str
    service: str


class ReadinessResponse(BaseModel):
    """Response model for readiness checks."""
    ready: bool
    random_source: str
