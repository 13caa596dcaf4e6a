"""Pydantic schemas for gateway responses."""

from gateway.schemas.transfer import (
    ErrorResponse,
    HealthResponse,
    IngestResponse,
    VersionResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "IngestResponse",
    "VersionResponse",
]
