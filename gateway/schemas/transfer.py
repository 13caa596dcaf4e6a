"""Pydantic schemas for transfer and service endpoints."""

from typing import Optional
from pydantic import BaseModel, computed_field


class IngestResponse(BaseModel):
    """Response model for upload measurements."""
    ok: bool = True
    bytes_received: int
    elapsed_ms: float
    seconds: Optional[float] = None

    @computed_field
    @property
    def bytes(self) -> int:
        """Short name kept for clients reading `bytes`."""
        return self.bytes_received

    @computed_field
    @property
    def ms(self) -> float:
        return self.elapsed_ms


class ErrorResponse(BaseModel):
    """Error body returned by the exception handlers."""
    detail: str
    code: str
    bytes_received: Optional[int] = None


class HealthResponse(BaseModel):
    """Response model for the health check."""
    ok: bool = True
    ts: int


class VersionResponse(BaseModel):
    """Response model for the version endpoint."""
    name: str
    version: str
