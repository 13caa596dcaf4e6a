"""Legacy size-bounded transfer routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from engine.emit import open_bounded_stream
from engine.ingest import ingest
from engine.limits import LimitsPolicy
from gateway.dependencies import body_source, get_limits
from gateway.responses import ClosingStreamingResponse
from gateway.schemas.transfer import IngestResponse

router = APIRouter(tags=["Legacy"])


@router.post("/upload", response_model=IngestResponse, response_model_exclude_none=True)
async def legacy_upload(request: Request, limits: LimitsPolicy = Depends(get_limits)):
    """
    Count an uploaded body against the legacy ingest cap.

    Raises:
        - 400: No body, or the body stream broke mid-read
        - 413: Body exceeds the legacy cap
    """
    result = await ingest(body_source(request), limits.legacy_ingest_bytes)
    return IngestResponse(bytes_received=result.bytes_received, elapsed_ms=result.elapsed_ms)


@router.get("/download")
async def legacy_download(
    byte_count: Optional[str] = Query(None, alias="bytes", description="Exact number of bytes to send"),
    limits: LimitsPolicy = Depends(get_limits),
):
    """
    Stream exactly `bytes` filler bytes in fixed-size chunks.

    Returns:
        - Streaming response with a Content-Length matching the clamped size
    """
    byte_target = limits.byte_target(byte_count)
    return ClosingStreamingResponse(
        open_bounded_stream(limits, byte_target),
        media_type="application/octet-stream",
        headers={
            "Cache-Control": "no-store",
            "Content-Length": str(byte_target),
        },
    )
