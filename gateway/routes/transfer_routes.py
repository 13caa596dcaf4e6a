"""Time-bounded transfer routes (upload and download for a fixed window)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from engine.emit import open_timed_stream
from engine.ingest import ingest
from engine.limits import LimitsPolicy
from gateway.dependencies import body_source, get_limits
from gateway.responses import ClosingStreamingResponse
from gateway.schemas.transfer import IngestResponse

router = APIRouter(prefix="/api", tags=["Transfer"])


@router.post("/u", response_model=IngestResponse)
async def timed_upload(
    request: Request,
    t: Optional[str] = Query(None, description="Measurement window in seconds"),
    limits: LimitsPolicy = Depends(get_limits),
):
    """
    Count an uploaded body without keeping it.

    Parameters:
        - t: Window the client uploads for, echoed back clamped
        - Body: arbitrary bytes (application/octet-stream)

    Returns:
        - ok: true
        - bytes_received: Bytes counted
        - elapsed_ms: Time spent draining the body
        - seconds: The clamped window

    Raises:
        - 400: No body, or the body stream broke mid-read
        - 413: Body exceeds the ingest cap
    """
    seconds = limits.duration(t)
    result = await ingest(body_source(request), limits.ingest_cap())
    return IngestResponse(
        bytes_received=result.bytes_received,
        elapsed_ms=result.elapsed_ms,
        seconds=seconds,
    )


@router.get("/d")
async def timed_download(
    t: Optional[str] = Query(None, description="Stream duration in seconds"),
    slab_mib: Optional[str] = Query(None, alias="slabMiB", description="Chunk size in MiB"),
    batch: Optional[str] = Query(None, description="Chunks written per pacing cycle"),
    nonce: Optional[str] = Query(None, description="Cache buster, ignored"),
    limits: LimitsPolicy = Depends(get_limits),
):
    """
    Stream filler bytes until the requested duration elapses.

    All parameters are clamped to the configured limits, never rejected.

    Returns:
        - Streaming response of application/octet-stream, closed at the deadline
    """
    stream = open_timed_stream(limits, t, limits.slab_bytes_from_mib(slab_mib), batch)
    return ClosingStreamingResponse(
        stream,
        media_type="application/octet-stream",
        headers={"Cache-Control": "no-store"},
    )
