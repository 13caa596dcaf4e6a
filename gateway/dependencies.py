"""Request-scoped helpers shared by the transfer routes."""

from typing import AsyncIterator, Optional

from fastapi import Request

from engine.limits import LimitsPolicy


def get_limits(request: Request) -> LimitsPolicy:
    """
    Dependency returning the process-wide limits policy stored on the app.
    """
    return request.app.state.limits


def body_source(request: Request) -> Optional[AsyncIterator[bytes]]:
    """
    Return the request body as a chunk iterator, or None when there is no body.

    A request has no body when it declares neither Transfer-Encoding nor a
    non-zero Content-Length.
    """
    headers = request.headers
    if "transfer-encoding" in headers:
        return request.stream()

    content_length = headers.get("content-length", "").strip()
    if not content_length or content_length == "0":
        return None

    return request.stream()
