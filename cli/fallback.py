"""Try a request against an ordered list of base URLs."""

from typing import Iterable

import httpx

from common.logging_config import get_logger

logger = get_logger(__name__)


class TargetStatusError(Exception):
    """Raised when a target answered with a non-success status."""

    def __init__(self, url: str, response: httpx.Response):
        self.url = url
        self.response = response
        self.status_code = response.status_code
        super().__init__(f"status {response.status_code}")


def fetch_with_fallback(
    session: httpx.Client,
    targets: Iterable[str],
    method: str = 'GET',
    path: str = '',
    stream: bool = False,
    **kwargs
) -> httpx.Response:
    """
    Send the request to each target in order and return the first 2xx response.

    A network error or a non-2xx status moves on to the next target. Request
    bodies must be replayable (bytes, not generators) since every attempt
    sends them again.

    Args:
        session: httpx client used for every attempt
        targets: Base URLs, primary first
        method: HTTP method
        path: Path appended to each base URL
        stream: Leave the successful response body unread
        **kwargs: Passed to session.build_request

    Returns:
        The first successful response

    Raises:
        TargetStatusError: the last target answered with a non-2xx status
        httpx.HTTPError: the last target failed at the network level
        ConnectionError: no targets were given
    """
    last_error: Exception = ConnectionError("All fetch attempts failed")

    for target in targets:
        url = f"{target.rstrip('/')}{path}"
        try:
            request = session.build_request(method, url, **kwargs)
            response = session.send(request, stream=stream)
        except httpx.HTTPError as e:
            logger.warning(f"Target failed: {method} {url} error={type(e).__name__}")
            last_error = e
            continue

        if response.is_success:
            logger.debug(f"Target succeeded: {method} {url} status={response.status_code}")
            return response

        logger.warning(f"Target rejected request: {method} {url} status={response.status_code}")
        response.read()
        response.close()
        last_error = TargetStatusError(url, response)

    raise last_error
