"""HTTP client that runs throughput measurements against the gateway."""

import time
import uuid
from typing import Optional

import httpx

from common.constants import MIB
from common.logging_config import get_logger
from cli.config import Config
from cli.fallback import TargetStatusError, fetch_with_fallback
from cli.utils import format_file_size, format_rate

logger = get_logger(__name__)


class ProbeClient:
    """Measurement client trying each configured target in order."""

    def __init__(self, config: Config):
        """
        Initialize probe client.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.session = httpx.Client(timeout=config.get_timeout())
        logger.info(f"Initialized ProbeClient [targets={config.get_targets()}]")

    def _fetch(self, method: str, path: str, **kwargs) -> httpx.Response:
        request_id = str(uuid.uuid4())
        headers = kwargs.pop('headers', {})
        headers['X-Request-ID'] = request_id
        logger.debug(f"Making request: {method} {path} [request_id={request_id}]")
        return fetch_with_fallback(
            self.session,
            self.config.get_targets(),
            method=method,
            path=path,
            headers=headers,
            **kwargs
        )

    def _format_error(self, error: Exception) -> str:
        """
        Map request failures to user-friendly messages.

        Args:
            error: Exception raised by fetch_with_fallback

        Returns:
            User-friendly error message
        """
        if isinstance(error, TargetStatusError):
            try:
                code = error.response.json().get('code', 'UNKNOWN')
            except ValueError:
                code = 'UNKNOWN'

            error_messages = {
                'NO_BODY': 'Server received an empty upload.',
                'PAYLOAD_TOO_LARGE': 'Upload exceeds the server cap. Try a smaller size.',
                'STREAM_READ_FAILED': 'Upload was interrupted before the server read it all.',
                'INTERNAL_ERROR': 'Server error.',
            }
            if code in error_messages:
                return error_messages[code]
            return f"Server answered with status {error.status_code}"

        if isinstance(error, httpx.TimeoutException):
            return "Request timed out on every target."
        if isinstance(error, (httpx.HTTPError, ConnectionError)):
            return "Cannot reach any target. Is the gateway running?"
        return str(error)

    def _run(self, label: str, measure) -> str:
        try:
            return measure()
        except (TargetStatusError, httpx.HTTPError, ConnectionError) as e:
            logger.error(f"{label} failed: {e}")
            return f"{label} failed: {self._format_error(e)}"
        except Exception as e:
            logger.error(f"Unexpected error during {label.lower()}: {e}", exc_info=True)
            return f"Unexpected error during {label.lower()}: {e}"

    def _download(self, label: str, path: str, params: dict, timeout: float,
                  expected: Optional[int] = None) -> str:
        started = time.perf_counter()
        response = self._fetch('GET', path, params=params, stream=True, timeout=timeout)
        received = 0
        try:
            for chunk in response.iter_bytes():
                received += len(chunk)
        finally:
            response.close()
        elapsed = time.perf_counter() - started

        logger.info(f"{label} finished: {received} bytes in {elapsed:.3f}s from {response.url.host}")
        result = f"{label}: {format_rate(received, elapsed)} via {response.url.scheme}://{response.url.netloc.decode()}"
        if expected is not None and received != expected:
            result += f"\nWarning: expected {format_file_size(expected)}, got {format_file_size(received)}"
        return result

    def _upload(self, label: str, path: str, size_mib: float, params: Optional[dict] = None) -> str:
        payload = bytes(int(size_mib * MIB))
        if not payload:
            return f"{label} failed: size must be positive"

        started = time.perf_counter()
        response = self._fetch(
            'POST',
            path,
            params=params or {},
            content=payload,
            headers={'Content-Type': 'application/octet-stream'},
            timeout=self.config.get_timeout() + size_mib,
        )
        elapsed = time.perf_counter() - started
        data = response.json()
        received = data['bytes_received']

        logger.info(f"{label} finished: {received} bytes, server drain {data['elapsed_ms']:.1f}ms")
        return f"{label}: {format_rate(received, elapsed)} (server drain {data['elapsed_ms']:.1f} ms)"

    def health(self) -> str:
        """
        Check gateway health on the first reachable target.

        Returns:
            Status line naming the target that answered
        """
        def measure():
            response = self._fetch('GET', '/health')
            data = response.json()
            return f"Healthy: {response.url.scheme}://{response.url.netloc.decode()} (ts={data['ts']})"

        return self._run("Health check", measure)

    def download(self, seconds: float, slab_mib: int, batch: int) -> str:
        """
        Run a timed download.

        Args:
            seconds: Stream duration requested from the server
            slab_mib: Server chunk size in MiB
            batch: Chunks per server pacing cycle

        Returns:
            Formatted throughput line
        """
        params = {'t': seconds, 'slabMiB': slab_mib, 'batch': batch, 'nonce': uuid.uuid4().hex}
        timeout = self.config.get_timeout() + seconds
        return self._run("Download", lambda: self._download("Download", '/api/d', params, timeout))

    def upload(self, size_mib: float, seconds: float) -> str:
        """
        Run a timed upload of `size_mib` MiB.

        Args:
            size_mib: Payload size in MiB
            seconds: Measurement window reported to the server

        Returns:
            Formatted throughput line
        """
        return self._run("Upload", lambda: self._upload("Upload", '/api/u', size_mib, {'t': seconds}))

    def legacy_download(self, byte_count: int) -> str:
        """
        Download exactly `byte_count` bytes from the legacy route.
        """
        timeout = self.config.get_timeout() + byte_count / MIB
        return self._run(
            "Fetch",
            lambda: self._download("Fetch", '/download', {'bytes': byte_count}, timeout, expected=byte_count)
        )

    def legacy_upload(self, size_mib: float) -> str:
        """
        Upload `size_mib` MiB to the legacy route.
        """
        return self._run("Push", lambda: self._upload("Push", '/upload', size_mib))

    def close(self) -> None:
        self.session.close()
