"""Exception classes raised by the throughput exchange engine."""


class ThroughputError(Exception):
    """
    Base exception class for all engine errors.
    """
    pass


class NoBodyError(ThroughputError):
    """
    Raised when an ingest is requested without any body to read.
    """

    def __init__(self, message: str = "Request has no body to ingest"):
        super().__init__(message)


class PayloadTooLargeError(ThroughputError):
    """
    Raised when an ingested stream crosses its byte cap.

    Reading stops as soon as the cap is crossed, so bytes_received is at
    most one chunk above the cap.
    """

    def __init__(self, bytes_received: int, cap: int):
        self.bytes_received = bytes_received
        self.cap = cap
        super().__init__(f"Payload exceeds cap of {cap} bytes (read {bytes_received})")


class StreamReadFailedError(ThroughputError):
    """
    Raised when the inbound stream fails mid-read (client disconnect, truncated body).
    """

    def __init__(self, bytes_received: int, reason: str = ""):
        self.bytes_received = bytes_received
        message = f"Stream read failed after {bytes_received} bytes"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ProductionFault(ThroughputError):
    """
    Raised inside an emitter when producing the next chunk fails.

    Never reaches an HTTP client: the stream driver logs it and closes the stream.
    """

    def __init__(self, bytes_emitted: int, reason: str = ""):
        self.bytes_emitted = bytes_emitted
        super().__init__(f"Emit failed after {bytes_emitted} bytes: {reason}" if reason else
                         f"Emit failed after {bytes_emitted} bytes")
