"""Project-wide constants (byte units, default limits, service identity)."""

KIB: int = 1024
MIB: int = 1024 * KIB
GIB: int = 1024 * MIB

SERVICE_NAME: str = "throughput-probe"
SERVICE_VERSION: str = "1.0.0"

DEFAULT_GATEWAY_PORT: int = 8787

# Ingest caps
MAX_INGEST_BYTES: int = 100 * MIB
LEGACY_INGEST_BYTES: int = 64 * MIB

# Timed emit
DEFAULT_DURATION_SECONDS: float = 10.0
MIN_DURATION_SECONDS: float = 1.0
MAX_DURATION_SECONDS: float = 60.0
DEFAULT_SLAB_BYTES: int = 8 * MIB
MIN_SLAB_BYTES: int = 64 * KIB
MAX_SLAB_BYTES: int = 64 * MIB
DEFAULT_BATCH: int = 16
MAX_BATCH: int = 64

# Bounded (legacy) emit
LEGACY_CHUNK_BYTES: int = 64 * KIB
DEFAULT_BYTE_TARGET: int = 10 * MIB
MAX_BYTE_TARGET: int = 8 * GIB

CORS_HEADERS: dict = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
