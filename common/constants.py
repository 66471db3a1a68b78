"""Project-wide constants (size bounds, chunk size, default ports)."""

KIB: int = 1024
MIB: int = 1024 * KIB

MIN_SIZE_BYTES: int = 1 * KIB
DEFAULT_SIZE_BYTES: int = 10 * MIB
MAX_SIZE_BYTES: int = 250 * MIB

CHUNK_SIZE_BYTES: int = 64 * KIB  # one chunk resident per stream

MAX_UPLOAD_BYTES: int = 64 * MIB

DEFAULT_SERVER_PORT: int = 8000

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
}
