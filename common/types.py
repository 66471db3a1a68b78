"""Shared request-scoped data types (TransferRequest, StreamCursor, UploadResult)."""

import enum
from dataclasses import dataclass
from typing import Optional


class StreamState(str, enum.Enum):
    """Lifecycle of a single download stream."""
    STREAMING = "streaming"
    CLOSED = "closed"
    ERRORED = "errored"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not StreamState.STREAMING


@dataclass(frozen=True)
class TransferRequest:
    """
    Validated download size derived from the untrusted ``size`` parameter.
    """
    requested_size: Optional[str]
    resolved_size: int
    used_default: bool = False


@dataclass
class StreamCursor:
    """
    Byte accounting for one in-flight stream.

    Owned by a single StreamProducer; only its production step advances it.
    """
    total_size: int
    bytes_sent: int = 0

    @property
    def remaining(self) -> int:
        return self.total_size - self.bytes_sent

    @property
    def is_complete(self) -> bool:
        return self.bytes_sent >= self.total_size

    def advance(self, count: int) -> None:
        if count < 0 or self.bytes_sent + count > self.total_size:
            raise ValueError(
                f"Cannot advance cursor by {count} bytes "
                f"({self.bytes_sent}/{self.total_size} sent)"
            )
        self.bytes_sent += count


@dataclass
class UploadResult:
    """Ephemeral counter of bytes received during one upload."""
    bytes_received: int = 0
    chunks_received: int = 0

    def add(self, piece: bytes) -> None:
        self.bytes_received += len(piece)
        self.chunks_received += 1
