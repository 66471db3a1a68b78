"""Drains upload request bodies without retaining them."""

from typing import AsyncIterator, Optional

from starlette.requests import ClientDisconnect

from common.logging_config import get_logger
from common.types import UploadResult
from server.exceptions import UploadInterruptedError, UploadTooLargeError

logger = get_logger(__name__)


class UploadSink:
    """
    Counts and discards an inbound byte stream, bounded by ``max_bytes``.
    """

    def __init__(self, max_bytes: int):
        if max_bytes <= 0:
            raise ValueError(f"Upload maximum must be positive, got {max_bytes}")
        self.max_bytes = max_bytes

    async def consume(
        self,
        body: AsyncIterator[bytes],
        declared_length: Optional[int] = None,
    ) -> UploadResult:
        """
        Read ``body`` to completion.

        Args:
            body: Request body stream (e.g. ``request.stream()``)
            declared_length: Content-Length sent by the client, if any

        Returns:
            UploadResult with the byte count

        Raises:
            UploadTooLargeError: Declared or actual size is above max_bytes
            UploadInterruptedError: Client disconnected before the body ended
        """
        if declared_length is not None and declared_length > self.max_bytes:
            raise UploadTooLargeError(self.max_bytes, declared_length)

        result = UploadResult()
        try:
            async for piece in body:
                if not piece:
                    continue
                result.add(piece)
                if result.bytes_received > self.max_bytes:
                    raise UploadTooLargeError(self.max_bytes, result.bytes_received)
        except ClientDisconnect as e:
            raise UploadInterruptedError(result.bytes_received) from e

        return result


def parse_content_length(value: Optional[str]) -> Optional[int]:
    """
    Parse a Content-Length header, returning None when absent or malformed.
    """
    if value is None:
        return None
    value = value.strip()
    if not value.isdigit():
        return None
    return int(value)
