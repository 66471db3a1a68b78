"""Pull-driven producer for the download stream.

The producer owns a StreamCursor and advances it one chunk per production
step. It is consumed as an async iterator by Starlette's StreamingResponse,
which only asks for the next chunk once the previous one has been handed to
the ASGI server, so at most one generated chunk is live per stream.
"""

import asyncio
import uuid
from typing import AsyncIterator, Optional

from common.logging_config import get_logger
from common.types import StreamCursor, StreamState
from server.exceptions import ChunkGenerationError
from server.services.chunk_generator import ChunkGenerator

logger = get_logger(__name__)


class StreamProducer:
    """
    State machine emitting exactly ``total_size`` random bytes.

    States: STREAMING -> CLOSED (all bytes emitted), ERRORED (generation
    failed) or CANCELLED (consumer went away). All three are terminal.
    """

    def __init__(
        self,
        total_size: int,
        chunk_size: int,
        generator: ChunkGenerator,
        stream_id: Optional[str] = None,
    ):
        if total_size < 0:
            raise ValueError(f"Total size must not be negative, got {total_size}")
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")

        self.cursor = StreamCursor(total_size=total_size)
        self.chunk_size = chunk_size
        self.stream_id = stream_id or uuid.uuid4().hex[:12]
        self.state = StreamState.STREAMING
        self.chunks_sent = 0
        self._generator = generator
        self._iterated = False

    @property
    def bytes_sent(self) -> int:
        return self.cursor.bytes_sent

    @property
    def total_size(self) -> int:
        return self.cursor.total_size

    def next_chunk(self) -> Optional[bytes]:
        """
        Run one production step.

        Returns:
            The next chunk, or None once the stream has ended (CLOSED) or was
            cancelled

        Raises:
            ChunkGenerationError: Generation failed; the stream is now ERRORED
        """
        if self.state is not StreamState.STREAMING:
            return None

        if self.cursor.is_complete:
            self.state = StreamState.CLOSED
            logger.info(
                f"Stream {self.stream_id} complete: {self.cursor.bytes_sent} bytes "
                f"in {self.chunks_sent} chunks"
            )
            return None

        step = min(self.chunk_size, self.cursor.remaining)
        try:
            chunk = self._generator.generate(step)
        except ChunkGenerationError:
            self.state = StreamState.ERRORED
            logger.error(
                f"Stream {self.stream_id} aborted after {self.cursor.bytes_sent}/"
                f"{self.cursor.total_size} bytes",
                exc_info=True
            )
            raise

        self.cursor.advance(step)
        self.chunks_sent += 1
        return chunk

    def cancel(self, reason: Optional[str] = None) -> None:
        """
        Stop the stream. Does nothing if the stream already reached a terminal state.
        """
        if self.state is not StreamState.STREAMING:
            return
        self.state = StreamState.CANCELLED
        logger.info(
            f"Stream {self.stream_id} cancelled after {self.cursor.bytes_sent}/"
            f"{self.cursor.total_size} bytes: {reason or 'no reason given'}"
        )

    async def stream(self) -> AsyncIterator[bytes]:
        """
        Async iterator over the remaining chunks. May only be consumed once.
        """
        if self._iterated:
            raise RuntimeError(f"Stream {self.stream_id} has already been consumed")
        self._iterated = True

        try:
            while True:
                # let other requests run between chunks
                await asyncio.sleep(0)
                chunk = self.next_chunk()
                if chunk is None:
                    return
                yield chunk
                del chunk
        finally:
            self.cancel("consumer closed the stream")

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.stream()
