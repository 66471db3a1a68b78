"""Fills download chunks from a cryptographically strong random source."""

import os
from typing import Callable

from server.exceptions import ChunkGenerationError

RandomSource = Callable[[int], bytes]


class ChunkGenerator:
    """
    Produces fresh, unpredictable byte buffers of an exact length.

    The generator holds no buffers between calls; the only shared state is the
    random source itself, which must be safe to call from concurrent requests.
    """

    def __init__(self, random_source: RandomSource = os.urandom):
        self._random_source = random_source

    def generate(self, size: int) -> bytes:
        """
        Generate one chunk.

        Args:
            size: Exact number of bytes to produce (positive)

        Returns:
            Newly allocated bytes of length ``size``

        Raises:
            ValueError: If size is not a positive integer
            ChunkGenerationError: If the random source fails or returns a short buffer
        """
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValueError(f"Chunk size must be a positive integer, got {size!r}")

        try:
            chunk = self._random_source(size)
        except (OSError, NotImplementedError) as e:
            raise ChunkGenerationError(f"Random source unavailable: {e}") from e

        if len(chunk) != size:
            raise ChunkGenerationError(
                f"Random source returned {len(chunk)} bytes, expected {size}"
            )
        return bytes(chunk)


_default_generator = ChunkGenerator()


def get_chunk_generator() -> ChunkGenerator:
    """
    FastAPI dependency returning the process-wide generator.
    """
    return _default_generator
