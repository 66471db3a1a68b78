"""Tests for the download StreamProducer state machine."""

import tracemalloc

import pytest

from common.types import StreamState
from server.exceptions import ChunkGenerationError
from server.services.chunk_generator import ChunkGenerator
from server.services.stream_producer import StreamProducer

CHUNK = 64 * 1024


class TestProductionSteps:
    """Synchronous step behaviour."""

    def test_chunk_sizes_and_final_short_chunk(self):
        producer = StreamProducer(total_size=3 * CHUNK + 100, chunk_size=CHUNK, generator=ChunkGenerator())

        sizes = []
        while (chunk := producer.next_chunk()) is not None:
            sizes.append(len(chunk))

        assert sizes == [CHUNK, CHUNK, CHUNK, 100]
        assert producer.bytes_sent == 3 * CHUNK + 100
        assert producer.state is StreamState.CLOSED

    def test_cursor_never_exceeds_total(self):
        producer = StreamProducer(total_size=10, chunk_size=4, generator=ChunkGenerator())

        observed = []
        while producer.next_chunk() is not None:
            observed.append(producer.bytes_sent)

        assert observed == [4, 8, 10]
        assert producer.cursor.remaining == 0

    def test_zero_size_closes_immediately(self, counting_source):
        producer = StreamProducer(total_size=0, chunk_size=CHUNK, generator=ChunkGenerator(counting_source))

        assert producer.next_chunk() is None
        assert producer.state is StreamState.CLOSED
        assert counting_source.calls == 0

    def test_closed_stream_generates_nothing_more(self, counting_generator, counting_source):
        producer = StreamProducer(total_size=CHUNK, chunk_size=CHUNK, generator=counting_generator)

        assert producer.next_chunk() is not None
        assert producer.next_chunk() is None
        assert producer.next_chunk() is None
        assert counting_source.calls == 1

    def test_generation_failure_moves_to_errored(self, failing_source_factory):
        source = failing_source_factory(2)
        producer = StreamProducer(total_size=5 * CHUNK, chunk_size=CHUNK, generator=ChunkGenerator(source))

        producer.next_chunk()
        producer.next_chunk()
        with pytest.raises(ChunkGenerationError):
            producer.next_chunk()

        assert producer.state is StreamState.ERRORED
        assert producer.bytes_sent == 2 * CHUNK
        assert producer.next_chunk() is None

    def test_cancel_is_terminal_and_idempotent(self, counting_generator, counting_source):
        producer = StreamProducer(total_size=4 * CHUNK, chunk_size=CHUNK, generator=counting_generator)

        producer.next_chunk()
        producer.cancel("client went away")
        producer.cancel("again")

        assert producer.state is StreamState.CANCELLED
        assert producer.next_chunk() is None
        assert counting_source.calls == 1

    def test_cancel_after_close_keeps_closed(self):
        producer = StreamProducer(total_size=1, chunk_size=CHUNK, generator=ChunkGenerator())
        producer.next_chunk()
        producer.next_chunk()

        producer.cancel()

        assert producer.state is StreamState.CLOSED

    @pytest.mark.parametrize("total_size, chunk_size", [(-1, CHUNK), (10, 0), (10, -5)])
    def test_rejects_invalid_sizes(self, total_size, chunk_size):
        with pytest.raises(ValueError):
            StreamProducer(total_size=total_size, chunk_size=chunk_size, generator=ChunkGenerator())


class TestAsyncIteration:
    """Pull-driven consumption through ``async for``."""

    @pytest.mark.asyncio
    async def test_async_iteration_emits_exact_total(self):
        total = 1048576
        producer = StreamProducer(total_size=total, chunk_size=CHUNK, generator=ChunkGenerator())

        received = 0
        async for chunk in producer:
            assert len(chunk) <= CHUNK
            received += len(chunk)

        assert received == total
        assert producer.state is StreamState.CLOSED
        assert producer.chunks_sent == 16

    @pytest.mark.asyncio
    async def test_stream_cannot_be_consumed_twice(self):
        producer = StreamProducer(total_size=10, chunk_size=4, generator=ChunkGenerator())

        async for _ in producer:
            pass

        with pytest.raises(RuntimeError, match="already been consumed"):
            async for _ in producer:
                pass

    @pytest.mark.asyncio
    async def test_closing_iterator_cancels_within_one_step(self, counting_generator, counting_source):
        producer = StreamProducer(total_size=100 * CHUNK, chunk_size=CHUNK, generator=counting_generator)
        stream = producer.stream()

        for _ in range(3):
            await stream.__anext__()
        await stream.aclose()

        assert producer.state is StreamState.CANCELLED
        assert producer.bytes_sent == 3 * CHUNK
        assert counting_source.calls == 3
        assert producer.next_chunk() is None
        assert counting_source.calls == 3

    @pytest.mark.asyncio
    async def test_generation_error_propagates_to_consumer(self, failing_source_factory):
        producer = StreamProducer(
            total_size=10 * CHUNK, chunk_size=CHUNK, generator=ChunkGenerator(failing_source_factory(1))
        )

        received = 0
        with pytest.raises(ChunkGenerationError):
            async for chunk in producer:
                received += len(chunk)

        assert received == CHUNK
        assert producer.state is StreamState.ERRORED

    @pytest.mark.asyncio
    async def test_memory_stays_bounded_for_large_streams(self):
        total = 16 * 1024 * 1024
        producer = StreamProducer(total_size=total, chunk_size=CHUNK, generator=ChunkGenerator())

        tracemalloc.start()
        try:
            received = 0
            async for chunk in producer:
                received += len(chunk)
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        assert received == total
        assert peak < 4 * CHUNK
