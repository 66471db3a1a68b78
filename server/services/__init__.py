"""Service layer for the download and upload paths."""

from server.services.chunk_generator import ChunkGenerator, get_chunk_generator
from server.services.size_validator import resolve_size
from server.services.stream_producer import StreamProducer
from server.services.upload_sink import UploadSink, parse_content_length

__all__ = [
    "ChunkGenerator",
    "get_chunk_generator",
    "resolve_size",
    "StreamProducer",
    "UploadSink",
    "parse_content_length",
]
