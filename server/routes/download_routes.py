"""Download speed test route."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from common.logging_config import get_logger
from server.config import TransferSettings, get_transfer_settings
from server.cors import no_cache_headers, preflight_response
from server.schemas.common import ErrorResponse
from server.services.chunk_generator import ChunkGenerator, get_chunk_generator
from server.services.size_validator import resolve_size
from server.services.stream_producer import StreamProducer

logger = get_logger(__name__)

router = APIRouter(tags=["Transfer"])

DOWNLOAD_METHODS = "GET, OPTIONS"


@router.get(
    "/download",
    response_class=StreamingResponse,
    responses={400: {"model": ErrorResponse}},
)
async def download(
    size: Optional[str] = Query(None, description="Number of bytes to stream"),
    settings: TransferSettings = Depends(get_transfer_settings),
    generator: ChunkGenerator = Depends(get_chunk_generator),
):
    """
    Stream ``size`` bytes of random data for download timing.

    Parameters:
        - size: Requested byte count. Missing, non-numeric or out-of-range
          values fall back to the default size (400 in strict mode)

    Returns:
        - StreamingResponse whose Content-Length equals the resolved size

    Raises:
        - 400: Invalid size (strict mode only)
    """
    transfer = resolve_size(size, settings)
    producer = StreamProducer(
        total_size=transfer.resolved_size,
        chunk_size=settings.chunk_size,
        generator=generator,
    )

    logger.info(
        f"Starting download stream {producer.stream_id}: {transfer.resolved_size} bytes "
        f"(requested={transfer.requested_size!r}, chunk_size={settings.chunk_size})"
    )

    headers = no_cache_headers(DOWNLOAD_METHODS)
    headers["Content-Length"] = str(transfer.resolved_size)

    return StreamingResponse(
        producer,
        media_type="application/octet-stream",
        headers=headers,
    )


@router.options("/download")
async def download_preflight():
    """CORS preflight for the download endpoint."""
    return preflight_response(DOWNLOAD_METHODS)
