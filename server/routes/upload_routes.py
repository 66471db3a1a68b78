"""Upload speed test route."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from common.logging_config import get_logger
from server.config import TransferSettings, get_transfer_settings
from server.cors import no_cache_headers, preflight_response
from server.schemas.common import ErrorResponse
from server.schemas.transfer import UploadAcknowledgment
from server.services.upload_sink import UploadSink, parse_content_length

logger = get_logger(__name__)

router = APIRouter(tags=["Transfer"])

UPLOAD_METHODS = "POST, OPTIONS"


@router.post(
    "/upload",
    response_model=UploadAcknowledgment,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
async def upload(
    request: Request,
    settings: TransferSettings = Depends(get_transfer_settings),
):
    """
    Drain an uploaded body and acknowledge it.

    The body is read in pieces and discarded; timing is left to the client.

    Returns:
        - status: "ok"
        - bytes_received: Number of body bytes read

    Raises:
        - 400: Client disconnected mid-upload
        - 413: Body larger than the configured maximum
    """
    sink = UploadSink(max_bytes=settings.max_upload)
    declared_length = parse_content_length(request.headers.get("content-length"))

    result = await sink.consume(request.stream(), declared_length=declared_length)

    logger.info(
        f"Upload drained: {result.bytes_received} bytes in {result.chunks_received} pieces"
    )

    ack = UploadAcknowledgment(bytes_received=result.bytes_received)
    return JSONResponse(content=ack.model_dump(), headers=no_cache_headers(UPLOAD_METHODS))


@router.options("/upload")
async def upload_preflight():
    """CORS preflight for the upload endpoint."""
    return preflight_response(UPLOAD_METHODS)
