"""Entry point for the speed test server."""

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from server.config import API_PREFIX, SERVER_HOST, SERVER_PORT, get_transfer_settings
from server.exceptions import (
    ChunkGenerationError,
    ConfigurationError,
    InvalidSizeError,
    UploadInterruptedError,
    UploadTooLargeError,
)
from server.middleware import RequestLoggingMiddleware
from server.routes import download_router, ping_router, upload_router
from server.schemas.transfer import HealthResponse, ReadinessResponse, ServiceStatusResponse
from server.services.chunk_generator import ChunkGenerator, get_chunk_generator

logger = setup_logging('server')

app = FastAPI(
    title="Edge Speedtest Server",
    description="Latency, download and upload measurement endpoints",
    version="1.0.0"
)

app.add_middleware(RequestLoggingMiddleware)


@app.on_event("startup")
async def startup_event():
    """
    Validate transfer settings so a bad size triple fails at boot.
    """
    logger.info("Speed test server starting up...")

    settings = get_transfer_settings()
    logger.info(
        f"Transfer settings: min={settings.min_size} default={settings.default_size} "
        f"max={settings.max_size} chunk={settings.chunk_size} "
        f"max_upload={settings.max_upload} strict={settings.strict_size}"
    )


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Speed test server shutting down...")


@app.exception_handler(InvalidSizeError)
async def invalid_size_handler(request: Request, exc: InvalidSizeError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Invalid size error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc), "code": "INVALID_SIZE"}
    )


@app.exception_handler(UploadTooLargeError)
async def upload_too_large_handler(request: Request, exc: UploadTooLargeError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Upload too large: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        content={"detail": str(exc), "code": "UPLOAD_TOO_LARGE"},
        headers={"Connection": "close"}
    )


@app.exception_handler(UploadInterruptedError)
async def upload_interrupted_handler(request: Request, exc: UploadInterruptedError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Upload interrupted: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc), "code": "UPLOAD_INTERRUPTED"}
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Configuration error: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "code": "CONFIGURATION_ERROR"}
    )


# No handler for ChunkGenerationError: it is raised after the download
# headers are sent and must reach the ASGI server, which drops the connection.

app.include_router(download_router, prefix=API_PREFIX)
app.include_router(upload_router, prefix=API_PREFIX)
app.include_router(ping_router, prefix=API_PREFIX)


@app.get("/", response_model=ServiceStatusResponse)
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "Edge Speedtest Server", "status": "running"}


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Liveness endpoint. Returns 200 if the process is serving requests.
    """
    return {"status": "healthy", "service": "speedtest"}


@app.get("/ready", response_model=ReadinessResponse)
async def ready_check(generator: ChunkGenerator = Depends(get_chunk_generator)):
    """
    Readiness check endpoint.
    Verifies that the random source can fill a buffer.
    """
    try:
        generator.generate(16)
        source_status = "ok"
    except ChunkGenerationError as e:
        source_status = f"error: {e}"

    ready = source_status == "ok"
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={"ready": ready, "random_source": source_status}
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "server.main:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
    )


if __name__ == "__main__":
    main()
