"""HTTP client that runs latency, download and upload measurements."""

import os
import time
import uuid
from typing import Callable, Optional

import httpx

from common.logging_config import get_logger
from cli.config import Config
from cli.models import PingResult, TransferMeasurement

logger = get_logger(__name__)

ProgressCallback = Callable[[int, Optional[int]], None]


class SpeedtestClientError(Exception):
    """Base class for client-side measurement failures."""
    pass


class MeasurementError(SpeedtestClientError):
    """Raised when a measurement cannot produce a trustworthy result."""
    pass


class SpeedtestClient:
    """HTTP client for the speed test endpoints. Requests are never retried."""

    def __init__(self, config: Config):
        """
        Initialize speed test client.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id = None
        logger.info(f"Initialized SpeedtestClient [base_url={config.get_base_url()}]")

    def _request_headers(self) -> dict:
        """
        Build per-request headers with a fresh request id.
        """
        self.request_id = str(uuid.uuid4())
        return {
            'X-Request-ID': self.request_id,
            'Cache-Control': 'no-store',
        }

    def _cache_buster(self) -> str:
        return uuid.uuid4().hex

    def _error_detail(self, response: httpx.Response) -> str:
        """
        Extract the server's error detail, falling back to the reason phrase.
        """
        try:
            data = response.json()
            if isinstance(data, dict) and data.get('detail'):
                return str(data['detail'])
        except ValueError:
            pass
        return response.reason_phrase or 'server error'

    def measure_ping(self, count: Optional[int] = None, interval: Optional[float] = None) -> PingResult:
        """
        Time ``count`` requests to /ping.

        Failed probes are counted but excluded from the samples.

        Args:
            count: Number of probes (config default if None)
            interval: Pause between probes in seconds (config default if None)

        Returns:
            PingResult with round-trip samples in milliseconds

        Raises:
            MeasurementError: If every probe failed
        """
        ping_settings = self.config.get_ping_settings()
        count = count if count is not None else ping_settings['count']
        interval = interval if interval is not None else ping_settings['interval']

        samples = []
        failures = 0

        for attempt in range(count):
            start_time = time.perf_counter()
            try:
                response = self.session.get(
                    '/ping',
                    params={'r': self._cache_buster()},
                    headers=self._request_headers()
                )
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                if response.status_code == 200:
                    samples.append(elapsed_ms)
                else:
                    failures += 1
                    logger.warning(
                        f"Ping probe {attempt + 1}/{count} failed: status={response.status_code} "
                        f"[request_id={self.request_id}]"
                    )
            except httpx.HTTPError as e:
                failures += 1
                logger.warning(f"Ping probe {attempt + 1}/{count} failed: {e} [request_id={self.request_id}]")

            if interval and attempt < count - 1:
                time.sleep(interval)

        if not samples:
            raise MeasurementError(f"Ping test failed: all {count} probes failed")

        return PingResult(samples=tuple(samples), failures=failures)

    def measure_download(
        self,
        size: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TransferMeasurement:
        """
        Stream /download and time it.

        Args:
            size: Requested byte count (config default if None); the server may
                  substitute its default if the value is out of its bounds
            on_progress: Called with (bytes_received, content_length) per piece

        Returns:
            TransferMeasurement for the bytes actually received

        Raises:
            MeasurementError: Non-200 status, transport failure, zero bytes or
                              a byte count that disagrees with Content-Length
        """
        size = size if size is not None else self.config.get_download_size()
        params = {'size': str(size), 'r': self._cache_buster()}

        received = 0
        start_time = time.perf_counter()
        try:
            with self.session.stream('GET', '/download', params=params, headers=self._request_headers()) as response:
                if response.status_code != 200:
                    response.read()
                    raise MeasurementError(
                        f"Download failed: {self._error_detail(response)} ({response.status_code})"
                    )

                header_value = response.headers.get('content-length')
                expected = int(header_value) if header_value and header_value.isdigit() else None

                for piece in response.iter_bytes():
                    received += len(piece)
                    if on_progress:
                        on_progress(received, expected)
        except httpx.HTTPError as e:
            raise MeasurementError(
                f"Download interrupted after {received} bytes: {e}"
            ) from e
        duration = time.perf_counter() - start_time

        if received == 0 or duration <= 0:
            raise MeasurementError("Download test failed (zero duration or size)")
        if expected is not None and received != expected:
            raise MeasurementError(
                f"Download incomplete: received {received} of {expected} bytes"
            )

        logger.debug(f"Download finished: {received} bytes in {duration:.3f}s [request_id={self.request_id}]")
        return TransferMeasurement(direction='download', bytes_transferred=received, duration_seconds=duration)

    def measure_upload(self, size: Optional[int] = None) -> TransferMeasurement:
        """
        POST ``size`` random bytes to /upload and time the round trip.

        Args:
            size: Payload size in bytes (config default if None)

        Returns:
            TransferMeasurement for the payload

        Raises:
            MeasurementError: Non-200 status, transport failure or zero duration
        """
        size = size if size is not None else self.config.get_upload_size()
        payload = os.urandom(size)

        start_time = time.perf_counter()
        try:
            response = self.session.post(
                '/upload',
                params={'r': self._cache_buster()},
                content=payload,
                headers={**self._request_headers(), 'Content-Type': 'application/octet-stream'}
            )
        except httpx.HTTPError as e:
            raise MeasurementError(f"Upload network error: {e}") from e
        duration = time.perf_counter() - start_time

        if response.status_code != 200:
            raise MeasurementError(
                f"Upload failed: {self._error_detail(response)} ({response.status_code})"
            )
        if duration <= 0:
            raise MeasurementError("Upload test failed (zero duration)")

        logger.debug(f"Upload finished: {size} bytes in {duration:.3f}s [request_id={self.request_id}]")
        return TransferMeasurement(direction='upload', bytes_transferred=size, duration_seconds=duration)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
