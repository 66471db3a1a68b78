"""Custom exception classes for the speed test server."""


class SpeedtestException(Exception):
    """
    Base exception class for all speed test server errors.
    """
    pass


class ConfigurationError(SpeedtestException):
    """
    Raised when the transfer size bounds are inconsistent.
    """
    pass


class InvalidSizeError(SpeedtestException):
    """
    Raised in strict mode when the requested download size is not an
    integer within the configured bounds.
    """
    pass


class ChunkGenerationError(SpeedtestException):
    """
    Raised when the random source cannot fill a chunk.
    """
    pass


class UploadTooLargeError(SpeedtestException):
    """
    Raised when an upload body exceeds the configured maximum.
    """

    def __init__(self, limit: int, received: int):
        super().__init__(f"Upload exceeds maximum of {limit} bytes (received at least {received})")
        self.limit = limit
        self.received = received


class UploadInterruptedError(SpeedtestException):
    """
    Raised when the client disconnects before the upload body is complete.
    """

    def __init__(self, received: int):
        super().__init__(f"Client disconnected after {received} bytes")
        self.received = received
