"""Command and measurement data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class PingCommand:
    """Measure latency."""

    count: Optional[int] = None
    command: Literal["ping"] = "ping"


@dataclass(frozen=True)
class DownloadCommand:
    """Measure download throughput."""

    size: Optional[int] = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class UploadCommand:
    """Measure upload throughput."""

    size: Optional[int] = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class RunCommand:
    """Run the full measurement sequence."""

    command: Literal["run"] = "run"


@dataclass(frozen=True)
class ServerCommand:
    """Change the target server."""

    host: str
    port: Optional[int] = None
    command: Literal["server"] = "server"


@dataclass(frozen=True)
class ConfigCommand:
    """Show current settings."""

    command: Literal["config"] = "config"


CommandRequest = (
    PingCommand
    | DownloadCommand
    | UploadCommand
    | RunCommand
    | ServerCommand
    | ConfigCommand
)


@dataclass(frozen=True)
class PingResult:
    """Latency samples from one ping run, in milliseconds."""

    samples: tuple[float, ...]
    failures: int

    @property
    def average_ms(self) -> float:
        return sum(self.samples) / len(self.samples)

    @property
    def min_ms(self) -> float:
        return min(self.samples)

    @property
    def max_ms(self) -> float:
        return max(self.samples)


@dataclass(frozen=True)
class TransferMeasurement:
    """Bytes moved and wall-clock time for one download or upload."""

    direction: Literal["download", "upload"]
    bytes_transferred: int
    duration_seconds: float

    @property
    def megabits_per_second(self) -> float:
        return (self.bytes_transferred * 8) / self.duration_seconds / 1_000_000
