"""Command handler functions for CLI operations."""

from typing import Optional

from common.logging_config import get_logger
from cli.config import Config
from cli.models import (
    ConfigCommand,
    DownloadCommand,
    PingCommand,
    RunCommand,
    ServerCommand,
    UploadCommand,
)
from cli.speedtest_client import MeasurementError, SpeedtestClient
from cli.utils import TransferProgress, format_file_size, format_speed

logger = get_logger(__name__)


_config: Optional[Config] = None
_client: Optional[SpeedtestClient] = None


def get_config() -> Config:
    """
    Get or load the global Config instance.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_client() -> SpeedtestClient:
    """
    Get or create global SpeedtestClient instance.

    Returns:
        SpeedtestClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new SpeedtestClient instance")
        _client = SpeedtestClient(get_config())
    return _client


def reset_client() -> None:
    """Drop the cached client so the next command picks up a new server."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


def handle_ping(cmd: PingCommand, client: Optional[SpeedtestClient] = None) -> str:
    """
    Handle 'ping' command.

    Args:
        cmd: PingCommand with optional probe count
        client: Optional SpeedtestClient for dependency injection (testing)

    Returns:
        Result or error message
    """
    if client is None:
        client = get_client()

    try:
        result = client.measure_ping(cmd.count)
    except MeasurementError as e:
        logger.error(f"Ping failed: {e}")
        return f"Error: {e}"

    summary = (
        f"Ping: {result.average_ms:.0f} ms "
        f"(min {result.min_ms:.0f} ms / max {result.max_ms:.0f} ms, {len(result.samples)} probes"
    )
    if result.failures:
        summary += f", {result.failures} failed"
    return summary + ")"


def handle_download(cmd: DownloadCommand, client: Optional[SpeedtestClient] = None) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with optional size
        client: Optional SpeedtestClient for dependency injection (testing)

    Returns:
        Result or error message
    """
    if client is None:
        client = get_client()

    try:
        with TransferProgress("Downloading") as progress:
            measurement = client.measure_download(cmd.size, on_progress=progress.update)
    except MeasurementError as e:
        logger.error(f"Download failed: {e}")
        return f"Error: {e}"

    return (
        f"Download: {format_speed(measurement.megabits_per_second)} "
        f"({format_file_size(measurement.bytes_transferred)} in {measurement.duration_seconds:.2f}s)"
    )


def handle_upload(cmd: UploadCommand, client: Optional[SpeedtestClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with optional size
        client: Optional SpeedtestClient for dependency injection (testing)

    Returns:
        Result or error message
    """
    if client is None:
        client = get_client()

    try:
        measurement = client.measure_upload(cmd.size)
    except MeasurementError as e:
        logger.error(f"Upload failed: {e}")
        return f"Error: {e}"

    return (
        f"Upload: {format_speed(measurement.megabits_per_second)} "
        f"({format_file_size(measurement.bytes_transferred)} in {measurement.duration_seconds:.2f}s)"
    )


def handle_run(cmd: RunCommand, client: Optional[SpeedtestClient] = None) -> str:
    """
    Handle 'run' command: ping, then download, then upload.

    Stops at the first phase that fails.
    """
    if client is None:
        client = get_client()

    lines = []
    phases = [
        lambda: handle_ping(PingCommand(), client=client),
        lambda: handle_download(DownloadCommand(), client=client),
        lambda: handle_upload(UploadCommand(), client=client),
    ]
    for phase in phases:
        line = phase()
        lines.append(line)
        if line.startswith("Error:"):
            lines.append("Test aborted.")
            break
    else:
        lines.append("Test complete!")

    return "\n".join(lines)


def handle_server(cmd: ServerCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'server' command.

    Args:
        cmd: ServerCommand with host and optional port
        config: Optional Config for dependency injection (testing)

    Returns:
        Confirmation message
    """
    if config is None:
        config = get_config()

    port = cmd.port if cmd.port is not None else config.data['server_port']
    config.set_server(cmd.host, port)
    reset_client()
    return f"Server set to {config.get_base_url()}"


def handle_config(cmd: ConfigCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'config' command.
    """
    if config is None:
        config = get_config()

    lines = [f"Config file: {config.config_path}", f"Server: {config.get_base_url()}"]
    for key in sorted(config.data):
        lines.append(f"  {key} = {config.data[key]}")
    return "\n".join(lines)
