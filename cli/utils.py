"""Utility functions for CLI operations."""

import sys
from typing import Optional, TextIO

from cli.constants import GREEN, RESET


class TransferProgress:
    """Progress line written to stdout while a download streams in."""

    def __init__(self, label: str, stream: TextIO = sys.stdout):
        """
        Initialize the progress display.

        Args:
            label: Text shown before the counters (e.g. "Downloading")
            stream: Output stream, stdout unless a test captures it
        """
        self.label = label
        self.stream = stream
        self._finished = False

    def update(self, received: int, total: Optional[int]) -> None:
        """
        Redraw the progress line.

        Args:
            received: Bytes received so far
            total: Expected byte count, or None when the server did not say
        """
        received_str = format_file_size(received)
        if total:
            progress = min(100.0, (received / total) * 100)
            line = f"\r{self.label}: {received_str} / {format_file_size(total)} ({GREEN}{progress:.1f}%{RESET})"
        else:
            line = f"\r{self.label}: {received_str}"
        self.stream.write(line)
        self.stream.flush()

    def finish(self) -> None:
        """Finalize progress display with newline."""
        if self._finished:
            return
        self._finished = True
        self.stream.write('\n')
        self.stream.flush()

    def __enter__(self) -> 'TransferProgress':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.finish()


def format_file_size(size_bytes: int) -> str:
    """
    Format size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_speed(megabits_per_second: float) -> str:
    """Format a throughput figure the way results are reported (two decimals, Mbps)."""
    return f"{megabits_per_second:.2f} Mbps"
