"""Command parser for CLI input."""

import re
import shlex

from cli.models import (
    CommandRequest,
    ConfigCommand,
    DownloadCommand,
    PingCommand,
    RunCommand,
    ServerCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


SIZE_PATTERN = re.compile(r"^(\d+)\s*([kmg]?)(i?b)?$", re.IGNORECASE)

SIZE_MULTIPLIERS = {
    "": 1,
    "k": 1024,
    "m": 1024 ** 2,
    "g": 1024 ** 3,
}


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Ping/Download/Upload/Run/Server/Config)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0].lower()

    if command_name == "ping":
        return _parse_ping(tokens[1:])
    elif command_name == "download":
        return DownloadCommand(size=_parse_optional_size("download", tokens[1:]))
    elif command_name == "upload":
        return UploadCommand(size=_parse_optional_size("upload", tokens[1:]))
    elif command_name == "run":
        _expect_no_args("run", tokens[1:])
        return RunCommand()
    elif command_name == "server":
        return _parse_server(tokens[1:])
    elif command_name == "config":
        _expect_no_args("config", tokens[1:])
        return ConfigCommand()
    else:
        raise ParseError(f"Unknown command: {command_name}")


def parse_size(text: str) -> int:
    """Parse a byte count such as '1048576', '512K', '10MiB' or '1GB'.

    Unit suffixes are 1024-based regardless of the 'i'.

    Raises:
        ParseError: If the text is not a positive size
    """
    match = SIZE_PATTERN.match(text.strip())
    if not match:
        raise ParseError(f"Invalid size: {text!r}")

    number, unit, suffix = match.groups()
    if suffix and suffix.lower() == "ib" and not unit:
        raise ParseError(f"Invalid size: {text!r}")

    size = int(number) * SIZE_MULTIPLIERS[unit.lower()]
    if size <= 0:
        raise ParseError("Size must be greater than zero")
    return size


def _parse_ping(args: list[str]) -> PingCommand:
    """Parse 'ping [count]' command."""
    if not args:
        return PingCommand()
    if len(args) > 1:
        raise ParseError("ping takes at most 1 argument: [count]")
    if not args[0].isdigit() or int(args[0]) == 0:
        raise ParseError(f"ping count must be a positive integer, got {args[0]!r}")
    return PingCommand(count=int(args[0]))


def _parse_optional_size(command_name: str, args: list[str]) -> int | None:
    """Parse the optional [size] argument of download/upload."""
    if not args:
        return None
    if len(args) > 1:
        raise ParseError(f"{command_name} takes at most 1 argument: [size]")
    return parse_size(args[0])


def _parse_server(args: list[str]) -> ServerCommand:
    """Parse 'server <host> [port]' command."""
    if len(args) not in (1, 2):
        raise ParseError("server requires 1 or 2 arguments: <host> [port]")

    host = args[0]
    if len(args) == 1:
        return ServerCommand(host=host)

    if not args[1].isdigit() or not 0 < int(args[1]) < 65536:
        raise ParseError(f"Invalid port: {args[1]!r}")
    return ServerCommand(host=host, port=int(args[1]))


def _expect_no_args(command_name: str, args: list[str]) -> None:
    if args:
        raise ParseError(f"{command_name} takes no arguments")
