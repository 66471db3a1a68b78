"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["ping", "download", "upload", "run", "server", "config", "clear", "exit", "help"]

SIZE_PRESETS = ["1MiB", "5MiB", "10MiB", "25MiB", "100MiB", "250MiB"]

STYLE = Style.from_dict(
    {
        "prompt": "#F45935 bold",
        "command": "#0088ff bold",
    }
)

RED_ORANGE = "\033[38;2;244;89;53m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{RED_ORANGE}
  ___ ___  ___ ___ ___    _____ ___ ___ _____
 / __| _ \\| __| __|   \\  |_   _| __/ __|_   _|
 \\__ \\  _/| _|| _|| |) |   | | | _|\\__ \\ | |
 |___/_|  |___|___|___/    |_| |___|___/ |_|
{RESET}"""

WELCOME_TITLE = "Edge Speedtest CLI - latency, download and upload"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "speedtest> "

HELP_TEXT = """Available commands:
  ping [count]                        Measure round-trip latency with <count> probes
  download [size]                     Measure download throughput with a <size> transfer
  upload [size]                       Measure upload throughput with a <size> payload
  run                                 Run ping, download and upload in sequence
  server <host> [port]                Change the target server
  config                              Show current settings
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Sizes are bytes or use a unit suffix (K, M, G with optional B or iB; all 1024-based).
Examples:
  ping 10
  download 25MiB
  upload 5M
  server edge.example.com 443
  run"""
