"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["download", "upload", "fetch", "push", "health", "targets", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2EA043 bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;46;160;67m"
RESET = "\033[0m"

LOGO = rf"""{GREEN}
  ____            _
 |  _ \ _ __ ___ | |__   ___
 | |_) | '__/ _ \| '_ \ / _ \
 |  __/| | | (_) | |_) |  __/
 |_|   |_|  \___/|_.__/ \___|
{RESET}"""

WELCOME_TITLE = "Throughput Probe CLI"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "probe> "

HELP_TEXT = """Available commands:
  download [seconds] [slab_mib] [batch]   Timed download from the gateway
  upload [mib] [seconds]                  Upload a payload and report throughput
  fetch <bytes>                           Download exactly <bytes> (legacy route)
  push <mib>                              Upload <mib> MiB (legacy route)
  health                                  Check the first reachable target
  targets [url ...]                       Show targets, or replace them (first = primary)
  clear                                   Clear screen and redisplay welcome message
  help                                    Show this help
  exit                                    Exit REPL

Requests try each target in order until one answers with a success status.
Examples:
  download 5
  download 10 16 32
  upload 32
  fetch 10485760
  targets http://localhost:8787 https://probe.example.com"""
