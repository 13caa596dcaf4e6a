"""Interactive prompt and single-line command execution."""

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from cli.commands import (
    handle_download,
    handle_fetch,
    handle_health,
    handle_push,
    handle_targets,
    handle_upload,
)
from cli.constants import (
    COMMANDS,
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    DownloadCommand,
    FetchCommand,
    HealthCommand,
    PushCommand,
    TargetsCommand,
    UploadCommand,
)
from cli.parser import ParseError, parse_command

HANDLERS = {
    DownloadCommand: handle_download,
    UploadCommand: handle_upload,
    FetchCommand: handle_fetch,
    PushCommand: handle_push,
    HealthCommand: handle_health,
    TargetsCommand: handle_targets,
}


def run_line(line: str) -> str:
    """
    Parse one command line and run it.

    Args:
        line: Command text such as "download 5 8 16"

    Returns:
        Result message from the command handler

    Raises:
        ParseError: line is not a valid command
    """
    cmd_obj = parse_command(line)
    return HANDLERS[type(cmd_obj)](cmd_obj)


def redraw() -> None:
    clear()
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def repl_loop() -> None:
    """Prompt for commands until 'exit' or end of input."""
    session: PromptSession = PromptSession(
        completer=WordCompleter(COMMANDS, ignore_case=True),
        history=InMemoryHistory(),
        style=STYLE,
    )
    redraw()

    while True:
        try:
            line = session.prompt([("class:prompt", PROMPT_TEXT)]).strip()
        except KeyboardInterrupt:
            continue
        except EOFError:
            line = "exit"

        if line == "exit":
            print("Goodbye!")
            return
        if not line:
            continue
        if line == "clear":
            redraw()
        elif line == "help":
            print(HELP_TEXT)
        else:
            try:
                print(run_line(line))
            except ParseError as e:
                print(f"Error: {e}")
