"""Output system for agent-rules.

All user-facing text goes through :func:`message`, which filters by
verbosity and renders through a shared ``rich`` console.  Errors,
warnings and debug lines are written to stderr so that stdout only
carries results.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.text import Text


class MessageType:
    """Kind of message, used to pick a style and a stream."""

    NORMAL = "normal"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    DEBUG = "debug"


class VerbosityLevel:
    """Minimum ``-v`` count required for a message to be shown."""

    ALWAYS = 0
    VERBOSE = 1
    EXTRA_VERBOSE = 2
    DEBUG = 3


_STYLES = {
    MessageType.NORMAL: "",
    MessageType.INFO: "cyan",
    MessageType.SUCCESS: "green",
    MessageType.WARNING: "yellow",
    MessageType.ERROR: "bold red",
    MessageType.DEBUG: "dim",
}

_STDERR_TYPES = (MessageType.WARNING, MessageType.ERROR, MessageType.DEBUG)


class OutputManager:
    """Holds the verbosity and color settings for the current process."""

    def __init__(self, verbosity: int = 0, use_color: bool = True):
        self.verbosity = verbosity
        self.use_color = use_color

    def should_show(self, level: int) -> bool:
        return self.verbosity >= level

    def _console(self, stderr: bool) -> Console:
        # Built per call so that redirected sys.stdout/sys.stderr (pytest
        # capsys, pipes) are always honoured.
        return Console(
            file=sys.stderr if stderr else sys.stdout,
            no_color=not self.use_color,
            highlight=False,
            soft_wrap=True,
        )

    def emit(self, text: str | Text, msg_type: str = MessageType.NORMAL) -> None:
        if not isinstance(text, Text):
            prefix = "[debug] " if msg_type == MessageType.DEBUG else ""
            text = Text(prefix + text, style=_STYLES.get(msg_type, ""))
        self._console(msg_type in _STDERR_TYPES).print(text)


_output = OutputManager()


def get_output() -> OutputManager:
    """Return the process-wide :class:`OutputManager`."""
    return _output


def message(
    text: str,
    msg_type: str = MessageType.NORMAL,
    level: int = VerbosityLevel.ALWAYS,
) -> None:
    """Print *text* if the current verbosity allows it.

    Args:
        text: Message to print
        msg_type: One of the :class:`MessageType` constants
        level: Minimum verbosity (a :class:`VerbosityLevel` constant)
    """
    output = get_output()
    if not output.should_show(level):
        return
    output.emit(text, msg_type)


# ------------------------------------------------------------------
# Diff presentation
# ------------------------------------------------------------------
def colorize_diff(diff: str) -> Text:
    """Style a plain unified diff for terminal display.

    Hunk headers are blue, file headers yellow, additions green and
    removals red.  Anything else, including the binary-file marker, is
    left unstyled.
    """
    result = Text()
    lines = diff.split("\n")
    for idx, line in enumerate(lines):
        if line.startswith("@@"):
            style = "bold bright_blue"
        elif line.startswith(("+++", "---", "diff", "index")):
            style = "yellow"
        elif line.startswith("+"):
            style = "bold green"
        elif line.startswith("-"):
            style = "bold red"
        else:
            style = ""
        result.append(line, style=style)
        if idx < len(lines) - 1:
            result.append("\n")
    return result


def print_diff(diff: str, indent: str = "    ") -> None:
    """Print a diff preview, indented, honouring the color setting."""
    styled = Text()
    for idx, line in enumerate(colorize_diff(diff).split("\n")):
        if idx:
            styled.append("\n")
        styled.append(indent)
        styled.append_text(line)
    get_output().emit(styled)
