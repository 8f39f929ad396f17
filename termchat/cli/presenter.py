"""Terminal output: colored, prefixed lines and a spinner while a request is pending."""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.text import Text

BANNER_STYLE = "bold blue"
USER_STYLE = "bold green"
ASSISTANT_STYLE = "bold cyan"
ERROR_STYLE = "bold red"
WARNING_STYLE = "yellow"

SPINNER = "dots"   # ⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏

RULE = "=" * 60


class Presenter:
    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)

    def print_text(self, style: str, prefix: str, text: str) -> None:
        """Style the prefix label, or the whole line when there is no label."""
        if prefix:
            line = Text.assemble((prefix, style), text)
        else:
            line = Text(text, style=style)
        self.console.print(line, soft_wrap=True)

    def blank(self) -> None:
        self.console.print()

    def welcome(self, model: str = "") -> None:
        self.console.clear()
        title = "Welcome to the CLI Chat Bot"
        if model:
            title += f" ({model})"
        self.print_text(BANNER_STYLE, "", RULE)
        self.print_text(BANNER_STYLE, "", title.center(len(RULE)).rstrip())
        self.print_text(BANNER_STYLE, "", RULE)
        self.console.print("Type 'exit' or 'quit' to end the conversation.", markup=False)
        self.console.print(
            "Note: To submit your message, type your message and press Enter twice.",
            markup=False,
        )
        self.blank()

    def prompt_label(self) -> None:
        self.print_text(USER_STYLE, "You: ", "")

    def assistant(self, text: str) -> None:
        self.print_text(ASSISTANT_STYLE, "Assistant: ", text)
        self.blank()

    def error(self, message: str) -> None:
        self.print_text(ERROR_STYLE, "", message)
        self.blank()

    def warning(self, message: str) -> None:
        self.print_text(WARNING_STYLE, "", message)

    def farewell(self) -> None:
        self.print_text(BANNER_STYLE, "", "Goodbye!")

    @contextmanager
    def waiting(self) -> Iterator[None]:
        """Spin until the block exits. The cursor is hidden meanwhile and restored after."""
        with self.console.status("", spinner=SPINNER, speed=0.8):
            yield
