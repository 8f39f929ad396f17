from typing import Callable

try:
    import readline  # noqa: F401  line editing and history for input()
except ImportError:  # not available on Windows
    pass

EXIT_COMMANDS = ("exit", "quit")


def read_message(input_fn: Callable[[str], str] = input) -> str | None:
    """Read lines until a blank one and join them into a single message.

    Returns None when input ends (EOF) before anything was typed.
    """
    lines: list[str] = []
    while True:
        try:
            line = input_fn("")
        except EOFError:
            if not lines:
                return None
            break
        if not line:
            break
        lines.append(line)
    return "\n".join(lines)


def is_exit_command(message: str) -> bool:
    return message.lower() in EXIT_COMMANDS
