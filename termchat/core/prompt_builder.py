from typing import Iterable

from ..memory.history import ExchangeLine, Role

ASSISTANT_CUE = f"\n{Role.ASSISTANT.value}:"


def build_prompt(history: Iterable[ExchangeLine]) -> str:
    """Serialize the history as one completion prompt ending with the assistant cue."""
    body = "\n".join(line.render() for line in history)
    return body + ASSISTANT_CUE
