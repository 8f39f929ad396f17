from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Role(str, Enum):
    USER = "User"
    ASSISTANT = "Assistant"


@dataclass(frozen=True)
class ExchangeLine:
    role: Role
    text: str

    def render(self) -> str:
        return f"{self.role.value}: {self.text}"


class HistoryBuffer:
    """In-memory conversation history, bounded to the most recent exchange pairs."""

    def __init__(self, max_pairs: int = 5):
        if max_pairs < 1:
            raise ValueError("max_pairs must be at least 1")
        self._lines: list[ExchangeLine] = []
        self._max = max_pairs * 2

    @property
    def capacity(self) -> int:
        return self._max

    def append(self, role: Role, text: str) -> ExchangeLine:
        line = ExchangeLine(role=Role(role), text=text)
        self._lines.append(line)
        # Drop the oldest lines once over capacity (keep most recent)
        if len(self._lines) > self._max:
            self._lines = self._lines[-self._max:]
        return line

    def lines(self) -> list[ExchangeLine]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[ExchangeLine]:
        return iter(list(self._lines))
