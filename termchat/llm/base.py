from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel


class CompletionRequest(BaseModel):
    model: str
    prompt: str
    max_tokens: int
    temperature: float
    n: int = 1
    stop: list[str] = []


class Choice(BaseModel):
    text: str | None = None


class CompletionResponse(BaseModel):
    choices: list[Choice] = []
    error: Any = None
    model: str | None = None


@dataclass
class Completion:
    text: str
    model: str


class CompletionError(Exception):
    """Base for every failure that ends a turn without an assistant reply."""


class TransportError(CompletionError):
    """The endpoint could not be reached or the exchange broke off."""


class EndpointError(CompletionError):
    """The endpoint answered with an error."""


class EmptyCompletionError(CompletionError):
    """The endpoint answered but produced no usable text."""

    def __init__(self, message: str = "Assistant did not provide a response."):
        super().__init__(message)


class CompletionProvider(ABC):
    """Abstract interface for text-completion endpoints."""

    def __init__(
        self,
        model: str,
        endpoint: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
        stop: list[str] | None = None,
        timeout: float | None = None,
    ):
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.stop = list(stop) if stop is not None else ["User:", "Assistant:"]
        self.timeout = timeout

    def build_request(self, prompt: str) -> CompletionRequest:
        return CompletionRequest(
            model=self.model,
            prompt=prompt,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            n=1,
            stop=self.stop,
        )

    @abstractmethod
    async def complete(self, prompt: str) -> Completion:
        """Send one prompt and return the first completion, or raise CompletionError."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the endpoint is reachable."""
        ...
