import asyncio
import logging
from enum import Enum
from typing import Callable

from ..core.prompt_builder import build_prompt
from ..llm.base import CompletionError, CompletionProvider, EndpointError
from ..memory.history import HistoryBuffer, Role
from .input_reader import is_exit_command, read_message
from .presenter import Presenter

logger = logging.getLogger(__name__)


class ChatState(str, Enum):
    PROMPTING = "prompting"
    AWAITING_RESPONSE = "awaiting_response"
    RENDERING = "rendering"
    TERMINATED = "terminated"


class ChatSession:
    """One interactive conversation: reads a message, asks the endpoint, renders the reply."""

    def __init__(
        self,
        provider: CompletionProvider,
        presenter: Presenter,
        history: HistoryBuffer,
        input_fn: Callable[[str], str] = input,
    ):
        self.provider = provider
        self.presenter = presenter
        self.history = history
        self.input_fn = input_fn
        self.state = ChatState.PROMPTING

    async def run_turn(self, message: str) -> bool:
        """Send one user message. Returns True when an assistant reply was recorded."""
        self.history.append(Role.USER, message)
        prompt = build_prompt(self.history)

        self.state = ChatState.AWAITING_RESPONSE
        try:
            with self.presenter.waiting():
                completion = await self.provider.complete(prompt)
        except CompletionError as e:
            self.state = ChatState.RENDERING
            logger.info("Turn failed: %s: %s", type(e).__name__, e)
            self.presenter.error(self._describe(e))
            self.state = ChatState.PROMPTING
            return False

        self.state = ChatState.RENDERING
        self.history.append(Role.ASSISTANT, completion.text)
        logger.debug("Assistant replied (%d chars); history holds %d lines",
                     len(completion.text), len(self.history))
        self.presenter.assistant(completion.text)
        self.state = ChatState.PROMPTING
        return True

    def run(self) -> None:
        """Prompt until an exit keyword, end of input or Ctrl-C. Each turn runs its own event loop."""
        try:
            while self.state != ChatState.TERMINATED:
                self.presenter.prompt_label()
                message = read_message(self.input_fn)
                if message is None or is_exit_command(message):
                    self.stop()
                    break
                asyncio.run(self.run_turn(message))
        except KeyboardInterrupt:
            self.presenter.blank()
            self.stop()

    def stop(self) -> None:
        self.presenter.farewell()
        self.state = ChatState.TERMINATED

    @staticmethod
    def _describe(error: CompletionError) -> str:
        if isinstance(error, EndpointError):
            return f"Error from API: {error}"
        return str(error)
