"""termchat — start a chat with: python app.py"""

import asyncio
import logging
import sys

from termchat.cli.presenter import Presenter
from termchat.cli.session import ChatSession
from termchat.core.config import ChatConfig, ConfigError, load_config
from termchat.llm.completions import CompletionsProvider
from termchat.memory.history import HistoryBuffer

logger = logging.getLogger("termchat")

# ── Logging ──────────────────────────────────────────────────────────────────


def setup_logging(config: ChatConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.WARNING),
        format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
        filename=config.log_file,
    )


# ── Wiring ───────────────────────────────────────────────────────────────────


def init_provider(config: ChatConfig) -> CompletionsProvider:
    provider = CompletionsProvider(
        model=config.model,
        endpoint=config.api_url,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        stop=config.stop,
        timeout=config.request_timeout,
    )
    logger.info("Provider initialized: model=%s endpoint=%s", config.model, config.api_url)
    return provider


def run(config: ChatConfig, presenter: Presenter) -> None:
    provider = init_provider(config)
    session = ChatSession(provider, presenter, HistoryBuffer(config.max_history))

    presenter.welcome(config.model)
    if not asyncio.run(provider.health_check()):
        presenter.warning(
            f"Model server not reachable at {config.api_url}. "
            "Start it (e.g. 'ollama serve') or messages will fail."
        )
        presenter.blank()

    session.run()


# ── Run ──────────────────────────────────────────────────────────────────────


def main() -> int:
    presenter = Presenter()
    try:
        config = load_config()
    except ConfigError as e:
        presenter.error(f"Invalid configuration: {e}")
        return 2

    setup_logging(config)
    try:
        run(config, presenter)
    except KeyboardInterrupt:
        presenter.blank()
        presenter.farewell()
    return 0


if __name__ == "__main__":
    sys.exit(main())
