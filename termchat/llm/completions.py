import httpx
import logging
from typing import Any

from pydantic import ValidationError

from .base import (
    Completion,
    CompletionProvider,
    CompletionResponse,
    EmptyCompletionError,
    EndpointError,
    TransportError,
)

logger = logging.getLogger(__name__)


def _error_message(error: Any) -> str:
    """Flatten an `error` field (plain string or OpenAI-style object) to display text."""
    if error is None or error is False:
        return ""
    if isinstance(error, dict):
        message = error.get("message")
        return str(message).strip() if message else str(error)
    message = str(error).strip()
    return "" if message == "null" else message


class CompletionsProvider(CompletionProvider):
    """OpenAI-compatible /v1/completions endpoint (Ollama, LM Studio, vLLM, ...)."""

    def __init__(self, *args, transport: httpx.AsyncBaseTransport | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._transport = transport

    def _client(self, timeout: float | None) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    @property
    def models_url(self) -> str:
        url = httpx.URL(self.endpoint)
        path = url.path.rstrip("/")
        if path.endswith("/completions"):
            path = path[: -len("completions")] + "models"
        else:
            path = "/v1/models"
        return str(url.copy_with(path=path))

    async def complete(self, prompt: str) -> Completion:
        payload = self.build_request(prompt).model_dump()
        logger.debug("POST %s model=%s prompt_chars=%d", self.endpoint, self.model, len(prompt))

        # Failures are shown to the user by the session, so they log at INFO
        try:
            async with self._client(self.timeout) as client:
                resp = await client.post(self.endpoint, json=payload)
        except httpx.TimeoutException as e:
            logger.info("Completion request timed out: %s", e)
            raise TransportError(f"Request to {self.endpoint} timed out.") from e
        except httpx.ConnectError as e:
            logger.info("Could not connect to %s: %s", self.endpoint, e)
            raise TransportError(
                f"Could not connect to {self.endpoint}. Is the model server running?"
            ) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.info("Completion request failed: %s", e)
            raise TransportError(f"Request failed: {e}") from e

        return self._parse(resp)

    def _parse(self, resp: httpx.Response) -> Completion:
        try:
            data = resp.json()
        except ValueError:
            logger.info("Non-JSON response (HTTP %d) from %s", resp.status_code, self.endpoint)
            if resp.is_error:
                raise EndpointError(f"HTTP {resp.status_code}")
            raise EmptyCompletionError()

        if not isinstance(data, dict):
            raise EmptyCompletionError()

        try:
            parsed = CompletionResponse.model_validate(data)
        except ValidationError as e:
            logger.info("Unexpected response shape: %s", e)
            parsed = CompletionResponse(error=data.get("error"))

        message = _error_message(parsed.error)
        if message:
            logger.info("Endpoint reported an error: %s", message)
            raise EndpointError(message)
        if resp.is_error:
            raise EndpointError(f"HTTP {resp.status_code}")

        text = ""
        if parsed.choices:
            text = (parsed.choices[0].text or "").strip()
        if not text or text == "null":
            raise EmptyCompletionError()

        return Completion(text=text, model=parsed.model or self.model)

    async def health_check(self) -> bool:
        try:
            async with self._client(5.0) as client:
                resp = await client.get(self.models_url)
                return resp.status_code == 200
        except (httpx.HTTPError, httpx.InvalidURL):
            logger.info("Completion endpoint not reachable at %s", self.endpoint)
            return False
