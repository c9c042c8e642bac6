"""Ollama chat API wrapper with async support and retry logic."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from jobcv.config import OllamaConfig
from jobcv.errors import GenerationError

logger = logging.getLogger(__name__)


class InvalidResponseError(Exception):
    """The backend answered, but without usable message content."""


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int = 0
    output_tokens: int = 0


class LLMClient:
    """Async Ollama chat client with linear-backoff retries.

    Only request failures are retried: transport errors, timeouts, HTTP
    error statuses and malformed or empty bodies. The n-th retry waits
    ``n * retry_delay`` seconds.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434/api/chat",
        model: str = "mistral",
        *,
        timeout: float = 180.0,
        temperature: float = 0.3,
        num_ctx: int = 1024,
        num_gpu: int = 0,
        max_attempts: int = 3,
        retry_delay: float = 5.0,
        http_client: httpx.AsyncClient | None = None,
        sleep=asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.num_ctx = num_ctx
        self.num_gpu = num_gpu
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=timeout)
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    @classmethod
    def from_config(cls, config: OllamaConfig, **kwargs) -> LLMClient:
        return cls(
            config.api_url,
            config.model,
            timeout=config.timeout,
            temperature=config.temperature,
            num_ctx=config.num_ctx,
            num_gpu=config.num_gpu,
            max_attempts=config.max_attempts,
            retry_delay=config.retry_delay,
            **kwargs,
        )

    async def __aenter__(self) -> LLMClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _payload(self, prompt: str, system: str) -> dict:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_ctx": self.num_ctx,
                "num_gpu": self.num_gpu,
            },
        }

    async def _call_api(self, payload: dict) -> LLMResponse:
        """Make a single chat request and validate the body."""
        response = await self.client.post(self.base_url, json=payload)
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            raise InvalidResponseError("Response body is not JSON") from e

        message = data.get("message") if isinstance(data, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise InvalidResponseError("Invalid Ollama response: no message content")

        return LLMResponse(
            text=content,
            input_tokens=int(data.get("prompt_eval_count") or 0),
            output_tokens=int(data.get("eval_count") or 0),
        )

    def _log_attempt(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Attempt %d/%d failed: %s",
            retry_state.attempt_number,
            self.max_attempts,
            exc,
        )

    async def generate(self, prompt: str, system: str = "") -> LLMResponse:
        """Send a chat prompt and return the generated text with usage."""
        logger.debug("LLM call: model=%s url=%s", self.model, self.base_url)
        payload = self._payload(prompt, system)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
            retry=retry_if_exception_type((httpx.HTTPError, InvalidResponseError)),
            before_sleep=self._log_attempt,
            sleep=self._sleep,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    result = await self._call_api(payload)
        except (httpx.HTTPError, InvalidResponseError) as e:
            logger.error("LLM call failed after %d attempts: %s", self.max_attempts, e)
            raise GenerationError(
                f"Generation failed after {self.max_attempts} attempts: {e}"
            ) from e

        logger.debug(
            "LLM response: %d input, %d output tokens",
            result.input_tokens,
            result.output_tokens,
        )
        self._token_log.append((self.model, result.input_tokens, result.output_tokens))
        return result

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
