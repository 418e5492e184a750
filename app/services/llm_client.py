"""Chat-completion client for the analysis model."""
from __future__ import annotations

import logging
from typing import Optional

import openai
from openai import OpenAI

from app.errors import ConfigurationError, MalformedResponse, UpstreamError, UpstreamTimeout


logger = logging.getLogger(__name__)


class LLMClient:
    """Sends one user-role message and returns the completion text."""

    def complete(self, prompt: str) -> str:
        raise NotImplementedError


class OpenAIChatClient(LLMClient):
    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str = "gpt-3.5-turbo",
        timeout_seconds: float = 60.0,
        client: Optional[OpenAI] = None,
    ) -> None:
        if not api_key and client is None:
            raise ConfigurationError("OPENAI_API_KEY is not set")
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.client = client or OpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0)

    def complete(self, prompt: str) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.APITimeoutError as exc:
            raise UpstreamTimeout("chat completion", self.timeout_seconds) from exc
        except openai.APIError as exc:
            raise UpstreamError(f"OpenAI request failed: {exc}") from exc

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise MalformedResponse("No response content from OpenAI API")

        log_token_usage(prompt, content)
        return content


def log_token_usage(prompt: str, response: str) -> None:
    """Log whitespace-token counts as a rough proxy for model token usage."""

    prompt_tokens = len(prompt.split())
    response_tokens = len(response.split())
    logger.info(
        "Token usage - Prompt: %s, Response: %s, Total: %s",
        prompt_tokens,
        response_tokens,
        prompt_tokens + response_tokens,
    )
