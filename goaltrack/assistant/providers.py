"""Chat completion providers with an ordered fallback chain."""

import logging
from typing import Any, Sequence

import httpx
import openai
from openai import AsyncOpenAI

from ..config import Settings

logger = logging.getLogger(__name__)

FALLBACK_ADVICE = """I'm sorry, the AI services are currently unavailable. Here are some general suggestions based on your request:

1. Take time to think about your objective and break it down into small, achievable steps.
2. Set realistic deadlines for each step.
3. Track your progress regularly and adjust your approach when needed.
4. Don't hesitate to ask people experienced in your field for help or advice.

Please try your request again in a few moments."""

Message = dict[str, str]


class ProviderError(Exception):
    """A provider returned an unusable response."""


class OpenAIProvider:
    """Chat completions through the official OpenAI client."""

    name = "openai"

    def __init__(self, api_key: str, model: str, timeout: float = 30.0):
        self.model = model
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout)

    async def chat(self, messages: Sequence[Message]) -> str:
        completion = await self._client.chat.completions.create(
            model=self.model,
            messages=list(messages),
        )
        if not completion.choices or not completion.choices[0].message.content:
            raise ProviderError("OpenAI returned an empty completion")
        return completion.choices[0].message.content


class DeepSeekProvider:
    """Chat completions over DeepSeek's OpenAI-compatible HTTP endpoint."""

    name = "deepseek"

    def __init__(
        self,
        api_key: str,
        url: str,
        model: str,
        timeout: float = 30.0,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ):
        self.api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def chat(self, messages: Sequence[Message]) -> str:
        payload = {
            "model": self.model,
            "messages": list(messages),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(self.url, json=payload, headers=headers)
            response.raise_for_status()

        try:
            return response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Malformed DeepSeek response: {e}") from e


class AssistantClient:
    """
    Tries each provider in order and falls back to canned advice.

    ``complete`` never raises: provider failures are logged and the next
    provider is tried.
    """

    def __init__(self, providers: Sequence[Any], fallback: str = FALLBACK_ADVICE):
        self.providers = list(providers)
        self.fallback = fallback

    async def complete(self, messages: Sequence[Message]) -> str:
        for provider in self.providers:
            try:
                return await provider.chat(messages)
            except (openai.OpenAIError, httpx.HTTPError, ProviderError) as e:
                logger.warning(f"AI provider {provider.name} failed: {e}")

        logger.error("All AI providers failed, returning fallback advice")
        return self.fallback


def build_assistant(settings: Settings) -> AssistantClient:
    """Assemble the provider chain from whichever API keys are configured."""
    providers: list[Any] = []
    if settings.openai_api_key:
        providers.append(
            OpenAIProvider(
                settings.openai_api_key, settings.openai_model, settings.ai_timeout
            )
        )
    if settings.deepseek_api_key:
        providers.append(
            DeepSeekProvider(
                settings.deepseek_api_key,
                settings.deepseek_api_url,
                settings.deepseek_model,
                settings.ai_timeout,
            )
        )

    if not providers:
        logger.info("No AI provider configured, chat will use fallback advice")
    return AssistantClient(providers)
