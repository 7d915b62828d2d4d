"""Chat-completion client built on the OpenAI SDK.

`LLMClient` takes a user's ApiSettings row (SQLAlchemy model) and exposes
`chat` and `validate_key`. Any OpenAI-compatible provider works; the
defaults point at OpenRouter.
"""
import logging
from typing import Any

import httpx
from openai import AsyncOpenAI

from chatrelay.core.config import settings
from chatrelay.models.api_settings import ApiSettings

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_SUFFIX = "/chat/completions"


class LLMError(Exception):
    """Custom exception for LLM client errors."""


def normalize_base_url(api_url: str) -> str:
    """Turn a stored endpoint URL into the base URL the SDK expects.

    Settings store the full chat-completion endpoint
    (``https://openrouter.ai/api/v1/chat/completions``); AsyncOpenAI appends
    ``/chat/completions`` itself, so the suffix is stripped. Base URLs pass
    through unchanged apart from trailing slashes.
    """
    base = api_url.strip().rstrip("/")
    if base.endswith(CHAT_COMPLETIONS_SUFFIX):
        base = base[: -len(CHAT_COMPLETIONS_SUFFIX)]
    return base


class LLMClient:
    def __init__(self, setting: ApiSettings, timeout: float | None = None):
        self._model = setting.model
        self._max_tokens = setting.max_tokens
        self._temperature = setting.temperature
        self._api_key = setting.api_key
        self._base_url = normalize_base_url(setting.api_url)
        self._timeout = timeout if timeout is not None else settings.LLM_TIMEOUT
        self._client = AsyncOpenAI(base_url=self._base_url, api_key=self._api_key, timeout=self._timeout)

    @property
    def model(self) -> str:
        return self._model

    async def chat(self, messages: list[dict[str, Any]]) -> str:
        """
        Send the conversation and return the assistant's reply text.

        Raises:
            LLMError: on transport/provider errors or an empty completion
        """
        logger.debug(
            "Chat completion request: model=%s messages=%d max_tokens=%d temperature=%s",
            self._model,
            len(messages),
            self._max_tokens,
            self._temperature,
        )
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                stream=False,
            )
        except Exception as e:
            logger.warning("Chat completion failed: %s: %s", type(e).__name__, e)
            raise LLMError(f"LLM request failed: {type(e).__name__}: {str(e)}") from e

        choices = getattr(response, "choices", None)
        if not choices:
            raise LLMError("Response has empty choices list")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None) if message is not None else None
        if content is None or not str(content).strip():
            raise LLMError("Response content is empty")

        content_str = str(content).strip()
        logger.debug("Chat completion returned %d chars", len(content_str))
        return content_str

    async def validate_key(self) -> bool:
        """Check the key against the provider's ``/auth/key`` endpoint (OpenRouter)."""
        if not self._api_key:
            return False
        try:
            async with httpx.AsyncClient(timeout=15.0) as http:
                response = await http.get(
                    f"{self._base_url}/auth/key",
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
        except httpx.HTTPError as e:
            logger.warning("API key validation request failed: %s", e)
            return False
        return response.is_success


def build_llm_client(setting: ApiSettings) -> LLMClient:
    """Factory: return an LLMClient for a settings row.

    Raises:
        ValueError: if the user has not configured a provider api_key.
    """
    if not setting.api_key:
        raise ValueError("No API key configured for user")
    return LLMClient(setting)
