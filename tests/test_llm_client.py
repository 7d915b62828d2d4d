"""Tests for the chat-completion client and prompt assembly"""
from types import SimpleNamespace

import httpx
import pytest

from chatrelay.core.llm_client import LLMClient, LLMError, build_llm_client, normalize_base_url
from chatrelay.models.api_settings import ApiSettings
from chatrelay.models.chat import Chat, Message
from chatrelay.services.conversation_service import auto_title, build_prompt


def make_setting(**overrides) -> ApiSettings:
    values = {
        "api_key": "sk-or-test",
        "api_url": "https://openrouter.ai/api/v1/chat/completions",
        "model": "deepseek/deepseek-r1-distill-llama-70b:free",
        "max_tokens": 4000,
        "temperature": 0.7,
    }
    values.update(overrides)
    return ApiSettings(**values)


class StubCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.response


def stub_client(client: LLMClient, completions: StubCompletions) -> None:
    client._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.mark.parametrize(
    "api_url, expected",
    [
        ("https://openrouter.ai/api/v1/chat/completions", "https://openrouter.ai/api/v1"),
        ("https://api.openai.com/v1/chat/completions/", "https://api.openai.com/v1"),
        ("http://127.0.0.1:8084/v1", "http://127.0.0.1:8084/v1"),
    ],
)
def test_normalize_base_url(api_url, expected):
    assert normalize_base_url(api_url) == expected


def test_build_llm_client_requires_key():
    with pytest.raises(ValueError):
        build_llm_client(make_setting(api_key=""))


@pytest.mark.asyncio
async def test_chat_sends_settings_and_returns_content():
    client = LLMClient(make_setting(temperature=0.2, max_tokens=64))
    completions = StubCompletions(response=completion("  Bonjour  "))
    stub_client(client, completions)

    reply = await client.chat([{"role": "user", "content": "Hello"}])

    assert reply == "Bonjour"
    assert completions.kwargs["model"] == "deepseek/deepseek-r1-distill-llama-70b:free"
    assert completions.kwargs["max_tokens"] == 64
    assert completions.kwargs["temperature"] == 0.2
    assert completions.kwargs["messages"] == [{"role": "user", "content": "Hello"}]


@pytest.mark.asyncio
async def test_chat_rejects_empty_completion():
    client = LLMClient(make_setting())
    stub_client(client, StubCompletions(response=completion("   ")))

    with pytest.raises(LLMError):
        await client.chat([{"role": "user", "content": "Hello"}])


@pytest.mark.asyncio
async def test_chat_wraps_transport_errors():
    client = LLMClient(make_setting())
    stub_client(client, StubCompletions(error=RuntimeError("connection reset")))

    with pytest.raises(LLMError, match="RuntimeError"):
        await client.chat([{"role": "user", "content": "Hello"}])


@pytest.mark.asyncio
async def test_validate_key(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"data": {"label": "test"}})

    real_async_client = httpx.AsyncClient
    monkeypatch.setattr(
        httpx, "AsyncClient", lambda **kwargs: real_async_client(transport=httpx.MockTransport(handler), **kwargs)
    )

    assert await LLMClient(make_setting()).validate_key() is True
    assert seen == {"url": "https://openrouter.ai/api/v1/auth/key", "auth": "Bearer sk-or-test"}


def test_build_prompt_without_system_prompt():
    chat = Chat(title="t", system_prompt=None)
    history = [Message(role="user", content="a"), Message(role="assistant", content="b")]

    assert build_prompt(chat, history, "c") == [
        {"role": "user", "content": "a"},
        {"role": "assistant", "content": "b"},
        {"role": "user", "content": "c"},
    ]


def test_auto_title_truncates_and_collapses_whitespace():
    assert auto_title("  hello\n  world ") == "hello world"
    assert auto_title("x" * 80) == "x" * 50
    assert len(auto_title("word " * 20)) <= 50
