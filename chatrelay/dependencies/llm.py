"""LLM client dependency, overridable in tests"""
from chatrelay.core.llm_client import build_llm_client
from chatrelay.services.conversation_service import LLMClientFactory


def get_llm_client_factory() -> LLMClientFactory:
    """Return the callable that turns a user's ApiSettings into an LLMClient."""
    return build_llm_client
