"""Tests for API key hashing and lookup"""
import pytest

from chatrelay.core.security import generate_api_key, hash_api_key, key_hint, verify_api_key
from chatrelay.services.api_key_service import ApiKeyService


def test_verify_api_key():
    plain = generate_api_key()
    digest = hash_api_key(plain)

    assert digest != plain
    assert len(digest) == 64
    assert verify_api_key(plain, digest) is True
    assert verify_api_key(plain + "x", digest) is False
    assert verify_api_key(plain, "0" * 64) is False


def test_key_hint():
    assert key_hint("sk-or-v1-abcdef123456") == "sk-o...3456"
    assert key_hint("short") == "*****"


@pytest.mark.asyncio
async def test_authenticate(session, make_user):
    alice = await make_user("alice@example.com")

    user = await ApiKeyService.authenticate(session, alice["api_key"])

    assert user is not None
    assert user.email == "alice@example.com"
    assert await ApiKeyService.authenticate(session, "wrong-key") is None
