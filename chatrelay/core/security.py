"""Security utilities for API key generation and hashing"""

import secrets
import hashlib
import hmac

from chatrelay.core.config import settings


def generate_api_key() -> str:
    """
    Generate a new random API key for a user.
    Returns:
        str: URL-safe random key (32 bytes of entropy)
    """
    return secrets.token_urlsafe(32)


# --- API Key Hashing (HMAC-SHA256) ---
def hash_api_key(api_key: str) -> str:
    """
    Hash an API key with HMAC-SHA256 keyed by SECRET_KEY.
    Args:
        api_key: The plain text API key to hash
    Returns:
        str: The hex digest stored in api_keys.key
    """
    return hmac.new(settings.SECRET_KEY.encode(), api_key.encode(), hashlib.sha256).hexdigest()


def verify_api_key(plain_api_key: str, hashed_api_key: str) -> bool:
    """
    Verify a plain API key against its stored HMAC-SHA256 digest.
    Args:
        plain_api_key: The plain text API key
        hashed_api_key: The digest from database
    Returns:
        bool: True if API key is valid, False otherwise
    """
    return hmac.compare_digest(hash_api_key(plain_api_key), hashed_api_key)


def key_hint(api_key: str) -> str:
    """Short, non-secret preview of a key, e.g. 'sk-o...9f2c'."""
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}...{api_key[-4:]}"
