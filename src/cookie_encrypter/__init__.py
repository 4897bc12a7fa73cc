"""Transparent cookie value encryption for web request pipelines."""

from src.cookie_encrypter.codec import (
    decrypt_cookie,
    encrypt_cookie,
    encrypt_for_transport,
)
from src.cookie_encrypter.config import CookieEncryptionConfig, get_config
from src.cookie_encrypter.errors import (
    CharsetError,
    ConfigurationError,
    CookieEncryptionError,
    DecryptionError,
)
from src.cookie_encrypter.interceptor import CookieEncrypter, cookie_encrypter
from src.cookie_encrypter.tagging import (
    detag,
    tag_encrypted,
    tag_json,
    untag_json,
)

# Older name for untag_json
json_cookie = untag_json


def decrypt_cookies(cookies, config: CookieEncryptionConfig):
    """Decrypt e:-tagged values of a cookie mapping in place."""
    return CookieEncrypter(config).decrypt_cookies(cookies)


__all__ = [
    "CharsetError",
    "ConfigurationError",
    "CookieEncrypter",
    "CookieEncryptionConfig",
    "CookieEncryptionError",
    "DecryptionError",
    "cookie_encrypter",
    "decrypt_cookie",
    "decrypt_cookies",
    "detag",
    "encrypt_cookie",
    "encrypt_for_transport",
    "get_config",
    "json_cookie",
    "tag_encrypted",
    "tag_json",
    "untag_json",
]
