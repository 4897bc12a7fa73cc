"""
Cookie Encryption Configuration
===============================

Immutable configuration shared by every request.

For On-Call Engineers:
    Environment variables:
    - COOKIE_ENCRYPTION_KEY: Cipher key (required; 32 bytes for aes256)
    - COOKIE_ENCRYPTION_ALGORITHM: OpenSSL-style name (default: aes256)
    - COOKIE_ENCRYPTION_CHARSET: Transport encoding (default: base64)
    - COOKIE_ENCRYPTION_STATIC_IV: "true" to reuse a fixed IV (default: false)
    - COOKIE_ENCRYPTION_BY_DEFAULT: "true" to encrypt unless a cookie is
      marked plain (default: false)

    If cookies are being set unencrypted, check the service logs for
    "Cookie encryption failed" and verify COOKIE_ENCRYPTION_KEY is set.

For Developers:
    - Build one CookieEncryptionConfig at startup (or use get_config())
      and pass it to CookieEncrypter / the middleware
    - The model is frozen; never mutate it per request

Security Notes:
    - The key is excluded from repr() and never logged
    - use_static_iv trades ciphertext indistinguishability for shorter
      cookies; only enable it for low-sensitivity values
"""

import logging
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.cookie_encrypter import charset as charset_codec
from src.cookie_encrypter.cipher import DEFAULT_ALGORITHM, is_supported_algorithm
from src.cookie_encrypter.errors import ConfigurationError

logger = logging.getLogger(__name__)

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})


class CookieEncryptionConfig(BaseModel):
    """Cipher configuration for cookie encryption."""

    model_config = ConfigDict(frozen=True)

    key: bytes | None = Field(
        default=None,
        repr=False,
        description="Cipher key. Required to encrypt or decrypt; checked at call time.",
    )
    algorithm: str = Field(
        default=DEFAULT_ALGORITHM,
        description="OpenSSL-style cipher name, e.g. 'aes256' or 'aes-128-ctr'",
    )
    charset: str = Field(
        default=charset_codec.DEFAULT_CHARSET,
        description="Transport encoding for IV and ciphertext, e.g. 'base64' or 'hex'",
    )
    use_static_iv: bool = Field(
        default=False,
        description="Reuse a fixed IV and pad plaintext with 4 random characters",
    )
    encrypt_by_default: bool = Field(
        default=False,
        description="Encrypt cookies unless explicitly marked plain",
    )

    @field_validator("key", mode="before")
    @classmethod
    def _encode_key(cls, value):
        if isinstance(value, str):
            return value.encode("utf-8")
        return value

    @field_validator("algorithm")
    @classmethod
    def _check_algorithm(cls, value: str) -> str:
        if not is_supported_algorithm(value):
            raise ValueError(f"Unsupported cipher algorithm: {value}")
        return value.strip().lower()

    @field_validator("charset")
    @classmethod
    def _check_charset(cls, value: str) -> str:
        if not charset_codec.is_supported(value):
            raise ValueError(f"Unsupported charset: {value}")
        return value

    def require_key(self) -> bytes:
        """Return the key, failing loudly if none is configured.

        Raises:
            ConfigurationError: If the key is missing or empty
        """
        if not self.key:
            raise ConfigurationError("A key is required to encrypt or decrypt cookies")
        return self.key


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in TRUTHY_VALUES


def get_config() -> CookieEncryptionConfig:
    """
    Load cookie encryption configuration from environment variables.

    Returns:
        Frozen CookieEncryptionConfig

    Raises:
        ConfigurationError: If COOKIE_ENCRYPTION_KEY is missing, or the
            algorithm/charset is not supported

    On-Call Note:
        Called once at startup. If it fails the service will not start;
        check the environment variables listed in the module docstring.
    """
    key = os.environ.get("COOKIE_ENCRYPTION_KEY", "")
    if not key:
        raise ConfigurationError("COOKIE_ENCRYPTION_KEY is required")

    algorithm = os.environ.get("COOKIE_ENCRYPTION_ALGORITHM") or DEFAULT_ALGORITHM
    charset = (
        os.environ.get("COOKIE_ENCRYPTION_CHARSET") or charset_codec.DEFAULT_CHARSET
    )

    if not is_supported_algorithm(algorithm):
        raise ConfigurationError(
            f"Unsupported COOKIE_ENCRYPTION_ALGORITHM: {algorithm}"
        )
    if not charset_codec.is_supported(charset):
        raise ConfigurationError(f"Unsupported COOKIE_ENCRYPTION_CHARSET: {charset}")

    config = CookieEncryptionConfig(
        key=key,
        algorithm=algorithm,
        charset=charset,
        use_static_iv=_env_flag("COOKIE_ENCRYPTION_STATIC_IV"),
        encrypt_by_default=_env_flag("COOKIE_ENCRYPTION_BY_DEFAULT"),
    )

    logger.info(
        "Cookie encryption configuration loaded",
        extra={
            "algorithm": config.algorithm,
            "charset": config.charset,
            "use_static_iv": config.use_static_iv,
            "encrypt_by_default": config.encrypt_by_default,
        },
    )

    return config
