"""Request/response cookie interceptor.

Framework-neutral integration shim:

- Inbound: decrypt every e:-tagged value in a request's cookie mapping (and
  its signed-cookie mapping, when the framework has one), in place.
- Outbound: wrap a "set cookie" callable so values are serialized and
  encrypted before they reach the Set-Cookie header.

Failures local to one cookie never abort the request or the response. An
inbound cookie that does not decrypt keeps its transport form; an outbound
cookie that fails to encrypt is set unencrypted.

Usage:
    encrypter = CookieEncrypter(config)

    encrypter.decrypt_cookies(request_cookies)

    set_cookie = encrypter.wrap_cookie_setter(response.set_cookie)
    set_cookie("prefs", {"theme": "dark"}, encrypted=True, httponly=True)
"""

import functools
import logging
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

from pydantic import BaseModel

from src.cookie_encrypter.codec import decrypt_cookie, encrypt_for_transport
from src.cookie_encrypter.config import CookieEncryptionConfig
from src.cookie_encrypter.errors import CookieEncryptionError
from src.cookie_encrypter.logging_utils import (
    get_safe_error_info,
    log_expected_warning,
    sanitize_for_log,
)
from src.cookie_encrypter.tagging import (
    ENCRYPTED_TAG,
    detag,
    tag_json,
    untag_json,
)

logger = logging.getLogger(__name__)

CookieSetter = Callable[..., Any]


def serialize_value(value: Any) -> str:
    """Turn a cookie value into a string, j:-tagging structured values."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, BaseModel):
        return tag_json(value.model_dump(mode="json"))
    if value is None or isinstance(value, (Mapping, list, tuple)):
        return tag_json(value)
    return str(value)


class CookieEncrypter:
    """Applies a CookieEncryptionConfig to request and response cookies.

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(self, config: CookieEncryptionConfig):
        self.config = config

    def should_encrypt(
        self, plain: bool | None = None, encrypted: bool | None = None
    ) -> bool:
        """Decide whether a cookie is encrypted.

        With encrypt_by_default, every cookie is encrypted unless marked
        plain. Without it, only cookies marked encrypted are.
        """
        if self.config.encrypt_by_default:
            return not plain
        return bool(encrypted)

    def encode_value(self, name: str, value: Any) -> str:
        """Serialize and encrypt an outbound cookie value.

        Returns the e:-tagged transport string. If encryption fails for any
        reason the serialized, unencrypted value is returned instead so the
        response is never broken by a cookie.
        """
        serialized = serialize_value(value)
        try:
            return encrypt_for_transport(serialized, self.config)
        except Exception as e:
            logger.error(
                "Cookie encryption failed, setting unencrypted value",
                extra={"cookie_name": sanitize_for_log(name), **get_safe_error_info(e)},
            )
            return serialized

    def wrap_cookie_setter(self, set_cookie: CookieSetter) -> CookieSetter:
        """Return a cookie setter that applies the encryption policy.

        The returned callable accepts the same arguments as ``set_cookie``
        plus two keyword-only flags, ``plain`` and ``encrypted``, which are
        consumed and never forwarded. ``set_cookie`` itself is not modified.
        """

        @functools.wraps(set_cookie)
        def encrypted_set_cookie(
            name: str,
            value: Any = "",
            *args: Any,
            plain: bool | None = None,
            encrypted: bool | None = None,
            **kwargs: Any,
        ) -> Any:
            if not self.should_encrypt(plain=plain, encrypted=encrypted):
                return set_cookie(name, value, *args, **kwargs)
            return set_cookie(name, self.encode_value(name, value), *args, **kwargs)

        return encrypted_set_cookie

    def decrypt_cookies(
        self, cookies: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        """Decrypt e:-tagged values of a cookie mapping in place.

        Values that fail to decrypt, or decrypt to an empty string, keep
        their transport form. Decrypted j:-tagged values are parsed back
        into structured values.

        Returns:
            The same mapping, for chaining
        """
        for name, value in list(cookies.items()):
            if not isinstance(value, str):
                continue
            tag, frame = detag(value)
            if tag != ENCRYPTED_TAG:
                continue

            try:
                decrypted = decrypt_cookie(frame, self.config)
            except CookieEncryptionError as e:
                log_expected_warning(
                    logger,
                    "Cookie decryption failed, leaving value untouched",
                    extra={
                        "cookie_name": sanitize_for_log(name),
                        **get_safe_error_info(e),
                    },
                )
                continue

            if decrypted:
                cookies[name] = untag_json(decrypted)

        return cookies

    def process_request(
        self,
        cookies: MutableMapping[str, Any] | None,
        signed_cookies: MutableMapping[str, Any] | None,
        call_next: Callable[[], Any],
    ) -> Any:
        """Decrypt both cookie jars, then invoke the next stage exactly once.

        Args:
            cookies: Request cookie mapping, or None if the request has none
            signed_cookies: Signed-cookie mapping, or None if unsupported
            call_next: Next stage of the request pipeline

        Returns:
            Whatever call_next returns
        """
        if cookies is not None:
            self.decrypt_cookies(cookies)
        if signed_cookies is not None:
            self.decrypt_cookies(signed_cookies)
        return call_next()


def cookie_encrypter(secret: str | bytes, **options: Any) -> CookieEncrypter:
    """Build a CookieEncrypter from a secret plus option overrides.

    Example:
        >>> encrypter = cookie_encrypter(secret, encrypt_by_default=True)

    Raises:
        pydantic.ValidationError: If an option is invalid
    """
    options.setdefault("key", secret)
    return CookieEncrypter(CookieEncryptionConfig(**options))
