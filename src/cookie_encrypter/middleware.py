"""Starlette/FastAPI integration for cookie encryption.

Usage:
    from fastapi import Depends, FastAPI

    from src.cookie_encrypter.config import get_config
    from src.cookie_encrypter.middleware import (
        add_cookie_encryption,
        get_cookie_setter,
        get_cookies,
    )

    app = FastAPI()
    add_cookie_encryption(app, get_config())

    @app.post("/prefs")
    def save_prefs(set_cookie=Depends(get_cookie_setter)):
        set_cookie("prefs", {"theme": "dark"}, encrypted=True, httponly=True)

    @app.get("/prefs")
    def read_prefs(cookies: dict = Depends(get_cookies)):
        return cookies.get("prefs")

Starlette parses the Cookie header per Request object, so the decrypted
mapping is published on ``request.state`` (shared through the ASGI scope)
instead of being written back into ``request.cookies``.
"""

import logging
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.cookie_encrypter.config import CookieEncryptionConfig
from src.cookie_encrypter.errors import ConfigurationError
from src.cookie_encrypter.interceptor import CookieEncrypter, CookieSetter

logger = logging.getLogger(__name__)


class CookieEncryptionMiddleware(BaseHTTPMiddleware):
    """Decrypt inbound cookies before the route handler runs.

    Publishes:
        request.state.cookies: decrypted copy of request.cookies
        request.state.cookie_encrypter: the CookieEncrypter, for outbound use
    """

    def __init__(self, app, config: CookieEncryptionConfig):
        super().__init__(app)
        self.encrypter = CookieEncrypter(config)

    async def dispatch(self, request: Request, call_next):
        cookies = dict(request.cookies)
        request.state.cookies = cookies
        request.state.cookie_encrypter = self.encrypter
        return await self.encrypter.process_request(
            cookies, None, lambda: call_next(request)
        )


def add_cookie_encryption(app, config: CookieEncryptionConfig) -> None:
    """Register CookieEncryptionMiddleware on a Starlette/FastAPI app."""
    app.add_middleware(CookieEncryptionMiddleware, config=config)
    logger.debug(
        "Cookie encryption middleware registered",
        extra={"encrypt_by_default": config.encrypt_by_default},
    )


def get_cookie_encrypter(request: Request) -> CookieEncrypter:
    """FastAPI dependency: the CookieEncrypter installed by the middleware."""
    encrypter = getattr(request.state, "cookie_encrypter", None)
    if encrypter is None:
        raise ConfigurationError("CookieEncryptionMiddleware is not installed")
    return encrypter


def get_cookies(request: Request) -> dict[str, Any]:
    """FastAPI dependency: request cookies with encrypted values decrypted."""
    cookies = getattr(request.state, "cookies", None)
    if cookies is None:
        raise ConfigurationError("CookieEncryptionMiddleware is not installed")
    return cookies


def get_cookie_setter(request: Request, response: Response) -> CookieSetter:
    """FastAPI dependency: response.set_cookie with the encryption policy."""
    return get_cookie_encrypter(request).wrap_cookie_setter(response.set_cookie)
