"""
Pytest Configuration and Shared Fixtures
=========================================

Common fixtures used across all test modules.

For Developers:
    - Import fixtures by name in test files (pytest auto-discovers conftest.py)
    - Configs are frozen; build a new one with model_copy(update=...) to vary
      a single field
    - Expected decryption failures are logged via log_expected_warning, which
      downgrades to DEBUG under pytest; use caplog.set_level(logging.DEBUG)
      when asserting on them
"""

import logging
import os

import pytest

from src.cookie_encrypter.config import CookieEncryptionConfig

# 32 bytes: a valid aes256 key
TEST_KEY = "0123456789abcdef0123456789abcdef"
OTHER_KEY = "fedcba9876543210fedcba9876543210"

# Keep a developer's real key out of the test run
os.environ.pop("COOKIE_ENCRYPTION_KEY", None)


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables after each test.

    Ensures tests don't pollute each other's environment.
    """
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def config() -> CookieEncryptionConfig:
    """Random-IV aes256/base64 config, encrypting only on request."""
    return CookieEncryptionConfig(key=TEST_KEY)


@pytest.fixture
def static_iv_config() -> CookieEncryptionConfig:
    """Static-IV aes256/base64 config."""
    return CookieEncryptionConfig(key=TEST_KEY, use_static_iv=True)


@pytest.fixture
def default_encrypt_config() -> CookieEncryptionConfig:
    """Config that encrypts every cookie unless marked plain."""
    return CookieEncryptionConfig(key=TEST_KEY, encrypt_by_default=True)


@pytest.fixture
def keyless_config() -> CookieEncryptionConfig:
    """Config with no key; encryption must fail loudly."""
    return CookieEncryptionConfig()


# =============================================================================
# Log Validation Helpers
# =============================================================================


def assert_error_logged(caplog, pattern: str):
    """
    Helper to assert an ERROR log was captured.

    Args:
        caplog: pytest caplog fixture
        pattern: String pattern to search for in log messages

    Raises:
        AssertionError: If no ERROR log matches the pattern
    """
    assert any(
        pattern in record.message
        for record in caplog.records
        if record.levelno >= logging.ERROR
    ), f"Expected ERROR log matching '{pattern}' not found"


def assert_debug_logged(caplog, pattern: str):
    """
    Helper to assert a DEBUG log was captured.

    Expected warnings (log_expected_warning) land at DEBUG under pytest.
    """
    assert any(
        pattern in record.message
        for record in caplog.records
        if record.levelno == logging.DEBUG
    ), f"Expected DEBUG log matching '{pattern}' not found"
