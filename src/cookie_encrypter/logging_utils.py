"""
Logging Utilities
=================

Secure logging helpers for the cookie encryption layer.

Cookie names come straight from client-controlled request headers, so they
are sanitized before reaching a log record (CWE-117). Cookie values, keys and
exception messages are never logged: a decryption error message can echo
attacker-supplied ciphertext.

For Developers:
    Use log_expected_warning() for failures that happen in normal operation
    (tampered or stale cookies that no longer decrypt). When running under
    pytest these are downgraded to DEBUG to keep test output clean.

    Real misconfiguration (missing key, unknown algorithm) should use
    logger.error() directly.
"""

import logging
import re
import sys
from typing import Any

# Maximum length for logged user input to prevent log flooding
MAX_LOG_INPUT_LENGTH = 200


def sanitize_for_log(value: Any, max_length: int = MAX_LOG_INPUT_LENGTH) -> str:
    """
    Sanitize a value for safe logging by removing CRLF and limiting length.

    Args:
        value: Value to sanitize (will be converted to string)
        max_length: Maximum length of output (default: 200)

    Returns:
        Sanitized string safe for logging

    Example:
        >>> sanitize_for_log("session\\n[FAKE] Admin logged in")
        'session [FAKE] Admin logged in'
    """
    text = str(value)

    # Remove CRLF characters to prevent log injection
    text = text.replace("\r", " ").replace("\n", " ").replace("\t", " ")

    # Remove other control characters
    text = re.sub(r"[\x00-\x1f\x7f-\x9f]", " ", text)

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text


def get_safe_error_info(exception: Exception) -> dict[str, str]:
    """
    Extract safe information from an exception for logging.

    Returns only the exception type, NOT the message. Decryption errors
    may carry fragments of the (untrusted) cookie value.

    Example:
        >>> try:
        ...     raise ValueError("Invalid padding bytes.")
        ... except Exception as e:
        ...     get_safe_error_info(e)
        {'error_type': 'ValueError'}
    """
    return {"error_type": type(exception).__name__}


def _is_running_in_pytest() -> bool:
    """Check if code is running inside pytest."""
    return "pytest" in sys.modules


def log_expected_warning(logger: logging.Logger, message: str, **kwargs) -> None:
    """
    Log warnings that are expected during normal operation.

    When running in pytest, these are logged at DEBUG level to prevent
    log pollution when testing error handling paths. Otherwise they are
    logged at WARNING level.

    Args:
        logger: The logger instance to use
        message: The warning message
        **kwargs: Additional arguments (e.g., extra={})
    """
    if _is_running_in_pytest():
        logger.debug(message, **kwargs)
    else:
        logger.warning(message, **kwargs)
