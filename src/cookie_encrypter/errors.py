"""Error types for cookie encryption.

These exceptions separate hard configuration failures (which must surface
loudly when encryption is attempted) from per-cookie decoding failures
(which the interceptor swallows so one bad cookie never breaks a request).
"""


class CookieEncryptionError(Exception):
    """Base class for cookie encryption errors."""

    pass


class ConfigurationError(CookieEncryptionError):
    """
    Raised when the cookie encryption configuration is invalid or missing.

    On-Call Note:
        Raised at encrypt time when no key is configured. Check the
        COOKIE_ENCRYPTION_KEY environment variable for the service.
    """

    pass


class CharsetError(CookieEncryptionError, ValueError):
    """Transport text could not be converted to or from bytes."""

    def __init__(self, charset: str, reason: str | None = None):
        self.charset = charset
        self.reason = reason
        message = f"Invalid {charset} text"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DecryptionError(CookieEncryptionError):
    """Encrypted cookie frame could not be decrypted.

    Covers malformed charset segments, ciphertext lengths the mode rejects,
    bad padding, and key or algorithm mismatches. The underlying cause is
    chained via ``__cause__``.
    """

    pass
