"""Cookie codec: string cookie values <-> encrypted transport text."""

from src.cookie_encrypter import cipher
from src.cookie_encrypter.errors import DecryptionError
from src.cookie_encrypter.tagging import tag_encrypted


def encrypt_cookie(value: str, config) -> str:
    """Encrypt a cookie string into an (untagged) encrypted frame.

    Raises:
        ConfigurationError: If no key is configured
    """
    return cipher.encrypt(value.encode("utf-8"), config)


def encrypt_for_transport(value: str, config) -> str:
    """Encrypt a cookie string and tag it with e: for the wire."""
    return tag_encrypted(encrypt_cookie(value, config))


def decrypt_cookie(frame: str, config) -> str:
    """Decrypt an encrypted frame back into the original cookie string.

    The caller strips the e: tag first.

    Raises:
        ConfigurationError: If no key is configured
        DecryptionError: If the frame does not decrypt to UTF-8 text
    """
    plaintext = cipher.decrypt(frame, config)
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecryptionError("Decrypted cookie is not valid UTF-8") from e
