"""Charset codec: bytes <-> transport-safe cookie text.

"Charset" here is a binary-to-text encoding in the OpenSSL sense
(base64, hex), not a character set for decoding text. Any text codec known
to Python's ``codecs`` registry (e.g. ``latin-1``) is also accepted by name.
"""

import base64
import binascii
import codecs
import functools
from collections.abc import Callable

from src.cookie_encrypter.errors import CharsetError

DEFAULT_CHARSET = "base64"


def _b64decode(text: str) -> bytes:
    return base64.b64decode(text, validate=True)


def _b64url_encode(data: bytes) -> str:
    # Unpadded on encode; padding optional on decode
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.b64decode(padded, altchars=b"-_", validate=True)


# Binary-to-text encodings, keyed by normalized name
_BINARY_CHARSETS: dict[str, tuple[Callable[[bytes], str], Callable[[str], bytes]]] = {
    "base64": (lambda data: base64.b64encode(data).decode("ascii"), _b64decode),
    "base64url": (_b64url_encode, _b64url_decode),
    "hex": (lambda data: data.hex(), binascii.unhexlify),
}


def _normalize(charset: str) -> str:
    return charset.strip().lower().replace("_", "").replace("-", "")


# Every ordered byte pair, so escape-style codecs are caught too
_BYTE_PAIRS = bytes(
    byte for first in range(256) for second in range(256) for byte in (first, second)
)


@functools.lru_cache(maxsize=32)
def _is_byte_transparent(name: str) -> bool:
    """True if the codec maps each byte to one character and back losslessly."""
    try:
        text = _BYTE_PAIRS.decode(name)
        return len(text) == len(_BYTE_PAIRS) and text.encode(name) == _BYTE_PAIRS
    except ValueError:
        return False


def _text_codec(charset: str) -> codecs.CodecInfo | None:
    """Look up a str<->bytes codec able to carry arbitrary ciphertext.

    Bytes-to-bytes codecs (zlib), and text codecs that cannot represent
    every byte value (utf-8, ascii), are not usable here.
    """
    try:
        info = codecs.lookup(charset)
    except LookupError:
        return None
    if not getattr(info, "_is_text_encoding", True):
        return None
    if not _is_byte_transparent(info.name):
        return None
    return info


def is_supported(charset: str) -> bool:
    """Check whether a charset name can be used for cookie transport."""
    if not charset:
        return False
    if _normalize(charset) in _BINARY_CHARSETS:
        return True
    return _text_codec(charset) is not None


def encode(data: bytes, charset: str = DEFAULT_CHARSET) -> str:
    """Encode raw bytes as transport text.

    Raises:
        CharsetError: If the charset is unknown or cannot represent the data.
    """
    binary = _BINARY_CHARSETS.get(_normalize(charset))
    if binary is not None:
        return binary[0](data)

    if _text_codec(charset) is None:
        raise CharsetError(charset, "unsupported charset")
    try:
        return data.decode(charset)
    except UnicodeDecodeError as e:
        raise CharsetError(charset, "bytes not representable") from e


def decode(text: str, charset: str = DEFAULT_CHARSET) -> bytes:
    """Decode transport text back to raw bytes.

    Raises:
        CharsetError: If the text is not valid for the charset.
    """
    binary = _BINARY_CHARSETS.get(_normalize(charset))
    if binary is not None:
        try:
            return binary[1](text)
        except (binascii.Error, ValueError) as e:
            raise CharsetError(charset, "malformed text") from e

    if _text_codec(charset) is None:
        raise CharsetError(charset, "unsupported charset")
    try:
        return text.encode(charset)
    except UnicodeEncodeError as e:
        raise CharsetError(charset, "characters not representable") from e
