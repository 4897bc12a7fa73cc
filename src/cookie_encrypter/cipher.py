"""Symmetric cipher engine for cookie values.

Frames produced here:

    random IV:  <charset(iv)>:<charset(ciphertext)>
    static IV:  <charset(ciphertext)>

Random-IV mode draws a fresh 16-byte IV from os.urandom for every call.
Static-IV mode reuses a fixed IV to save the IV's bytes in every cookie; to
keep identical values from producing identical ciphertext, the plaintext is
prefixed with 4 random alphanumeric characters which are discarded after
decryption. This weakens ciphertext indistinguishability and is only meant
for low-sensitivity cookie data.

No integrity protection is applied. Tampered frames either fail to decrypt
or decrypt to garbage.

Algorithm names follow OpenSSL: "aes256" and "camellia256" are the CBC
ciphers, and the explicit form "<aes|camellia>-<bits>-<mode>" selects CBC,
CTR, CFB, CFB8 or OFB. Only CBC is padded (PKCS7). A name is accepted only
if the installed OpenSSL backend can build the cipher.
"""

import functools
import os
import re
import secrets
import string
from dataclasses import dataclass

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.decrepit.ciphers import algorithms as decrepit_algorithms
from cryptography.hazmat.decrepit.ciphers import modes as decrepit_modes
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from src.cookie_encrypter import charset as charset_codec
from src.cookie_encrypter.errors import (
    CharsetError,
    ConfigurationError,
    DecryptionError,
)

DEFAULT_ALGORITHM = "aes256"

IV_LENGTH = 16
# ASCII zeros, not NUL bytes; existing static-IV frames depend on it
STATIC_IV = b"0" * IV_LENGTH
STATIC_IV_PREFIX_LENGTH = 4
RANDOM_PREFIX_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits

FRAME_SEPARATOR = ":"

# Both families use a 128-bit block, so every mode takes a 16-byte IV
_FAMILIES = {
    "aes": algorithms.AES,
    "camellia": decrepit_algorithms.Camellia,
}
_MODES = {
    "cbc": modes.CBC,
    "ctr": modes.CTR,
    "cfb": decrepit_modes.CFB,
    "cfb8": decrepit_modes.CFB8,
    "ofb": decrepit_modes.OFB,
}
_PADDED_MODES = frozenset({"cbc"})

_ALGORITHM_PATTERN = re.compile(
    r"^(aes|camellia)-?(128|192|256)(?:-(cbc|ctr|cfb8|cfb|ofb))?$"
)


@dataclass(frozen=True)
class CipherSpec:
    """Resolved cipher algorithm.

    Attributes:
        name: Normalized algorithm name as configured
        family: Block cipher (aes or camellia)
        key_bits: Required key size
        mode: Block cipher mode (cbc, ctr, cfb, cfb8 or ofb)
    """

    name: str
    family: str
    key_bits: int
    mode: str

    @property
    def padded(self) -> bool:
        return self.mode in _PADDED_MODES

    @property
    def key_length(self) -> int:
        return self.key_bits // 8


@functools.lru_cache(maxsize=64)
def resolve_algorithm(name: str) -> CipherSpec:
    """Resolve an OpenSSL-style algorithm name.

    Raises:
        ConfigurationError: If the name is not a supported cipher, or the
            OpenSSL backend cannot build it
    """
    normalized = (name or "").strip().lower()
    match = _ALGORITHM_PATTERN.match(normalized)
    if not match:
        raise ConfigurationError(f"Unsupported cipher algorithm: {name}")
    family, bits, mode = match.groups()
    spec = CipherSpec(
        name=normalized, family=family, key_bits=int(bits), mode=mode or "cbc"
    )

    try:
        _build_cipher(spec, bytes(spec.key_length), bytes(IV_LENGTH)).encryptor()
    except UnsupportedAlgorithm as e:
        raise ConfigurationError(f"Unsupported cipher algorithm: {name}") from e
    return spec


def is_supported_algorithm(name: str) -> bool:
    """Check whether an algorithm name resolves to a supported cipher."""
    try:
        resolve_algorithm(name)
    except ConfigurationError:
        return False
    return True


def random_chars(n: int) -> str:
    """Draw n characters uniformly from the 62-symbol alphanumeric alphabet."""
    return "".join(secrets.choice(RANDOM_PREFIX_ALPHABET) for _ in range(n))


def _build_cipher(spec: CipherSpec, key: bytes, iv: bytes) -> Cipher:
    return Cipher(_FAMILIES[spec.family](key), _MODES[spec.mode](iv))


def _encrypt_bytes(spec: CipherSpec, key: bytes, iv: bytes, plaintext: bytes) -> bytes:
    if spec.padded:
        padder = padding.PKCS7(_FAMILIES[spec.family].block_size).padder()
        plaintext = padder.update(plaintext) + padder.finalize()
    encryptor = _build_cipher(spec, key, iv).encryptor()
    return encryptor.update(plaintext) + encryptor.finalize()


def _decrypt_bytes(spec: CipherSpec, key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    decryptor = _build_cipher(spec, key, iv).decryptor()
    plaintext = decryptor.update(ciphertext) + decryptor.finalize()
    if spec.padded:
        unpadder = padding.PKCS7(_FAMILIES[spec.family].block_size).unpadder()
        plaintext = unpadder.update(plaintext) + unpadder.finalize()
    return plaintext


def encrypt(plaintext: bytes, config) -> str:
    """Encrypt raw bytes into an encrypted frame.

    Args:
        plaintext: Bytes to encrypt
        config: CookieEncryptionConfig

    Returns:
        Encrypted frame text (see module docstring)

    Raises:
        ConfigurationError: If no key is configured, the algorithm is
            unknown, or the key size does not match the algorithm
    """
    key = config.require_key()
    spec = resolve_algorithm(config.algorithm)
    if len(key) != spec.key_length:
        raise ConfigurationError(
            f"{spec.name} requires a {spec.key_length}-byte key, got {len(key)} bytes"
        )

    if config.use_static_iv:
        padded = random_chars(STATIC_IV_PREFIX_LENGTH).encode("ascii") + plaintext
        ciphertext = _encrypt_bytes(spec, key, STATIC_IV, padded)
        return charset_codec.encode(ciphertext, config.charset)

    iv = os.urandom(IV_LENGTH)
    ciphertext = _encrypt_bytes(spec, key, iv, plaintext)
    return (
        charset_codec.encode(iv, config.charset)
        + FRAME_SEPARATOR
        + charset_codec.encode(ciphertext, config.charset)
    )


def decrypt(frame: str, config) -> bytes:
    """Decrypt an encrypted frame back to raw bytes.

    A frame without a separator is treated as static-IV; its 4-character
    random prefix is stripped. Otherwise the frame is split once on the
    first separator into IV and ciphertext.

    Raises:
        ConfigurationError: If no key is configured
        DecryptionError: If the frame is malformed or does not decrypt
            under the configured key and algorithm
    """
    key = config.require_key()
    spec = resolve_algorithm(config.algorithm)
    if len(key) != spec.key_length:
        raise DecryptionError(f"Key size does not match {spec.name}")

    try:
        if FRAME_SEPARATOR not in frame:
            ciphertext = charset_codec.decode(frame, config.charset)
            plaintext = _decrypt_bytes(spec, key, STATIC_IV, ciphertext)
            return plaintext[STATIC_IV_PREFIX_LENGTH:]

        iv_text, _, ciphertext_text = frame.partition(FRAME_SEPARATOR)
        iv = charset_codec.decode(iv_text, config.charset)
        ciphertext = charset_codec.decode(ciphertext_text, config.charset)
        return _decrypt_bytes(spec, key, iv, ciphertext)
    except CharsetError as e:
        raise DecryptionError(f"Malformed {config.charset} frame") from e
    except ValueError as e:
        # Bad key size, IV size, ciphertext length or padding
        raise DecryptionError("Frame does not decrypt under configured cipher") from e
