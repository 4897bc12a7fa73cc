"""Payload tags for transport cookie strings.

A transport cookie string may carry a two-character prefix declaring how to
interpret the rest:

    j:<json>             structured value serialized as JSON
    e:<encrypted-frame>  encrypted value (the plaintext may itself be j:-tagged)

Anything else is a plain string.
"""

import json
from typing import Any

JSON_TAG = "j"
ENCRYPTED_TAG = "e"
KNOWN_TAGS = frozenset({JSON_TAG, ENCRYPTED_TAG})

# Tag character plus colon
TAG_PREFIX_LENGTH = 2


def tag_json(obj: Any) -> str:
    """Serialize a structured value as a j:-tagged string."""
    return f"{JSON_TAG}:" + json.dumps(obj, separators=(",", ":"))


def tag_encrypted(text: str) -> str:
    """Mark an encrypted frame with the e: tag."""
    return f"{ENCRYPTED_TAG}:{text}"


def detag(value: str) -> tuple[str | None, str]:
    """Split a transport string into (tag, rest).

    Returns:
        ("j" or "e", remainder) when the first two characters are exactly a
        known tag followed by a colon, otherwise (None, value).

    Example:
        >>> detag("e:abc")
        ('e', 'abc')
        >>> detag("plainvalue")
        (None, 'plainvalue')
    """
    if len(value) >= TAG_PREFIX_LENGTH and value[1] == ":" and value[0] in KNOWN_TAGS:
        return value[0], value[TAG_PREFIX_LENGTH:]
    return None, value


def is_encrypted(value: Any) -> bool:
    """True for strings carrying the e: tag."""
    return isinstance(value, str) and detag(value)[0] == ENCRYPTED_TAG


def untag_json(value: Any) -> Any:
    """Parse a j:-tagged string back into its structured value.

    Untagged strings and non-string input are returned unchanged. If the
    JSON body does not parse, the original tagged string is returned; this
    function never raises.
    """
    if not isinstance(value, str):
        return value

    tag, rest = detag(value)
    if tag != JSON_TAG:
        return value

    try:
        return json.loads(rest)
    except ValueError:
        return value
