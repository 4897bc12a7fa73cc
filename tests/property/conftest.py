"""Hypothesis strategies for property testing.

Provides reusable composite strategies for generating cookie values and
encryption configurations.
"""

from hypothesis import strategies as st

from src.cookie_encrypter.config import CookieEncryptionConfig

KEYS_BY_ALGORITHM = {
    "aes128": 16,
    "aes192": 24,
    "aes256": 32,
    "aes-256-ctr": 32,
    "aes-128-cfb": 16,
    "aes-192-ofb": 24,
    "camellia256": 32,
}

# Any text that can be UTF-8 encoded (no lone surrogates)
cookie_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)), max_size=200
)

json_values = st.recursive(
    st.none()
    | st.booleans()
    | st.integers(min_value=-(2**53), max_value=2**53)
    | st.text(max_size=20),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=10), children, max_size=4),
    max_leaves=10,
)


@st.composite
def encryption_config(draw, use_static_iv=None):
    """Generate a valid CookieEncryptionConfig.

    Args:
        draw: Hypothesis draw function
        use_static_iv: Pin the IV mode, or None to draw it

    Returns:
        CookieEncryptionConfig with a key sized for its algorithm
    """
    algorithm = draw(st.sampled_from(sorted(KEYS_BY_ALGORITHM)))
    key = draw(
        st.binary(
            min_size=KEYS_BY_ALGORITHM[algorithm],
            max_size=KEYS_BY_ALGORITHM[algorithm],
        )
    )
    if use_static_iv is None:
        use_static_iv = draw(st.booleans())
    return CookieEncryptionConfig(
        key=key,
        algorithm=algorithm,
        charset=draw(st.sampled_from(["base64", "hex", "base64url"])),
        use_static_iv=use_static_iv,
    )
