"""
Payload references.

A record's photo data is either carried inline (the encoded image itself)
or replaced by a token that points into the payload store once the data was
durably written there.
"""

STORED = "file:"
"""Prefix of a stored payload token"""


def make(record_id: str) -> str:
    return f"{STORED}{record_id}"


def is_stored(value: str | None) -> bool:
    return bool(value) and value.startswith(STORED)


def token_id(token: str) -> str:
    """
    Get the record id a stored token points to.

    Raises:
        ValueError: If the value is not a stored token
    """
    if not is_stored(token):
        raise ValueError(f"Not a stored payload token: `{token[:32]}`")
    return token[len(STORED) :]
