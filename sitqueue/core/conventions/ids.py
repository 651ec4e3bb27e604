"""
Identifier conventions.

Queued records: `pending_{epoch millis, 13 digits}_{7 base36 chars}`

Attachments that only exist on this device (never confirmed by the backend)
carry the `temp_` prefix.
"""

PENDING = "pending_"
"""Prefix for queued record ids"""

LOCAL = "temp_"
"""Prefix for local-only resource and attachment ids"""

SUFFIX_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SUFFIX_LENGTH = 7


def record_id(millis: int, suffix: str) -> str:
    return f"{PENDING}{millis:013d}_{suffix}"


def record_millis(value: str) -> int | None:
    """Get the creation millis encoded in a record id, if it is one"""
    if not value.startswith(PENDING):
        return None
    millis, _, _ = value[len(PENDING) :].partition("_")
    try:
        return int(millis)
    except ValueError:
        return None


def is_local(value: str) -> bool:
    return value.startswith(LOCAL)
