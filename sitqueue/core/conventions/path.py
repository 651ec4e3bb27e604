"""
Path conventions for the offline queue.

The queue metadata and the photo payloads live under well-known keys
relative to their store uri (which may be the same base uri):

::

    [uri]/
        pending_uploads.json            # queue document (all records)
        pending_uploads.json.tmp        # write-then-rename staging copy
        pending_uploads.json.corrupt    # last unreadable queue document

    [payload uri]/
        offline_uploads/
            {record_id}.jpg             # normalized base64 photo data
"""

QUEUE = "pending_uploads.json"
"""Queue document key"""

PAYLOADS = "offline_uploads"
"""Base path for stored photo payloads"""

PAYLOAD_EXT = "jpg"


def payload(record_id: str) -> str:
    """
    Get the payload key for a record.

    Examples:
        >>> payload("pending_1700000000000_abc1234")
        'offline_uploads/pending_1700000000000_abc1234.jpg'
    """
    if not record_id or "/" in record_id:
        raise ValueError(f"Invalid record id: `{record_id}`")
    return f"{PAYLOADS}/{record_id}.{PAYLOAD_EXT}"


def staging(key: str) -> str:
    return f"{key}.tmp"


def corrupt(key: str) -> str:
    return f"{key}.corrupt"
