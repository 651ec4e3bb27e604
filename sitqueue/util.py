import re
import secrets
import time
from typing import Iterable

from sitqueue.core.conventions import ids

DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")
DEFAULT_MIMETYPE = "image/jpeg"


def normalize_photo_data(data: str) -> str:
    """
    Strip an eventual data uri prefix and surrounding whitespace from base64
    encoded image data

    Examples:
        >>> normalize_photo_data(" data:image/png;base64,iVBORw0KGgo= ")
        'iVBORw0KGgo='
    """
    return DATA_URI_PREFIX.sub("", data.strip()).strip()


def to_data_uri(data: str, mimetype: str = DEFAULT_MIMETYPE) -> str:
    """Ensure canonical `data:image/...;base64,` form for base64 image data"""
    return f"data:{mimetype};base64,{normalize_photo_data(data)}"


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def make_suffix(length: int = ids.SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(ids.SUFFIX_ALPHABET) for _ in range(length))


class RecordIdFactory:
    """
    Generate queue record ids that are unique and strictly increasing in
    creation order: a millisecond timestamp (bumped past the last issued one
    on ties or clock skew) plus a random suffix.
    """

    def __init__(self, last_millis: int = 0) -> None:
        self.last_millis = last_millis

    def resume(self, existing: Iterable[str]) -> None:
        """Continue after the newest of the given (loaded) record ids"""
        for value in existing:
            millis = ids.record_millis(value)
            if millis is not None and millis > self.last_millis:
                self.last_millis = millis

    def make(self) -> tuple[str, int]:
        """Get a new id and its creation millis"""
        millis = max(now_millis(), self.last_millis + 1)
        self.last_millis = millis
        return ids.record_id(millis, make_suffix()), millis
