"""Single-purpose storage interfaces.

Each store does one thing and operates on a single storage URI.
No cross-store awareness or business logic.
"""

from sitqueue.storage.payloads import FilePayloadStore, InlinePayloadStore, PayloadStore
from sitqueue.storage.queue import QueueStore

__all__ = [
    "FilePayloadStore",
    "InlinePayloadStore",
    "PayloadStore",
    "QueueStore",
]
