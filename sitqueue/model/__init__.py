from sitqueue.model.photo import PhotoPayload
from sitqueue.model.queue import SCHEMA_VERSION, QueueDocument
from sitqueue.model.record import (
    AddAttachment,
    CreateResource,
    DeleteAttachment,
    MutationKind,
    MutationRecord,
    RecordAdapter,
    ReplaceAttachment,
    payload_of,
    with_payload_data,
)
from sitqueue.model.resource import Attachment, Location, Sit

__all__ = [
    "AddAttachment",
    "Attachment",
    "CreateResource",
    "DeleteAttachment",
    "Location",
    "MutationKind",
    "MutationRecord",
    "PhotoPayload",
    "QueueDocument",
    "RecordAdapter",
    "ReplaceAttachment",
    "SCHEMA_VERSION",
    "Sit",
    "payload_of",
    "with_payload_data",
]
