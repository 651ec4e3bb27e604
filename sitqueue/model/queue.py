from pydantic import BaseModel

from sitqueue.model.record import MutationRecord

SCHEMA_VERSION = 1
"""Current version of the persisted queue document. The legacy format (a bare
JSON array of records) is version 0."""


class QueueDocument(BaseModel):
    version: int = SCHEMA_VERSION
    records: list[MutationRecord] = []
