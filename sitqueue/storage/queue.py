"""QueueStore - ordered mutation record storage."""

import json
from typing import Any, Sequence

from anystore.store.fs import Store
from anystore.types import Uri
from pydantic import ValidationError

from sitqueue.core.conventions import path
from sitqueue.exceptions import QueueWriteError
from sitqueue.model import SCHEMA_VERSION, MutationRecord, QueueDocument, RecordAdapter
from sitqueue.storage.base import BaseStorage


class QueueStore(BaseStorage):
    """
    Durable ordered storage of the queued mutation records.

    The whole collection is one JSON document that is rewritten completely
    on every save. On filesystem backends the document is written next to
    the target first and then moved over it, so the stored queue is always
    either the previous or the new version.

    Layout: pending_uploads.json

    Loading never raises: a missing or unreadable document yields an empty
    queue.
    """

    raise_on_nonexist = False

    def __init__(self, uri: Uri, key: str = path.QUEUE) -> None:
        super().__init__(uri)
        self.key = key

    async def load(self) -> list[MutationRecord]:
        """
        Load the records in their stored order. Invalid single records are
        skipped, an unreadable document is set aside to `<key>.corrupt`.
        """
        try:
            raw = await self._run(self._store.get, self.key)
        except Exception as e:
            self.log.error(f"Could not read queue `{self.key}`: {e}", key=self.key)
            return []
        if raw is None:
            self.log.info("No queue found", key=self.key)
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            self.log.error(f"Invalid queue document: {e}", key=self.key)
            await self._set_aside(raw)
            return []

        items = self._unpack(data)
        if items is None:
            self.log.error("Invalid queue document structure", key=self.key)
            await self._set_aside(raw)
            return []

        records: list[MutationRecord] = []
        seen: set[str] = set()
        for item in items:
            try:
                record = RecordAdapter.validate_python(item)
            except ValidationError as e:
                self.log.warning(
                    f"Skipping invalid record: {e.error_count()} errors",
                    key=self.key,
                    record_id=item.get("id") if isinstance(item, dict) else None,
                )
                continue
            if record.id in seen:
                self.log.warning("Skipping duplicate record", record_id=record.id)
                continue
            seen.add(record.id)
            records.append(record)
        self.log.info("Loaded queue", key=self.key, records=len(records))
        return records

    async def save(self, records: Sequence[MutationRecord]) -> None:
        """
        Replace the stored queue with the given records.

        Raises:
            QueueWriteError: The document could not be written
        """
        doc = QueueDocument(version=SCHEMA_VERSION, records=list(records))
        data = doc.model_dump_json(by_alias=True).encode()
        try:
            await self._run(self._replace, data)
        except Exception as e:
            raise QueueWriteError(f"Could not write queue `{self.key}`: {e}") from e
        self.log.debug("Saved queue", key=self.key, records=len(records))

    def _replace(self, data: bytes) -> None:
        if isinstance(self._store, Store):
            staging = path.staging(self.key)
            self._store.put(staging, data)
            self._store._fs.mv(
                self._store.get_key(staging), self._store.get_key(self.key)
            )
        else:
            self._store.put(self.key, data)

    def _unpack(self, data: Any) -> list[Any] | None:
        if isinstance(data, list):  # legacy: bare array, version 0
            return data
        if isinstance(data, dict) and isinstance(data.get("records"), list):
            version = data.get("version", 0)
            if not isinstance(version, int) or version > SCHEMA_VERSION:
                self.log.error(
                    f"Unsupported queue version: `{version}`",
                    key=self.key,
                    supported=SCHEMA_VERSION,
                )
                return None
            return data["records"]
        return None

    async def _set_aside(self, raw: bytes) -> None:
        key = path.corrupt(self.key)
        try:
            await self._run(self._store.put, key, raw)
            self.log.warning(f"Moved unreadable queue to `{key}`", key=self.key)
        except Exception as e:
            self.log.error(f"Could not keep unreadable queue: {e}", key=self.key)
