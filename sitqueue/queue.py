"""
MutationQueue - the offline outbox.

Composes the queue store (record metadata), the payload store (photo data)
and the connectivity monitor. A Sync Coordinator drains it:

```python
queue = get_queue()
await queue.initialize()

if queue.has_work_to_drain():
    for record in queue.list():
        full = await queue.fetch_hydrated(record.id)
        if full is not None:
            await backend.apply(full)  # not part of this package
        await queue.remove(record.id)
```
"""

import asyncio
from enum import StrEnum

from sitqueue.connectivity import ConnectivityMonitor, Listener, Unsubscribe
from sitqueue.core.conventions import token
from sitqueue.core.mixins import LogMixin
from sitqueue.exceptions import NotInitializedError, PayloadError, QueueWriteError
from sitqueue.model import (
    AddAttachment,
    CreateResource,
    DeleteAttachment,
    MutationKind,
    MutationRecord,
    PhotoPayload,
    ReplaceAttachment,
    payload_of,
    with_payload_data,
)
from sitqueue.storage.payloads import PayloadStore
from sitqueue.storage.queue import QueueStore
from sitqueue.util import RecordIdFactory


class QueueState(StrEnum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class MutationQueue(LogMixin):
    """
    Durable FIFO queue of mutations issued while (possibly) offline.

    Every enqueue writes through: the photo payload is stored first, then the
    full queue is persisted. If storing the payload fails, the enqueue raises
    and nothing is queued. Failing to persist the queue document is logged
    only, the in-memory records stay authoritative for this session.

    One instance owns its queue and payload location, obtain it via
    `sitqueue.factories.get_queue` or construct it once at the application
    root and pass it on.

    Eligibility checks (`sitqueue.policy`) are the caller's responsibility,
    the queue accepts every well-formed mutation.
    """

    def __init__(
        self,
        store: QueueStore,
        payloads: PayloadStore,
        monitor: ConnectivityMonitor,
    ) -> None:
        self.store = store
        self.payloads = payloads
        self.monitor = monitor
        self.uri = store.uri
        self.state = QueueState.UNINITIALIZED
        self._records: list[MutationRecord] = []
        self._ids = RecordIdFactory()
        self._initializing: asyncio.Future[None] | None = None

    async def initialize(self) -> None:
        """
        Load the persisted queue and start connectivity tracking. Calling it
        again when ready does nothing, concurrent calls share one load.
        Previous listener registrations are torn down first, so
        initialize/cleanup cycles never leak listeners.
        """
        if self.state == QueueState.READY:
            self.log.info("Already initialized, skipping")
            return
        if self._initializing is None:
            self._initializing = asyncio.ensure_future(self._initialize())
        try:
            await self._initializing
        finally:
            self._initializing = None

    async def _initialize(self) -> None:
        self.log.info("Initializing ...")
        await self.cleanup()
        self.state = QueueState.INITIALIZING
        self._records = await self.store.load()
        self._ids.resume(r.id for r in self._records)
        await self.monitor.start()
        self.state = QueueState.READY
        self.log.info(
            "Initialized", records=len(self._records), online=self.is_online()
        )

    async def cleanup(self) -> None:
        """Stop connectivity tracking and drop all status subscribers"""
        await self.monitor.stop()
        self.state = QueueState.UNINITIALIZED

    # -------------------------------------------------------------------------
    # Enqueue
    # -------------------------------------------------------------------------

    async def enqueue_create(
        self, photo: PhotoPayload, actor_id: str, actor_name: str
    ) -> str:
        """Queue the creation of a new sit with its first photo"""
        self._ensure_ready()
        record_id, created_at = self._ids.make()
        record = CreateResource(
            id=record_id,
            actor_id=actor_id,
            created_at=created_at,
            actor_name=actor_name,
            photo=photo,
        )
        return await self._append(record)

    async def enqueue_add_attachment(
        self,
        photo: PhotoPayload,
        collection_id: str,
        actor_id: str,
        actor_name: str,
    ) -> str:
        """
        Queue adding a photo to an existing sit. Check
        `sitqueue.policy.can_add_attachment` before, this doesn't.
        """
        self._ensure_ready()
        record_id, created_at = self._ids.make()
        record = AddAttachment(
            id=record_id,
            actor_id=actor_id,
            created_at=created_at,
            collection_id=collection_id,
            actor_name=actor_name,
            photo=photo,
        )
        return await self._append(record)

    async def enqueue_replace_attachment(
        self,
        photo: PhotoPayload,
        collection_id: str,
        attachment_id: str,
        actor_id: str,
        actor_name: str,
    ) -> str:
        self._ensure_ready()
        record_id, created_at = self._ids.make()
        record = ReplaceAttachment(
            id=record_id,
            actor_id=actor_id,
            created_at=created_at,
            collection_id=collection_id,
            attachment_id=attachment_id,
            actor_name=actor_name,
            photo=photo,
        )
        return await self._append(record)

    async def enqueue_delete_attachment(self, attachment_id: str, actor_id: str) -> str:
        self._ensure_ready()
        record_id, created_at = self._ids.make()
        record = DeleteAttachment(
            id=record_id,
            actor_id=actor_id,
            created_at=created_at,
            attachment_id=attachment_id,
        )
        return await self._append(record)

    # -------------------------------------------------------------------------
    # Read / remove
    # -------------------------------------------------------------------------

    def list(self, kind: MutationKind | str | None = None) -> tuple[MutationRecord, ...]:
        """
        Get a snapshot of the queued records in insertion order, optionally
        only of the given kind. Photo payloads are not resolved.
        """
        self._ensure_ready()
        if kind is None:
            return tuple(self._records)
        kind = MutationKind(kind)
        return tuple(r for r in self._records if r.kind == kind)

    def get(self, record_id: str) -> MutationRecord | None:
        self._ensure_ready()
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    async def fetch_hydrated(self, record_id: str) -> MutationRecord | None:
        """
        Get the record with its photo data resolved from the payload store.

        If a stored payload can't be resolved anymore, the record is orphaned:
        it is removed from the queue and `None` is returned.
        """
        record = self.get(record_id)
        if record is None:
            return None
        photo = payload_of(record)
        if photo is None:
            return record
        try:
            data = await self.payloads.get(photo.data)
        except PayloadError as e:
            self.log.error(
                f"Removing orphaned record: {e}", record_id=record_id, kind=record.kind
            )
            await self.remove(record_id)
            return None
        return with_payload_data(record, data)

    async def remove(self, record_id: str) -> None:
        """
        Remove a record and delete the payload it owns. Unknown ids are
        ignored.
        """
        record = self.get(record_id)
        if record is None:
            self.log.debug("Record not found, nothing to remove", record_id=record_id)
            return
        photo = payload_of(record)
        if photo is not None and token.is_stored(photo.data):
            await self.payloads.delete(photo.data)
        self._records = [r for r in self._records if r.id != record_id]
        await self._persist()
        self.log.info("Removed", record_id=record_id, kind=record.kind)

    # -------------------------------------------------------------------------
    # Connectivity
    # -------------------------------------------------------------------------

    def is_online(self) -> bool:
        return self.monitor.is_online()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Get notified on online/offline transitions"""
        self._ensure_ready()
        return self.monitor.subscribe(listener)

    def has_work_to_drain(self) -> bool:
        """Online and there are queued records"""
        self._ensure_ready()
        return self.is_online() and len(self._records) > 0

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.uri}, {self.state})>"

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _ensure_ready(self) -> None:
        if self.state != QueueState.READY:
            raise NotInitializedError(f"{self!r} is not initialized")

    async def _append(self, record: MutationRecord) -> str:
        photo = payload_of(record)
        if photo is not None:
            stored = await self.payloads.put(record.id, photo.data)
            record = with_payload_data(record, stored)
        self._records.append(record)
        await self._persist()
        self.log.info("Enqueued", record_id=record.id, kind=record.kind)
        return record.id

    async def _persist(self) -> None:
        try:
            await self.store.save(self._records)
        except QueueWriteError as e:
            self.log.error(
                f"{e}; keeping {len(self._records)} records in memory only",
                records=len(self._records),
            )
