"""PayloadStore - photo data storage, separate from the queue metadata."""

from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import Generator

from anystore.exceptions import DoesNotExist

from sitqueue.core.conventions import path, token
from sitqueue.exceptions import PayloadReadError, PayloadWriteError
from sitqueue.storage.base import BaseStorage
from sitqueue.util import normalize_photo_data, to_data_uri


class PayloadStore(ABC):
    """
    Storage port for photo payloads.

    `put` returns the value a queued record keeps in place of the photo data,
    `get` turns such a value back into consumable image data. Callers always
    round-trip through both and never need to know which tier is in use.
    """

    @abstractmethod
    async def put(self, record_id: str, data: str) -> str:
        """
        Store photo data owned by the given record.

        Raises:
            PayloadWriteError: The data could not be stored. Nothing is left
                behind in the store.
        """
        ...

    @abstractmethod
    async def get(self, value: str) -> str:
        """
        Resolve a value previously returned by `put`

        Raises:
            PayloadReadError: The data could not be resolved
        """
        ...

    @abstractmethod
    async def delete(self, value: str) -> None:
        """Delete stored data (best-effort, never raises)"""
        ...


class FilePayloadStore(BaseStorage, PayloadStore):
    """
    Stores each payload as its own file in an anystore backend and hands out
    `file:<record id>` tokens.

    Layout: offline_uploads/{record_id}.jpg

    Files contain the normalized (prefix-stripped) base64 data, `get` returns
    it as `data:image/jpeg;base64,...` uri.
    """

    async def put(self, record_id: str, data: str) -> str:
        key = path.payload(record_id)
        clean = normalize_photo_data(data)
        try:
            await self._run(self._store.put, key, clean.encode())
        except Exception as e:
            self.log.error(
                f"Could not store payload `{key}`: {e}", record_id=record_id
            )
            await self._discard(key)
            raise PayloadWriteError(
                f"Could not store payload for `{record_id}`"
            ) from e
        self.log.debug("Stored payload", record_id=record_id, size=len(clean))
        return token.make(record_id)

    async def get(self, value: str) -> str:
        if not token.is_stored(value):
            return value
        key = self._key(value)
        try:
            raw = await self._run(self._store.get, key)
            data = normalize_photo_data(raw.decode())
        except (DoesNotExist, OSError, UnicodeDecodeError) as e:
            raise PayloadReadError(f"Could not read payload `{value}`") from e
        if not data:
            raise PayloadReadError(f"Empty payload `{value}`")
        return to_data_uri(data)

    async def delete(self, value: str) -> None:
        if not token.is_stored(value):
            return
        try:
            key = self._key(value)
        except PayloadReadError as e:
            self.log.warning(f"Not deleting payload: {e}")
            return
        await self._discard(key)

    async def exists(self, value: str) -> bool:
        if not token.is_stored(value):
            return False
        try:
            key = self._key(value)
        except PayloadReadError:
            return False
        return await self._run(self._store.exists, key)

    def iterate_ids(self) -> Generator[str, None, None]:
        """Iterate the record ids that currently own a stored payload"""
        for key in self._store.iterate_keys(prefix=path.PAYLOADS):
            yield PurePosixPath(key).stem

    def _key(self, value: str) -> str:
        """
        Raises:
            PayloadReadError: If the token doesn't point to a valid payload key
        """
        try:
            return path.payload(token.token_id(value))
        except ValueError as e:
            raise PayloadReadError(f"Invalid payload token `{value[:64]}`") from e

    async def _discard(self, key: str) -> None:
        try:
            if await self._run(self._store.exists, key):
                await self._run(self._store.delete, key)
                self.log.debug("Deleted payload", key=key)
        except Exception as e:
            self.log.warning(f"Could not delete payload `{key}`: {e}", key=key)


class InlinePayloadStore(PayloadStore):
    """
    For platforms without a file store: photo data stays inline in the queued
    record, so `put` and `get` hand the value through unchanged.
    """

    async def put(self, record_id: str, data: str) -> str:
        return data

    async def get(self, value: str) -> str:
        if token.is_stored(value):
            raise PayloadReadError(f"No payload store for `{value}`")
        return value

    async def delete(self, value: str) -> None:
        return None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
