import asyncio
from typing import Any, Callable, TypeVar

from anystore.serialize import Mode
from anystore.store import BaseStore, get_store
from anystore.types import Uri

from sitqueue.core.mixins import LogMixin

T = TypeVar("T")


class BaseStorage(LogMixin):
    """
    Base storage class for a file-like anystore backend with configurable
    serialization mode and handling of non-existing items. Blocking store
    calls are awaited in a worker thread.
    """

    serialization_mode: Mode | None = "raw"
    raise_on_nonexist: bool | None = True
    _store: BaseStore

    def __init__(self, uri: Uri) -> None:
        self.uri = uri
        self._store = get_store(
            uri=uri,
            serialization_mode=self.serialization_mode,
            raise_on_nonexist=self.raise_on_nonexist,
        )

    async def _run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        return await asyncio.to_thread(func, *args, **kwargs)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.uri})>"
