"""
Composition root: build the queue and its collaborators from settings.

```python
from sitqueue.factories import get_queue

queue = get_queue()  # the one instance for the configured location
await queue.initialize()
```
"""

from functools import cache

from anystore.logging import get_logger
from anystore.types import Uri
from anystore.util import ensure_uri

from sitqueue.connectivity import (
    ConnectivityMonitor,
    ManualNetwork,
    NetworkSource,
    ProbeNetwork,
)
from sitqueue.core.settings import Settings
from sitqueue.exceptions import ImproperlyConfigured
from sitqueue.policy import DedupGuard
from sitqueue.queue import MutationQueue
from sitqueue.storage.payloads import FilePayloadStore, InlinePayloadStore, PayloadStore
from sitqueue.storage.queue import QueueStore

log = get_logger(__name__)


def make_payload_store(settings: Settings) -> PayloadStore:
    if settings.payload_tier == "file":
        return FilePayloadStore(settings.payload_uri or settings.uri)
    if settings.payload_tier == "inline":
        return InlinePayloadStore()
    raise ImproperlyConfigured(f"Invalid payload tier: `{settings.payload_tier}`")


def make_network(settings: Settings) -> NetworkSource:
    if settings.probe_host:
        return ProbeNetwork(
            settings.probe_host,
            port=settings.probe_port,
            interval=settings.probe_interval,
            timeout=settings.probe_timeout,
        )
    return ManualNetwork()


def make_guard(settings: Settings | None = None) -> DedupGuard:
    settings = settings or Settings()
    return DedupGuard(
        allowance=settings.add_attachment_allowance,
        proximity_feet=settings.proximity_feet,
    )


def make_queue(
    settings: Settings | None = None, network: NetworkSource | None = None
) -> MutationQueue:
    """
    Build a new, uninitialized queue. Prefer `get_queue` unless the
    application root owns the instance itself.

    Args:
        settings: Settings to use instead of the environment
        network: Reachability source instead of the configured one
    """
    settings = settings or Settings()
    return MutationQueue(
        store=QueueStore(settings.uri),
        payloads=make_payload_store(settings),
        monitor=ConnectivityMonitor(network or make_network(settings)),
    )


def get_queue(uri: Uri | None = None) -> MutationQueue:
    """
    Get the queue for the given (or the configured) location. There is only
    one instance per location and process, as two instances would overwrite
    each other's persisted state.

    Args:
        uri: Queue store uri (default from SITQUEUE_URI setting)

    Returns:
        The (not yet initialized) queue
    """
    return get_queue_at(ensure_uri(uri or Settings().uri))


@cache
def get_queue_at(uri: str) -> MutationQueue:
    """Get the queue for an already resolved location uri"""
    settings = Settings().model_copy(update={"uri": uri})
    log.info("Loading queue", uri=settings.uri, payload_tier=settings.payload_tier)
    return make_queue(settings)
