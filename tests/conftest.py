from pathlib import Path

import pytest

from sitqueue.connectivity import ConnectivityMonitor, ManualNetwork
from sitqueue.factories import get_queue_at
from sitqueue.queue import MutationQueue
from sitqueue.storage.payloads import FilePayloadStore, InlinePayloadStore
from sitqueue.storage.queue import QueueStore


@pytest.fixture(scope="function")
def network() -> ManualNetwork:
    return ManualNetwork(online=False)


@pytest.fixture(scope="function")
def make_tmp_queue(tmp_path: Path, network: ManualNetwork):
    """Build (not initialized) queues on the same location, as a restarted
    app would"""

    def _make(inline: bool = False) -> MutationQueue:
        payloads = InlinePayloadStore() if inline else FilePayloadStore(tmp_path)
        return MutationQueue(
            store=QueueStore(tmp_path),
            payloads=payloads,
            monitor=ConnectivityMonitor(network),
        )

    return _make


@pytest.fixture(scope="function")
async def tmp_queue(make_tmp_queue) -> MutationQueue:
    queue = make_tmp_queue()
    await queue.initialize()
    yield queue
    await queue.cleanup()


@pytest.fixture(autouse=True, scope="function")
def cache_clear():
    get_queue_at.cache_clear()
    yield
