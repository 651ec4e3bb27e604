"""
Network reachability tracking.

A `NetworkSource` is the platform side: it knows the current reachability and
reports changes to at most one attached callback. The `ConnectivityMonitor`
owns that single registration, suppresses repeated reports of the same state
and fans genuine transitions out to its subscribers.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Callable

from anystore.logging import get_logger

from sitqueue.core.mixins import LogMixin

log = get_logger(__name__)

Listener = Callable[[bool], None]
Unsubscribe = Callable[[], None]


class NetworkSource(ABC):
    """Platform reachability API"""

    @abstractmethod
    async def current(self) -> bool:
        """Get the current reachability"""
        ...

    @abstractmethod
    def attach(self, callback: Listener) -> None:
        """Register the callback that receives reachability reports"""
        ...

    @abstractmethod
    def detach(self) -> None:
        """Remove the registered callback"""
        ...


class ManualNetwork(NetworkSource):
    """
    Reachability reported by the host application, e.g. from browser
    online/offline events or a native reachability plugin bridge.
    """

    def __init__(self, online: bool = True) -> None:
        self.online = online
        self._callbacks: list[Listener] = []

    async def current(self) -> bool:
        return self.online

    def attach(self, callback: Listener) -> None:
        self._callbacks.append(callback)

    def detach(self) -> None:
        self._callbacks.clear()

    @property
    def listener_count(self) -> int:
        return len(self._callbacks)

    def report(self, online: bool) -> None:
        """Push a reachability report (may repeat the current state)"""
        self.online = online
        for callback in list(self._callbacks):
            callback(online)


class ProbeNetwork(NetworkSource):
    """
    Determine reachability by periodically opening a TCP connection to a
    well-known host. Every probe result is reported, the monitor takes care
    of suppressing repeated states.
    """

    def __init__(
        self, host: str, port: int = 443, interval: float = 30, timeout: float = 5
    ) -> None:
        self.host = host
        self.port = port
        self.interval = interval
        self.timeout = timeout
        self._task: asyncio.Task | None = None

    async def probe(self) -> bool:
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port), self.timeout
            )
        except (OSError, asyncio.TimeoutError) as e:
            log.debug(f"Probe failed: {e}", host=self.host, port=self.port)
            return False
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return True

    async def current(self) -> bool:
        return await self.probe()

    def attach(self, callback: Listener) -> None:
        self.detach()
        self._task = asyncio.get_running_loop().create_task(self._run(callback))

    def detach(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self, callback: Listener) -> None:
        while True:
            await asyncio.sleep(self.interval)
            callback(await self.probe())


class ConnectivityMonitor(LogMixin):
    """
    Tracks whether the device is online.

    `start()` registers exactly one listener with the network source, calling
    it again while started does nothing. Subscribers are notified only when
    the reported state differs from the last known one.

    Example:
        ```python
        monitor = ConnectivityMonitor(ManualNetwork(online=False))
        await monitor.start()
        unsubscribe = monitor.subscribe(lambda online: print(online))
        ```
    """

    def __init__(self, source: NetworkSource) -> None:
        self.source = source
        self.online = False
        self.started = False
        self._subscribers: list[Listener] = []

    async def start(self) -> None:
        if self.started:
            self.log.debug("Already started, skipping")
            return
        self.online = await self.source.current()
        self.source.attach(self._on_report)
        self.started = True
        self.log.info("Started", online=self.online)

    async def stop(self) -> None:
        """Detach from the network source and drop all subscribers. Safe to
        call when not started."""
        if self.started:
            self.source.detach()
            self.started = False
            self.log.info("Stopped")
        self._subscribers.clear()

    def is_online(self) -> bool:
        return self.online

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Get notified with the new state on every online/offline transition.

        Returns:
            A function that removes the subscription again
        """
        self._subscribers.append(listener)

        def unsubscribe() -> None:
            if listener in self._subscribers:
                self._subscribers.remove(listener)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _on_report(self, online: bool) -> None:
        if online == self.online:
            self.log.debug("Unchanged network status", online=online)
            return
        self.log.info("Network status changed", online=online, previous=self.online)
        self.online = online
        for listener in list(self._subscribers):
            try:
                listener(online)
            except Exception as e:
                self.log.error(f"Connectivity subscriber failed: {e}", online=online)
