"""Offline-first mutation queue for sits and their photos."""

from sitqueue.connectivity import ConnectivityMonitor, ManualNetwork, ProbeNetwork
from sitqueue.factories import get_queue, make_queue
from sitqueue.model import MutationKind, MutationRecord, PhotoPayload
from sitqueue.queue import MutationQueue

__version__ = "0.1.0"

__all__ = [
    "ConnectivityMonitor",
    "ManualNetwork",
    "MutationKind",
    "MutationQueue",
    "MutationRecord",
    "PhotoPayload",
    "ProbeNetwork",
    "get_queue",
    "make_queue",
]
