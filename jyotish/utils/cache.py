from __future__ import annotations
from collections import OrderedDict
import threading
from typing import Generic, Optional, TypeVar

V = TypeVar("V")


class ChartStore(Generic[V]):
    """
    Process-local LRU keyed by chart id.

    One instance per app (held in app.extensions); the engine never sees it.
    """
    def __init__(self, capacity: int = 1024):
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self.capacity = capacity
        self.store: "OrderedDict[str, V]" = OrderedDict()
        self.lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        with self.lock:
            if key in self.store:
                self.store.move_to_end(key)
                return self.store[key]
            return None

    def set(self, key: str, value: V) -> None:
        with self.lock:
            self.store[key] = value
            self.store.move_to_end(key)
            if len(self.store) > self.capacity:
                self.store.popitem(last=False)

    def __contains__(self, key: str) -> bool:
        with self.lock:
            return key in self.store

    def __len__(self) -> int:
        with self.lock:
            return len(self.store)
