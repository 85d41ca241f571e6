from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class HostLimiter:
    """Caps concurrent requests per destination host."""

    def __init__(self, max_per_host: int) -> None:
        if max_per_host < 1:
            raise ValueError("max_per_host must be at least 1")
        self._max_per_host = max_per_host
        self._slots: dict[str, threading.BoundedSemaphore] = {}
        self._lock = threading.Lock()

    @property
    def max_per_host(self) -> int:
        return self._max_per_host

    def _semaphore(self, host: str) -> threading.BoundedSemaphore:
        with self._lock:
            semaphore = self._slots.get(host)
            if semaphore is None:
                semaphore = threading.BoundedSemaphore(self._max_per_host)
                self._slots[host] = semaphore
            return semaphore

    @contextmanager
    def slot(self, host: str) -> Iterator[None]:
        """Block until the host has a free slot, hold it for the with-block."""
        with self._semaphore(host):
            yield
