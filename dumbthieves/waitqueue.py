"""Bounded queue of deferred resource requests, ordered by Lamport clock then rank."""

from __future__ import annotations

import threading
from bisect import insort_right
from dataclasses import dataclass
from typing import Iterator

QUEUE_SIZE = 16


@dataclass(frozen=True)
class Request:
    """A request from another process that is waiting for our acknowledgement."""

    rank: int
    lamport_clock: int
    house_id: int = -1

    @property
    def priority(self) -> tuple[int, int]:
        """Ordering key: lower clock first, ties broken by lower rank."""
        return (self.lamport_clock, self.rank)


class QueueFullError(Exception):
    """Raised when a request is added to a queue that is already at capacity."""


class RequestQueue:
    """Thread-safe priority queue of requests with a fixed capacity.

    Requests with equal priority keep their arrival order.
    """

    def __init__(self, capacity: int = QUEUE_SIZE) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._items: list[Request] = []
        self._lock = threading.Lock()

    def enqueue(self, request: Request) -> None:
        """Insert a request in priority order; raise QueueFullError if full."""
        with self._lock:
            if len(self._items) >= self.capacity:
                raise QueueFullError(
                    f"queue is full ({self.capacity} requests)"
                )
            insort_right(self._items, request, key=lambda r: r.priority)

    def dequeue(self) -> Request:
        """Remove and return the request with the highest priority."""
        with self._lock:
            if not self._items:
                raise IndexError("dequeue from an empty queue")
            return self._items.pop(0)

    def is_empty(self) -> bool:
        with self._lock:
            return not self._items

    def drain(self) -> Iterator[Request]:
        """Yield and remove requests in priority order until the queue is empty."""
        while True:
            with self._lock:
                if not self._items:
                    return
                request = self._items.pop(0)
            yield request

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[Request]:
        with self._lock:
            snapshot = list(self._items)
        return iter(snapshot)