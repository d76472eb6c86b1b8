"""State of one thief process: Lamport clock, state machine and acknowledgements."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import IntEnum

from dumbthieves.waitqueue import RequestQueue


class ProcessState(IntEnum):
    RESTING = 0
    WAITING_FOR_HOUSE = 1
    ROBBING_HOUSE = 2
    WAITING_FOR_FENCE = 3
    HAS_FENCE = 4


@dataclass
class Process:
    """A thief's shared state, accessed by its main loop and its listener."""

    rank: int
    state: ProcessState = ProcessState.RESTING
    lamport_clock: int = 0
    last_req_clock: int = 0
    house_id: int = -1
    ack_count: int = 0
    houses_visited_count: int = 0
    house_queue: RequestQueue = field(default_factory=RequestQueue)
    fence_queue: RequestQueue = field(default_factory=RequestQueue)
    _cond: threading.Condition = field(
        default_factory=threading.Condition, repr=False, compare=False
    )

    def update_clock_upon_recv(self, received_clock: int) -> int:
        """Merge a received clock value and tick; return the new clock."""
        with self._cond:
            self.lamport_clock = max(self.lamport_clock, received_clock) + 1
            return self.lamport_clock

    def increment_clock(self) -> int:
        """Tick the clock once and return the new value."""
        with self._cond:
            self.lamport_clock += 1
            return self.lamport_clock

    def reset_acks(self) -> None:
        with self._cond:
            self.ack_count = 0

    def add_ack(self) -> int:
        """Count one received acknowledgement and wake any waiter."""
        with self._cond:
            self.ack_count += 1
            self._cond.notify_all()
            return self.ack_count

    def wait_for_acks(self, minimum: int, timeout: float | None = None) -> bool:
        """Block until at least ``minimum`` acks arrived; False on timeout."""
        with self._cond:
            return self._cond.wait_for(
                lambda: self.ack_count >= minimum, timeout=timeout
            )