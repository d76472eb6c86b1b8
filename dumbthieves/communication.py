"""Message passing between thieves and the listener's request handling."""

from __future__ import annotations

import queue
import threading

from dumbthieves.messages import Message, MessageType
from dumbthieves.process import Process, ProcessState
from dumbthieves.utils import Logger, msg_type_to_string, state_to_string
from dumbthieves.waitqueue import Request

_POLL_INTERVAL = 0.05


class Network:
    """In-process point-to-point transport with one inbox per rank."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("network size must be at least 1")
        self.size = size
        self._inboxes: list[queue.Queue[tuple[int, bytes]]] = [
            queue.Queue() for _ in range(size)
        ]

    def _check_rank(self, rank: int) -> None:
        if not 0 <= rank < self.size:
            raise ValueError(f"rank {rank} outside network of size {self.size}")

    def send(self, source: int, dest: int, message: Message) -> None:
        """Deliver a message from ``source`` to the inbox of ``dest``."""
        self._check_rank(source)
        self._check_rank(dest)
        self._inboxes[dest].put((source, message.to_bytes()))

    def receive(self, rank: int, timeout: float | None = None) -> tuple[Message, int]:
        """Take the next message for ``rank``; raise TimeoutError if none arrives."""
        self._check_rank(rank)
        try:
            source, data = self._inboxes[rank].get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError(f"no message for P{rank}") from None
        return Message.from_bytes(data), source


class Communicator:
    """Sends, receives and answers requests on behalf of one process."""

    def __init__(self, process: Process, network: Network, logger: Logger) -> None:
        self.process = process
        self.network = network
        self.logger = logger
        # Guards the process state against the listener's request decisions.
        self.lock = threading.RLock()

    def _prefix(self, clock: int) -> str:
        return f"[P{self.process.rank}] (clock: {clock})"

    def send(self, message: Message, dest: int) -> None:
        self.network.send(self.process.rank, dest, message)
        self.logger.log(
            f"{self._prefix(message.lamport_clock)} SENT "
            f"{msg_type_to_string(message.type)} to P{dest}, "
            f"while {state_to_string(self.process.state)}\n"
        )

    def receive(self, timeout: float | None = None) -> tuple[Message, int]:
        """Receive one message, merge its clock, and return it with its sender."""
        message, source = self.network.receive(self.process.rank, timeout)
        clock = self.process.update_clock_upon_recv(message.lamport_clock)
        self.logger.log(
            f"{self._prefix(clock)} RECEIVED "
            f"{msg_type_to_string(message.type)} from P{source}, "
            f"while {state_to_string(self.process.state)}\n"
        )
        return message, source

    def broadcast(self, message: Message, num_processes: int) -> None:
        """Send the same message to every other rank."""
        for dest in range(num_processes):
            if dest != self.process.rank:
                self.send(message, dest)

    def send_ack(self, dest: int) -> None:
        clock = self.process.increment_clock()
        self.send(Message(MessageType.ACK, self.process.rank, clock), dest)

    def handle(self, message: Message, source: int) -> None:
        """Count an ACK, or answer or defer a resource request."""
        process = self.process
        if message.type is MessageType.ACK:
            count = process.add_ack()
            self.logger.log(
                f"{self._prefix(process.lamport_clock)} My ACK: {count}, "
                f"while {state_to_string(process.state)}\n"
            )
            return

        with self.lock:
            if message.type is MessageType.REQ_HOUSE:
                target = process.house_queue
                same_house = process.house_id == message.house_id
                waiting = process.state is ProcessState.WAITING_FOR_HOUSE and same_house
                using = process.state is ProcessState.ROBBING_HOUSE and same_house
            else:
                target = process.fence_queue
                waiting = process.state is ProcessState.WAITING_FOR_FENCE
                using = process.state is ProcessState.HAS_FENCE

            i_have_priority = (process.last_req_clock, process.rank) < (
                message.lamport_clock,
                message.rank,
            )
            if using or (waiting and i_have_priority):
                target.enqueue(
                    Request(message.rank, message.lamport_clock, message.house_id)
                )
            else:
                self.send_ack(source)

    def listen(self, stop: threading.Event) -> None:
        """Receive and handle messages until ``stop`` is set."""
        while not stop.is_set():
            try:
                message, source = self.receive(timeout=_POLL_INTERVAL)
            except TimeoutError:
                continue
            self.handle(message, source)