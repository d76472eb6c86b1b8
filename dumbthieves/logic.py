"""The thieves' main loop: pick a house, rob it, fence the loot, rest."""

from __future__ import annotations

import itertools
import random
import threading
import time
from contextlib import ExitStack
from pathlib import Path
from typing import Callable, TextIO

from dumbthieves.communication import Communicator, Network
from dumbthieves.messages import Message, MessageType
from dumbthieves.process import Process, ProcessState
from dumbthieves.utils import Logger, select_house


def _default_sleep(seconds: float) -> None:
    time.sleep(seconds)


class Thief:
    """Runs the robbing cycle of one process."""

    def __init__(
        self,
        process: Process,
        communicator: Communicator,
        num_houses: int,
        num_fences: int,
        num_processes: int,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        if num_houses <= 0:
            raise ValueError("num_houses must be positive")
        if num_processes < 1:
            raise ValueError("num_processes must be at least 1")
        self.process = process
        self.communicator = communicator
        self.num_houses = num_houses
        self.num_fences = num_fences
        self.num_processes = num_processes
        self._rng = rng if rng is not None else random.Random()
        self._sleep = sleep if sleep is not None else _default_sleep

    def _log(self, text: str) -> None:
        self.communicator.logger.log(text)

    def _request(self, msg_type: MessageType, house_id: int, state: ProcessState) -> None:
        process = self.process
        with self.communicator.lock:
            clock = process.increment_clock()
            process.last_req_clock = clock
            process.reset_acks()
            self.communicator.broadcast(
                Message(msg_type, process.rank, clock, house_id), self.num_processes
            )
            process.state = state

    def run_round(self) -> int:
        """Do one full job and return the house that was robbed."""
        process = self.process
        rank = process.rank
        lock = self.communicator.lock

        house = select_house(process, self.num_houses)
        process.house_id = house
        clock = process.increment_clock()
        self._log(f"[P{rank}] (clock: {clock}) SELECTED house: {house}\n")

        self._request(MessageType.REQ_HOUSE, house, ProcessState.WAITING_FOR_HOUSE)
        process.wait_for_acks(self.num_processes - 1)

        with lock:
            process.state = ProcessState.ROBBING_HOUSE
        clock = process.increment_clock()
        self._log(f"[P{rank}] (clock: {clock}) ENTERING house: {house}\n")
        self._sleep(self._rng.randint(1, 2))

        self._request(MessageType.REQ_FENCE, -1, ProcessState.WAITING_FOR_FENCE)
        process.wait_for_acks(self.num_processes - self.num_fences)

        with lock:
            process.state = ProcessState.HAS_FENCE
        self._log(f"[P{rank}] (clock: {process.lamport_clock}) USING fence \n")

        with lock:
            self.leave_critical_sections()
            process.houses_visited_count += 1
            self._log(
                f"[P{rank}] (clock: {process.lamport_clock}) "
                f"FINISHED job {process.houses_visited_count}\n"
            )
            process.state = ProcessState.RESTING
        self._sleep(self._rng.randint(1, 3))
        return house

    def run(self, rounds: int | None = None) -> list[int]:
        """Run ``rounds`` jobs, or forever when ``rounds`` is None."""
        counter = itertools.count() if rounds is None else range(rounds)
        return [self.run_round() for _ in counter]

    def leave_critical_sections(self) -> None:
        """Acknowledge every deferred house and fence request."""
        process = self.process
        with self.communicator.lock:
            clock = process.increment_clock()
            for waiting_queue in (process.house_queue, process.fence_queue):
                for request in waiting_queue.drain():
                    self.communicator.send(
                        Message(MessageType.ACK, process.rank, clock, -1), request.rank
                    )


def run_simulation(
    num_processes: int,
    num_houses: int,
    num_fences: int,
    rounds: int | None = None,
    log_dir: str | Path = "logs",
    stream: TextIO | None = None,
) -> list[Process]:
    """Run all thieves in threads; each writes logs/log_<rank>.txt."""
    if num_processes < 1:
        raise ValueError("num_processes must be at least 1")
    if num_houses <= 0:
        raise ValueError("num_houses must be positive")
    if rounds is not None and rounds < 0:
        raise ValueError("rounds must not be negative")

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    network = Network(num_processes)
    stop = threading.Event()
    seed = time.time()

    with ExitStack() as stack:
        thieves = []
        loggers = []
        for rank in range(num_processes):
            log_file = stack.enter_context(
                open(log_path / f"log_{rank}.txt", "w", encoding="utf-8")
            )
            logger = Logger(stream, log_file)
            process = Process(rank)
            communicator = Communicator(process, network, logger)
            thieves.append(
                Thief(
                    process,
                    communicator,
                    num_houses,
                    num_fences,
                    num_processes,
                    rng=random.Random(seed + rank),
                )
            )
            loggers.append(logger)

        listeners = [
            threading.Thread(target=t.communicator.listen, args=(stop,), daemon=True)
            for t in thieves
        ]
        workers = [
            threading.Thread(target=t.run, args=(rounds,), daemon=True) for t in thieves
        ]
        for thread in listeners + workers:
            thread.start()
        try:
            for thread in workers:
                thread.join()
        finally:
            stop.set()
            for thread in listeners:
                thread.join()

        loggers[0].log("All processes completed their work\n")
    return [t.process for t in thieves]