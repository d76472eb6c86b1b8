"""House selection, name formatting and dual-target logging."""

from __future__ import annotations

import sys
import threading
from typing import TextIO

from dumbthieves.messages import MessageType
from dumbthieves.process import Process, ProcessState

_MSG_NAMES = {
    MessageType.ACK: "MSG_ACK",
    MessageType.REQ_HOUSE: "MSG_REQ_HOUSE",
    MessageType.REQ_FENCE: "MSG_REQ_FENCE",
}


def select_house(process: Process, num_houses: int) -> int:
    """Pick the 1-based house number a process goes for next."""
    if num_houses <= 0:
        raise ValueError("num_houses must be positive")
    return (process.rank * (process.houses_visited_count + 1)) % num_houses + 1


def state_to_string(state: ProcessState | int) -> str:
    try:
        return ProcessState(state).name
    except ValueError:
        return "UNKNOWN"


def msg_type_to_string(msg_type: MessageType | int) -> str:
    try:
        return _MSG_NAMES[MessageType(msg_type)]
    except ValueError:
        return "UNKNOWN"


class Logger:
    """Writes each line to a terminal stream and, if given, to a log file."""

    def __init__(self, stream: TextIO | None = None, log_file: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.log_file = log_file
        self._lock = threading.Lock()

    def log(self, text: str) -> None:
        with self._lock:
            self.stream.write(text)
            self.stream.flush()
            if self.log_file is not None:
                self.log_file.write(text)
                self.log_file.flush()