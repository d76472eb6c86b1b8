"""Messages exchanged between thieves and their fixed-size wire form."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

_WIRE = struct.Struct("<4i")


class MessageType(IntEnum):
    REQ_HOUSE = 0
    REQ_FENCE = 1
    ACK = 2


@dataclass(frozen=True)
class Message:
    """A request or acknowledgement stamped with the sender's Lamport clock."""

    type: MessageType
    rank: int
    lamport_clock: int
    house_id: int = -1

    SIZE = _WIRE.size

    def to_bytes(self) -> bytes:
        return _WIRE.pack(int(self.type), self.rank, self.lamport_clock, self.house_id)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Message":
        """Decode a message; raise ValueError on bad length or unknown type."""
        if len(data) != _WIRE.size:
            raise ValueError(
                f"message must be {_WIRE.size} bytes, got {len(data)}"
            )
        raw_type, rank, clock, house_id = _WIRE.unpack(data)
        try:
            msg_type = MessageType(raw_type)
        except ValueError:
            raise ValueError(f"unknown message type {raw_type}") from None
        return cls(msg_type, rank, clock, house_id)