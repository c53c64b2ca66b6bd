"""The packets of the server list ping exchange."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from .errors import ProtocolError
from .wire import decode_string, encode_string, encode_varint

_U16 = struct.Struct(">H")
_U64 = struct.Struct(">Q")


class State(IntEnum):
    """The state the handshake asks the server to move to."""

    STATUS = 1


@dataclass(frozen=True)
class HandshakePacket:
    """First packet of a status check."""

    protocol_version: int
    server_address: str
    server_port: int
    next_state: State = State.STATUS

    packet_id: ClassVar[int] = 0

    def __post_init__(self) -> None:
        if not 0 <= self.server_port <= 0xFFFF:
            raise ValueError(f"port out of range: {self.server_port}")

    def to_bytes(self) -> bytes:
        """Return the packet body."""
        return (
            encode_varint(self.protocol_version)
            + encode_string(self.server_address)
            + _U16.pack(self.server_port)
            + encode_varint(int(self.next_state))
        )


@dataclass(frozen=True)
class RequestPacket:
    """Second packet of a status check; it has no body."""

    packet_id: ClassVar[int] = 0

    def to_bytes(self) -> bytes:
        """Return the (empty) packet body."""
        return b""


@dataclass(frozen=True)
class PingPacket:
    """Ping carrying a payload the server echoes back."""

    payload: int

    packet_id: ClassVar[int] = 1

    def __post_init__(self) -> None:
        if not 0 <= self.payload < 2**64:
            raise ValueError(f"payload out of range: {self.payload}")

    def to_bytes(self) -> bytes:
        """Return the payload as a big-endian unsigned 64-bit integer."""
        return _U64.pack(self.payload)


@dataclass(frozen=True)
class PongPacket:
    """The server's answer to a ping."""

    payload: int

    EXPECTED_PACKET_ID: ClassVar[int] = 1
    packet_id: ClassVar[int] = 1

    @classmethod
    def from_bytes(cls, data: bytes) -> PongPacket:
        """Parse the packet body."""
        if len(data) < _U64.size:
            raise ProtocolError()
        (payload,) = _U64.unpack_from(data)
        return cls(payload)


@dataclass(frozen=True)
class ResponsePacket:
    """The server's JSON status body."""

    body: str

    EXPECTED_PACKET_ID: ClassVar[int] = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> ResponsePacket:
        """Parse the packet body."""
        body, _ = decode_string(data)
        return cls(body)