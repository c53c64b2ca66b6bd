"""Varints, strings and length-prefixed packet framing."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from .errors import InvalidPacketId, InvalidPacketLength, InvalidResponseBody, InvalidVarInt, ProtocolError, ProtocolTimeout

_MAX_VARINT_BYTES = 5


class _Outgoing(Protocol):
    packet_id: int

    def to_bytes(self) -> bytes: ...


class _Incoming(Protocol):
    EXPECTED_PACKET_ID: int

    @classmethod
    def from_bytes(cls, data: bytes) -> Any: ...


_P = TypeVar("_P")


@dataclass(frozen=True)
class RawPacket:
    """A packet ID and its body, ready to be framed for the socket."""

    id: int
    data: bytes = b""

    def encode(self) -> bytes:
        """Return the frame: length varint, ID varint, body."""
        inner = encode_varint(self.id) + bytes(self.data)
        return encode_varint(len(inner)) + inner


def encode_varint(value: int) -> bytes:
    """Encode the low 32 bits of ``value`` as a varint."""
    value &= 0xFFFF_FFFF
    out = bytearray()
    while True:
        low = value & 0x7F
        value >>= 7
        if value:
            out.append(low | 0x80)
        else:
            out.append(low)
            return bytes(out)


def encode_string(text: str) -> bytes:
    """Encode ``text`` as UTF-8 preceded by its byte length as a varint."""
    raw = text.encode("utf-8")
    return encode_varint(len(raw)) + raw


def decode_varint(data: bytes) -> tuple[int, int]:
    """Decode a varint at the start of ``data``; return (value, bytes used)."""
    result = 0
    for count, byte in enumerate(data, start=1):
        result |= (byte & 0x7F) << (7 * (count - 1))
        if count > _MAX_VARINT_BYTES:
            raise InvalidVarInt()
        if not byte & 0x80:
            return result, count
    raise ProtocolError()


def decode_string(data: bytes) -> tuple[str, int]:
    """Decode a length-prefixed string; return (text, bytes used)."""
    length, used = decode_varint(data)
    raw = bytes(data[used : used + length])
    if len(raw) < length:
        raise ProtocolError()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidResponseBody() from exc
    return text, used + length


async def _read_exact(reader: asyncio.StreamReader, size: int) -> bytes:
    try:
        return await reader.readexactly(size)
    except (asyncio.IncompleteReadError, OSError) as exc:
        raise ProtocolError() from exc


async def read_varint(reader: asyncio.StreamReader) -> int:
    """Read one varint from a stream."""
    buffer = bytearray()
    while True:
        buffer += await _read_exact(reader, 1)
        if len(buffer) > _MAX_VARINT_BYTES:
            raise InvalidVarInt()
        if not buffer[-1] & 0x80:
            return decode_varint(buffer)[0]


async def read_string(reader: asyncio.StreamReader) -> str:
    """Read one length-prefixed UTF-8 string from a stream."""
    length = await read_varint(reader)
    raw = await _read_exact(reader, length)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidResponseBody() from exc


async def read_packet(reader: asyncio.StreamReader, packet_type: type[_P]) -> _P:
    """Read a framed packet and build ``packet_type`` from its body."""
    length = await read_varint(reader)
    if length == 0:
        raise InvalidPacketLength()

    packet_id = await read_varint(reader)
    expected = packet_type.EXPECTED_PACKET_ID  # type: ignore[attr-defined]
    if packet_id != expected:
        raise InvalidPacketId(expected=expected, actual=packet_id)

    body = await _read_exact(reader, length - 1)
    return packet_type.from_bytes(body)  # type: ignore[attr-defined]


async def read_packet_with_timeout(
    reader: asyncio.StreamReader, packet_type: type[_P], timeout: float
) -> _P:
    """Like :func:`read_packet`, giving up after ``timeout`` seconds."""
    try:
        return await asyncio.wait_for(read_packet(reader, packet_type), timeout)
    except asyncio.TimeoutError as exc:
        raise ProtocolTimeout() from exc


async def write_packet(writer: asyncio.StreamWriter, packet: _Outgoing) -> None:
    """Frame ``packet`` and write it to the stream."""
    frame = RawPacket(packet.packet_id, packet.to_bytes()).encode()
    try:
        writer.write(frame)
        await writer.drain()
    except OSError as exc:
        raise ProtocolError() from exc


async def write_packet_with_timeout(
    writer: asyncio.StreamWriter, packet: _Outgoing, timeout: float
) -> None:
    """Like :func:`write_packet`, giving up after ``timeout`` seconds."""
    try:
        await asyncio.wait_for(write_packet(writer, packet), timeout)
    except asyncio.TimeoutError as exc:
        raise ProtocolTimeout() from exc