"""Client for the server list ping: status query and ping."""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass, replace
from datetime import timedelta

from .errors import FailedToConnect, MismatchedPayload, ProtocolError, ServerError, ServerProtocolError
from .packets import HandshakePacket, PingPacket, PongPacket, RequestPacket, ResponsePacket
from .status_data import StatusResponse
from .wire import read_packet_with_timeout, write_packet_with_timeout

LATEST_PROTOCOL_VERSION = 764
DEFAULT_PORT = 25565
DEFAULT_TIMEOUT = 2.0


async def _close_writer(writer: asyncio.StreamWriter) -> None:
    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass


@dataclass(frozen=True)
class ConnectionConfig:
    """Settings for a server list ping connection."""

    address: str
    protocol_version: int = LATEST_PROTOCOL_VERSION
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 0xFFFF:
            raise ValueError(f"port out of range: {self.port}")

    @classmethod
    def build(cls, address: str) -> ConnectionConfig:
        """Start a configuration with the latest protocol, default port and timeout."""
        return cls(str(address))

    def with_protocol_version(self, protocol_version: int) -> ConnectionConfig:
        """Use a specific protocol version."""
        return replace(self, protocol_version=protocol_version)

    def with_port(self, port: int) -> ConnectionConfig:
        """Use a specific port."""
        return replace(self, port=port)

    def with_port_opt(self, port: int | None) -> ConnectionConfig:
        """Use ``port`` if given, otherwise keep the current one."""
        return self if port is None else self.with_port(port)

    def with_timeout(self, timeout: float | timedelta) -> ConnectionConfig:
        """Use a specific timeout, in seconds or as a timedelta."""
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        return replace(self, timeout=float(timeout))

    async def connect(self) -> StatusConnection:
        """Open the TCP connection."""
        try:
            reader, writer = await asyncio.open_connection(self.address, self.port)
        except OSError as exc:
            raise FailedToConnect() from exc
        return StatusConnection(
            reader=reader,
            writer=writer,
            protocol_version=self.protocol_version,
            address=self.address,
            port=self.port,
            timeout=self.timeout,
        )


@dataclass
class StatusConnection:
    """An open connection ready for the status exchange."""

    reader: asyncio.StreamReader
    writer: asyncio.StreamWriter
    protocol_version: int
    address: str
    port: int
    timeout: float

    async def _exchange(self) -> StatusResponse:
        handshake = HandshakePacket(self.protocol_version, self.address, self.port)
        try:
            await write_packet_with_timeout(self.writer, handshake, self.timeout)
            await write_packet_with_timeout(self.writer, RequestPacket(), self.timeout)
            response = await read_packet_with_timeout(self.reader, ResponsePacket, self.timeout)
        except ProtocolError as exc:
            raise ServerProtocolError() from exc
        return StatusResponse.from_json(response.body)

    async def status(self) -> PingConnection:
        """Query the status; the connection then serves only for a ping."""
        try:
            status = await self._exchange()
        except BaseException:
            await _close_writer(self.writer)
            raise
        return PingConnection(
            reader=self.reader,
            writer=self.writer,
            protocol_version=self.protocol_version,
            address=self.address,
            port=self.port,
            timeout=self.timeout,
            status=status,
        )


@dataclass
class PingConnection:
    """A connection after the status exchange, holding the decoded status."""

    reader: asyncio.StreamReader
    writer: asyncio.StreamWriter
    protocol_version: int
    address: str
    port: int
    timeout: float
    status: StatusResponse

    async def __aenter__(self) -> PingConnection:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await _close_writer(self.writer)

    async def ping(self, payload: int) -> None:
        """Ping with ``payload`` and check the echo; the connection is closed after."""
        try:
            try:
                await write_packet_with_timeout(self.writer, PingPacket(payload), self.timeout)
                pong = await read_packet_with_timeout(self.reader, PongPacket, self.timeout)
            except ProtocolError as exc:
                raise ServerProtocolError() from exc
        finally:
            await _close_writer(self.writer)
        if pong.payload != payload:
            raise MismatchedPayload(expected=payload, actual=pong.payload)


async def connect(address: str) -> StatusConnection:
    """Connect to ``address`` on the default port with the latest protocol."""
    return await ConnectionConfig.build(address).connect()


async def fetch_status(ip: str, port: int | None = None) -> StatusResponse:
    """Return the status of the server at ``ip`` and ``port``."""
    conn = await ConnectionConfig.build(ip).with_port_opt(port).connect()
    async with await conn.status() as ping_conn:
        return ping_conn.status


def main(argv: list[str] | None = None) -> int:
    """Print the status of a server."""
    parser = argparse.ArgumentParser(description="Query a server's status.")
    parser.add_argument("host", nargs="?", default="localhost")
    parser.add_argument("port", nargs="?", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    try:
        status = asyncio.run(fetch_status(args.host, args.port))
    except ServerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(status)
    return 0