import asyncio
import json
import socket
from contextlib import asynccontextmanager
from datetime import timedelta
from unittest.mock import patch

import pytest

from nsnwork.client import ConnectionConfig, connect, fetch_status, main
from nsnwork.errors import (
    FailedToConnect,
    InvalidJson,
    MismatchedPayload,
    ProtocolError,
    ServerProtocolError,
)
from nsnwork.packets import HandshakePacket
from nsnwork.status_data import ServerDescription, ServerVersion
from nsnwork.wire import RawPacket, encode_string, encode_varint, read_varint

STATUS_BODY = json.dumps(
    {
        "version": {"name": "1.21.1", "protocol": 767},
        "players": {"max": 420, "online": 7},
        "description": "Hello Valence!",
    }
)


async def _read_frame(reader):
    length = await read_varint(reader)
    return await reader.readexactly(length)


def _handler(frames, body=STATUS_BODY, response_id=0, pong_delta=0):
    async def handle(reader, writer):
        try:
            frames.append(await _read_frame(reader))
            frames.append(await _read_frame(reader))
            writer.write(RawPacket(response_id, encode_string(body)).encode())
            await writer.drain()
            ping = await _read_frame(reader)
            frames.append(ping)
            payload = (int.from_bytes(ping[1:], "big") + pong_delta) % 2**64
            writer.write(RawPacket(1, payload.to_bytes(8, "big")).encode())
            await writer.drain()
        except (asyncio.IncompleteReadError, ProtocolError, ConnectionError):
            pass
        finally:
            writer.close()

    return handle


@asynccontextmanager
async def _running_server(handler):
    server = await asyncio.start_server(handler, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield port
    finally:
        server.close()
        await server.wait_closed()


def _unused_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_build_uses_defaults():
    config = ConnectionConfig.build("localhost")
    assert config.address == "localhost"
    assert config.protocol_version == 764
    assert config.port == 25565
    assert config.timeout == 2.0


def test_builders_return_new_configs():
    base = ConnectionConfig.build("localhost")
    changed = base.with_port(1234).with_protocol_version(767).with_timeout(timedelta(seconds=5))
    assert (changed.port, changed.protocol_version, changed.timeout) == (1234, 767, 5.0)
    assert base.port == 25565


def test_with_port_opt():
    base = ConnectionConfig.build("localhost")
    assert base.with_port_opt(None) == base
    assert base.with_port_opt(4321).port == 4321


def test_port_out_of_range():
    with pytest.raises(ValueError):
        ConnectionConfig.build("localhost").with_port(70000)


@pytest.mark.asyncio
async def test_fetch_status_sends_handshake_and_request():
    frames = []
    async with _running_server(_handler(frames)) as port:
        status = await fetch_status("127.0.0.1", port)
    assert status.version == ServerVersion("1.21.1", 767)
    assert status.players.online == 7
    assert status.description == ServerDescription("Hello Valence!")
    assert frames[0] == encode_varint(0) + HandshakePacket(764, "127.0.0.1", port).to_bytes()
    assert frames[1] == encode_varint(0)


@pytest.mark.asyncio
async def test_protocol_version_is_sent():
    frames = []
    async with _running_server(_handler(frames)) as port:
        config = ConnectionConfig.build("127.0.0.1").with_port(port).with_protocol_version(767)
        conn = await config.connect()
        async with await conn.status():
            pass
    assert frames[0] == encode_varint(0) + HandshakePacket(767, "127.0.0.1", port).to_bytes()


@pytest.mark.asyncio
async def test_ping_echo():
    frames = []
    async with _running_server(_handler(frames)) as port:
        conn = await ConnectionConfig.build("127.0.0.1").with_port(port).connect()
        ping_conn = await conn.status()
        await ping_conn.ping(42)
    assert frames[2] == encode_varint(1) + (42).to_bytes(8, "big")
    assert ping_conn.status.players.max == 420


@pytest.mark.asyncio
async def test_ping_mismatch():
    frames = []
    async with _running_server(_handler(frames, pong_delta=1)) as port:
        conn = await ConnectionConfig.build("127.0.0.1").with_port(port).connect()
        ping_conn = await conn.status()
        with pytest.raises(MismatchedPayload) as excinfo:
            await ping_conn.ping(7)
    assert excinfo.value.expected == 7
    assert excinfo.value.actual == 8


@pytest.mark.asyncio
async def test_invalid_json_body():
    frames = []
    async with _running_server(_handler(frames, body="nope")) as port:
        with pytest.raises(InvalidJson) as excinfo:
            await fetch_status("127.0.0.1", port)
    assert excinfo.value.body == "nope"


@pytest.mark.asyncio
async def test_wrong_packet_id_is_protocol_error():
    frames = []
    async with _running_server(_handler(frames, response_id=3)) as port:
        with pytest.raises(ServerProtocolError) as excinfo:
            await fetch_status("127.0.0.1", port)
    assert str(excinfo.value) == "error reading or writing data"


@pytest.mark.asyncio
async def test_timeout_is_protocol_error():
    async def silent(reader, writer):
        await reader.read()
        writer.close()

    async with _running_server(silent) as port:
        config = ConnectionConfig.build("127.0.0.1").with_port(port).with_timeout(0.2)
        conn = await config.connect()
        with pytest.raises(ServerProtocolError):
            await conn.status()


@pytest.mark.asyncio
async def test_connect_refused():
    with pytest.raises(FailedToConnect) as excinfo:
        await fetch_status("127.0.0.1", _unused_port())
    assert str(excinfo.value) == "failed to connect to server"


@pytest.mark.asyncio
async def test_connect_uses_default_port():
    with patch("nsnwork.client.asyncio.open_connection", side_effect=OSError) as opener:
        with pytest.raises(FailedToConnect):
            await connect("example.invalid")
    opener.assert_called_once_with("example.invalid", 25565)


def test_main_reports_failure(capsys):
    code = main(["127.0.0.1", str(_unused_port())])
    assert code == 1
    assert "failed to connect to server" in capsys.readouterr().err