import pytest

from nsnwork.errors import InvalidResponseBody, ProtocolError
from nsnwork.packets import (
    HandshakePacket,
    PingPacket,
    PongPacket,
    RequestPacket,
    ResponsePacket,
    State,
)
from nsnwork.wire import decode_string, decode_varint, encode_string, encode_varint


def test_state_status_value():
    assert State(1) is State.STATUS
    data = HandshakePacket(764, "localhost", 25565).to_bytes()
    assert data[-1] == int(State.STATUS) == 1


def test_packet_ids():
    assert HandshakePacket(764, "localhost", 25565).packet_id == 0
    assert RequestPacket().packet_id == 0
    assert PingPacket(7).packet_id == 1
    assert PongPacket.EXPECTED_PACKET_ID == 1
    assert ResponsePacket.EXPECTED_PACKET_ID == 0


def test_handshake_defaults_to_status():
    assert HandshakePacket(764, "localhost", 25565).next_state is State.STATUS


def test_handshake_layout():
    data = HandshakePacket(764, "localhost", 25565).to_bytes()
    version, used = decode_varint(data)
    assert version == 764
    address, more = decode_string(data[used:])
    assert address == "localhost"
    rest = data[used + more :]
    assert int.from_bytes(rest[:2], "big") == 25565
    assert decode_varint(rest[2:]) == (1, 1)
    assert len(rest) == 3


def test_handshake_rejects_bad_port():
    with pytest.raises(ValueError):
        HandshakePacket(764, "localhost", 70000)


def test_request_body_empty():
    assert RequestPacket().to_bytes() == b""


def test_ping_known_bytes():
    assert PingPacket(1).to_bytes() == b"\x00\x00\x00\x00\x00\x00\x00\x01"


@pytest.mark.parametrize("payload", [0, 1, 987654321, 2**64 - 1])
def test_ping_pong_round_trip(payload):
    data = PingPacket(payload).to_bytes()
    assert len(data) == 8
    assert PongPacket.from_bytes(data).payload == payload


def test_ping_rejects_out_of_range():
    with pytest.raises(ValueError):
        PingPacket(-1)


def test_pong_short_body():
    with pytest.raises(ProtocolError):
        PongPacket.from_bytes(b"\x00\x01")


def test_response_from_bytes():
    body = '{"description": "hi"}'
    assert ResponsePacket.from_bytes(encode_string(body)).body == body


def test_response_invalid_utf8():
    with pytest.raises(InvalidResponseBody):
        ResponsePacket.from_bytes(encode_varint(2) + b"\xff\xfe")


def test_response_truncated():
    with pytest.raises(ProtocolError):
        ResponsePacket.from_bytes(encode_varint(50) + b"short")