"""Exceptions raised by the wire protocol and the status client."""

from __future__ import annotations


class ProtocolError(Exception):
    """Reading or writing protocol data failed."""

    default_message = "error reading or writing data"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidPacketLength(ProtocolError):
    """A packet announced a length of zero."""

    default_message = "invalid packet length"


class InvalidVarInt(ProtocolError):
    """A varint ran longer than five bytes."""

    default_message = "invalid varint data"


class InvalidPacketId(ProtocolError):
    """A packet carried a different ID than the one expected."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"invalid packet (expected ID {expected}, actual ID {actual})")


class InvalidResponseBody(ProtocolError):
    """A string on the wire was not valid UTF-8."""

    default_message = "invalid ServerListPing response body (invalid UTF-8)"


class ProtocolTimeout(ProtocolError, TimeoutError):
    """A read or write did not finish within its timeout."""

    default_message = "connection timed out"


class ServerError(Exception):
    """A status exchange with a server failed."""

    default_message = "server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ServerProtocolError(ServerError):
    """The exchange failed at the protocol level."""

    default_message = "error reading or writing data"


class FailedToConnect(ServerError):
    """The TCP connection could not be opened."""

    default_message = "failed to connect to server"


class InvalidJson(ServerError):
    """The status body was not the expected JSON document."""

    def __init__(self, body: str) -> None:
        self.body = body
        super().__init__(f'invalid JSON response: "{body}"')


class MismatchedPayload(ServerError):
    """The pong payload differed from the ping payload."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f'mismatched pong payload (expected "{expected}", got "{actual}")'
        )