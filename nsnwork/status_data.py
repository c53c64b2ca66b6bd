"""The JSON document a server returns to a status query."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import InvalidJson

_U32_MAX = 0xFFFF_FFFF


def _mapping(value: Any, field: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{field}: expected an object")
    return value


def _field(data: Mapping[str, Any], key: str, owner: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"{owner}: missing field {key!r}") from None


def _string(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field}: expected a string")
    return value


def _u32(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U32_MAX:
        raise ValueError(f"{field}: expected an unsigned 32-bit integer")
    return value


@dataclass(frozen=True)
class ServerVersion:
    """The server's game version name and protocol number."""

    name: str
    protocol: int

    @classmethod
    def _parse(cls, value: Any) -> ServerVersion:
        data = _mapping(value, "version")
        return cls(
            name=_string(_field(data, "name", "version"), "version.name"),
            protocol=_u32(_field(data, "protocol", "version"), "version.protocol"),
        )


@dataclass(frozen=True)
class ServerPlayer:
    """One online player: in-game name and UUID."""

    name: str
    id: str

    @classmethod
    def _parse(cls, value: Any) -> ServerPlayer:
        data = _mapping(value, "player")
        return cls(
            name=_string(_field(data, "name", "player"), "player.name"),
            id=_string(_field(data, "id", "player"), "player.id"),
        )


@dataclass(frozen=True)
class ServerPlayers:
    """Player limit, player count and an optional sample of online players."""

    max: int
    online: int
    sample: tuple[ServerPlayer, ...] | None = None

    @classmethod
    def _parse(cls, value: Any) -> ServerPlayers:
        data = _mapping(value, "players")
        raw_sample = data.get("sample")
        sample: tuple[ServerPlayer, ...] | None
        if raw_sample is None:
            sample = None
        elif isinstance(raw_sample, list):
            sample = tuple(ServerPlayer._parse(entry) for entry in raw_sample)
        else:
            raise ValueError("players.sample: expected a list")
        return cls(
            max=_u32(_field(data, "max", "players"), "players.max"),
            online=_u32(_field(data, "online", "players"), "players.online"),
            sample=sample,
        )


@dataclass(frozen=True)
class ServerDescription:
    """The server's MOTD, sent either as a plain string or as an object."""

    text: str
    structured: bool = False

    @classmethod
    def _parse(cls, value: Any) -> ServerDescription:
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, Mapping) and isinstance(value.get("text"), str):
            return cls(value["text"], structured=True)
        raise ValueError("description: expected a string or an object with text")


@dataclass(frozen=True)
class StatusResponse:
    """The decoded status document."""

    version: ServerVersion
    players: ServerPlayers
    description: ServerDescription
    favicon: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> StatusResponse:
        """Build a response from decoded JSON; raise ValueError if malformed."""
        doc = _mapping(data, "status")
        favicon = doc.get("favicon")
        if favicon is not None and not isinstance(favicon, str):
            raise ValueError("favicon: expected a string")
        return cls(
            version=ServerVersion._parse(_field(doc, "version", "status")),
            players=ServerPlayers._parse(_field(doc, "players", "status")),
            description=ServerDescription._parse(_field(doc, "description", "status")),
            favicon=favicon,
        )

    @classmethod
    def from_json(cls, body: str) -> StatusResponse:
        """Parse a JSON body; raise InvalidJson if it is not a status document."""
        try:
            return cls.from_dict(json.loads(body))
        except ValueError as exc:
            raise InvalidJson(body) from exc