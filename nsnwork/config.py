"""Server configuration stored as TOML."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any

import tomli_w

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 25565
CONFIG_FILE = "server.toml"


@dataclass(frozen=True)
class ServerConfig:
    """Address the server listens on."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if not isinstance(self.host, str):
            raise ValueError("host: expected a string")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError("port: expected an integer")
        if not 0 <= self.port <= 0xFFFF:
            raise ValueError(f"port out of range: {self.port}")

    @classmethod
    def from_toml(cls, text: str) -> ServerConfig:
        """Parse a TOML document; missing keys take their defaults."""
        data: dict[str, Any] = tomllib.loads(text)
        known = {key: data[key] for key in ("host", "port") if key in data}
        return cls(**known)

    def to_toml(self) -> str:
        """Render the configuration as a TOML document."""
        return tomli_w.dumps({"host": self.host, "port": self.port})


def get_config(path: str | PathLike[str] = CONFIG_FILE) -> ServerConfig:
    """Read the configuration file at ``path``."""
    return ServerConfig.from_toml(Path(path).read_text(encoding="utf-8"))


def prepare_config(path: str | PathLike[str] = CONFIG_FILE) -> ServerConfig:
    """Create the file if absent, load it, and write back any missing values."""
    config_path = Path(path)
    if not config_path.exists():
        config_path.write_text(ServerConfig().to_toml(), encoding="utf-8")
    config = get_config(config_path)
    config_path.write_text(config.to_toml(), encoding="utf-8")
    return config