# nsnwork

Tools around a small Minecraft server:

- an asynchronous **server-list-ping client** that asks a Minecraft server for
  its status (version, player counts, description, favicon) and can check a
  ping/pong round trip;
- the **server configuration** file (`server.toml`) with its defaults;
- **noise-based terrain generation** that fills 16×16 chunk columns, 384 blocks
  high, with stone, dirt, gravel, grass blocks, water, grass and tall grass;
- a **chunk scheduler** that queues chunks by distance from a viewer and hands
  them out nearest first.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Querying a server

From the command line:

```
nsnwork-status
nsnwork-status example.com 25565
```

Both arguments are optional; the host defaults to `localhost` and the port to
`25565`. The command prints the decoded status response, or prints the error
to standard error and exits with status 1.

From Python:

```python
import asyncio

from nsnwork.client import fetch_status

status = asyncio.run(fetch_status("localhost", 25565))
print(status.version.name, status.players.online, status.players.max)
```

For finer control, build a `ConnectionConfig`. It is immutable; each `with_*`
method returns a new configuration. Defaults are protocol version 764, port
25565 and a two-second timeout.

```python
from nsnwork.client import ConnectionConfig

async def check(host: str) -> None:
    config = (
        ConnectionConfig.build(host)
        .with_port(25565)
        .with_timeout(2.0)  # seconds, or a datetime.timedelta
    )
    connection = await config.connect()
    ping_connection = await connection.status()
    print(ping_connection.status.description.text)
    await ping_connection.ping(42)  # closes the connection afterwards
```

`StatusConnection.status()` sends the handshake and request packets, reads the
response and returns a `PingConnection` holding the decoded `StatusResponse`.
A `PingConnection` can be used as an async context manager, which closes it on
exit. `connect(address)` is a shortcut for the default port and the latest
protocol version.

Failures are raised as subclasses of `ServerError` from `nsnwork.errors`:
`FailedToConnect`, `InvalidJson`, `MismatchedPayload` and
`ServerProtocolError` (which wraps any wire-level failure, timeouts included).
The wire layer itself raises `ProtocolError` subclasses: `InvalidPacketLength`,
`InvalidVarInt`, `InvalidPacketId`, `InvalidResponseBody` and
`ProtocolTimeout`.

### Status data

`nsnwork.status_data` holds the decoded document: `StatusResponse` with
`version` (`ServerVersion`), `players` (`ServerPlayers`, with an optional
`sample` of `ServerPlayer`), `description` (`ServerDescription`, accepting a
plain string or an object with `text`) and an optional `favicon`.
`StatusResponse.from_json` raises `InvalidJson` for a malformed body;
`StatusResponse.from_dict` raises `ValueError`.

### Packets and framing

The packets live in `nsnwork.packets` (`State`, `HandshakePacket`,
`RequestPacket`, `PingPacket`, `PongPacket`, `ResponsePacket`). The VarInt and
string framing is in `nsnwork.wire`: `RawPacket`, `encode_varint`,
`encode_string`, `decode_varint`, `decode_string`, and the stream helpers
`read_varint`, `read_string`, `read_packet`, `read_packet_with_timeout`,
`write_packet` and `write_packet_with_timeout`.

## Server configuration

`nsnwork.config` reads and writes `server.toml` through `ServerConfig`
(`from_toml`, `to_toml`). Missing keys fall back to `host = "127.0.0.1"` and
`port = 25565`; `get_config` reads a file, and `prepare_config` creates the
file if it does not exist, loads it and writes back any missing values.

```python
from nsnwork.config import prepare_config

config = prepare_config("server.toml")
print(config.host, config.port)
```

## Terrain

`nsnwork.terrain` provides the noise helpers (`lerp`, `lerpstep`, `noise01`,
`fbm`) and `has_terrain_at`, driven by a `TerrainNoise` holding five seeded
simplex noise fields (density, hilly, stone, gravel, grass).

```python
from nsnwork.chunkgen import Block, generate_chunk
from nsnwork.terrain import TerrainNoise

noises = TerrainNoise(seed=1234)
chunk = generate_chunk(noises, (0, 0))
print(chunk.block_state(0, 0, 0) is Block.STONE)
```

`generate_chunk` returns a `Chunk` of `Block` values addressed by local
coordinates through `block_state` and `set_block_state`; coordinates outside
the chunk raise `IndexError`.

## Chunk scheduling

`nsnwork.scheduler.ChunkScheduler` tracks pending chunks by `ChunkPos`.
`queue(pos, center)` records a chunk with its squared distance from the viewer
as priority, keeping the smallest; `drain_ready()` hands out every chunk not
yet handed out, nearest first; `finish(pos)` removes a generated chunk and
raises `KeyError` if it was not pending.

## What this package does not do

It does not run a game server: nothing here listens on the configured host and
port, accepts players or sends chunks to them. Chunk generation runs
synchronously in the calling thread; wiring `ChunkScheduler` and
`generate_chunk` into worker threads or an event loop is left to the caller.