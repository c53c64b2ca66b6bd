"""Bookkeeping for chunks waiting to be generated."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple


class ChunkPos(NamedTuple):
    """Chunk coordinates."""

    x: int
    z: int

    def distance_squared(self, other: ChunkPos) -> int:
        """Squared distance to ``other`` in chunks."""
        dx = other.x - self.x
        dz = other.z - self.z
        return dx * dx + dz * dz


@dataclass
class ChunkScheduler:
    """Chunks awaiting generation, with priorities; lower priorities go first.

    A pending chunk whose priority is ``None`` has already been handed out.
    """

    pending: dict[ChunkPos, int | None] = field(default_factory=dict)

    def queue(self, pos: ChunkPos, center: ChunkPos) -> None:
        """Request ``pos`` for a viewer at ``center``, keeping the closest priority."""
        pos = ChunkPos(*pos)
        dist = ChunkPos(*center).distance_squared(pos)
        if pos in self.pending:
            current = self.pending[pos]
            if current is not None:
                self.pending[pos] = min(current, dist)
        else:
            self.pending[pos] = dist

    def finish(self, pos: ChunkPos) -> None:
        """Mark ``pos`` as generated; raise KeyError if it was not pending."""
        pos = ChunkPos(*pos)
        if pos not in self.pending:
            raise KeyError(pos)
        del self.pending[pos]

    def drain_ready(self) -> list[ChunkPos]:
        """Hand out all chunks not yet handed out, in ascending priority."""
        ready = [(priority, pos) for pos, priority in self.pending.items() if priority is not None]
        for _, pos in ready:
            self.pending[pos] = None
        ready.sort(key=lambda item: item[0])
        return [pos for _, pos in ready]