"""Terrain generation for a single chunk."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from .terrain import TerrainNoise, fbm, has_terrain_at, noise01

HEIGHT = 384
CHUNK_WIDTH = 16
WATER_HEIGHT = 55


class Block(Enum):
    """Block states produced by the generator."""

    AIR = "minecraft:air"
    STONE = "minecraft:stone"
    DIRT = "minecraft:dirt"
    GRASS_BLOCK = "minecraft:grass_block"
    GRAVEL = "minecraft:gravel"
    WATER = "minecraft:water"
    GRASS = "minecraft:grass"
    TALL_GRASS_LOWER = "minecraft:tall_grass[half=lower]"
    TALL_GRASS_UPPER = "minecraft:tall_grass[half=upper]"

    @property
    def is_air(self) -> bool:
        return self is Block.AIR


@dataclass
class Chunk:
    """A 16 by 16 column of blocks of a given height, initially air."""

    height: int = HEIGHT
    _blocks: list[Block] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.height < 0:
            raise ValueError(f"negative chunk height: {self.height}")
        self._blocks = [Block.AIR] * (CHUNK_WIDTH * CHUNK_WIDTH * self.height)

    def _index(self, x: int, y: int, z: int) -> int:
        if not (0 <= x < CHUNK_WIDTH and 0 <= z < CHUNK_WIDTH and 0 <= y < self.height):
            raise IndexError(f"block ({x}, {y}, {z}) outside chunk")
        return (y * CHUNK_WIDTH + z) * CHUNK_WIDTH + x

    def block_state(self, x: int, y: int, z: int) -> Block:
        """Return the block at the local coordinates."""
        return self._blocks[self._index(x, y, z)]

    def set_block_state(self, x: int, y: int, z: int, block: Block) -> None:
        """Place ``block`` at the local coordinates."""
        self._blocks[self._index(x, y, z)] = block


def _fill_column(chunk: Chunk, noises: TerrainNoise, offset_x: int, offset_z: int, x: int, z: int) -> None:
    in_terrain = False
    depth = 0

    for y in reversed(range(chunk.height)):
        p = (float(x), float(y), float(z))

        if has_terrain_at(noises, p):

            def gravel_height() -> int:
                n = fbm(noises.gravel, (p[0] / 10.0, p[1] / 10.0, p[2] / 10.0), 3, 2.0, 0.5)
                return WATER_HEIGHT - 1 - math.floor(n * 6.0)

            if in_terrain:
                if depth > 0:
                    depth -= 1
                    block = Block.GRAVEL if y < gravel_height() else Block.DIRT
                else:
                    block = Block.STONE
            else:
                in_terrain = True
                n = noise01(noises.stone, (p[0] / 15.0, p[1] / 15.0, p[2] / 15.0))
                depth = math.floor(n * 5.0 + 0.5)
                if y < gravel_height():
                    block = Block.GRAVEL
                elif y < WATER_HEIGHT - 1:
                    block = Block.DIRT
                else:
                    block = Block.GRASS_BLOCK
        else:
            in_terrain = False
            depth = 0
            block = Block.WATER if y < WATER_HEIGHT else Block.AIR

        chunk.set_block_state(offset_x, y, offset_z, block)


def _plant_grass(chunk: Chunk, noises: TerrainNoise, offset_x: int, offset_z: int, x: int, z: int) -> None:
    for y in reversed(range(chunk.height)):
        if not (
            y > 0
            and chunk.block_state(offset_x, y, offset_z).is_air
            and chunk.block_state(offset_x, y - 1, offset_z) is Block.GRASS_BLOCK
        ):
            continue

        density = fbm(noises.grass, (x / 5.0, y / 5.0, z / 5.0), 4, 2.0, 0.7)
        if density <= 0.55:
            continue

        if (
            density > 0.7
            and y + 1 < chunk.height
            and chunk.block_state(offset_x, y + 1, offset_z).is_air
        ):
            chunk.set_block_state(offset_x, y + 1, offset_z, Block.TALL_GRASS_UPPER)
            chunk.set_block_state(offset_x, y, offset_z, Block.TALL_GRASS_LOWER)
        else:
            chunk.set_block_state(offset_x, y, offset_z, Block.GRASS)


def generate_chunk(noises: TerrainNoise, pos: tuple[int, int]) -> Chunk:
    """Generate the chunk at chunk coordinates ``pos`` (x, z)."""
    chunk_x, chunk_z = pos
    chunk = Chunk(HEIGHT)
    for offset_z in range(CHUNK_WIDTH):
        for offset_x in range(CHUNK_WIDTH):
            x = offset_x + chunk_x * CHUNK_WIDTH
            z = offset_z + chunk_z * CHUNK_WIDTH
            _fill_column(chunk, noises, offset_x, offset_z, x, z)
            _plant_grass(chunk, noises, offset_x, offset_z, x, z)
    return chunk