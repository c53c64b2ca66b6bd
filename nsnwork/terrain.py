"""Noise functions and the terrain density test."""

from __future__ import annotations

import math
import random

Vec3 = tuple[float, float, float]

_F3 = 1.0 / 3.0
_G3 = 1.0 / 6.0
_GRAD3 = (
    (1, 1, 0), (-1, 1, 0), (1, -1, 0), (-1, -1, 0),
    (1, 0, 1), (-1, 0, 1), (1, 0, -1), (-1, 0, -1),
    (0, 1, 1), (0, -1, 1), (0, 1, -1), (0, -1, -1),
)


class _Simplex3:
    """Seeded 3D simplex noise with values in [-1, 1]."""

    __slots__ = ("seed", "_perm")

    def __init__(self, seed: int) -> None:
        self.seed = seed & 0xFFFF_FFFF
        table = list(range(256))
        random.Random(self.seed).shuffle(table)
        self._perm = table * 2

    def get(self, p: Vec3) -> float:
        x, y, z = p
        s = (x + y + z) * _F3
        i = math.floor(x + s)
        j = math.floor(y + s)
        k = math.floor(z + s)
        t = (i + j + k) * _G3
        x0 = x - i + t
        y0 = y - j + t
        z0 = z - k + t

        if x0 >= y0:
            if y0 >= z0:
                i1, j1, k1, i2, j2, k2 = 1, 0, 0, 1, 1, 0
            elif x0 >= z0:
                i1, j1, k1, i2, j2, k2 = 1, 0, 0, 1, 0, 1
            else:
                i1, j1, k1, i2, j2, k2 = 0, 0, 1, 1, 0, 1
        elif y0 < z0:
            i1, j1, k1, i2, j2, k2 = 0, 0, 1, 0, 1, 1
        elif x0 < z0:
            i1, j1, k1, i2, j2, k2 = 0, 1, 0, 0, 1, 1
        else:
            i1, j1, k1, i2, j2, k2 = 0, 1, 0, 1, 1, 0

        corners = (
            (0, 0, 0, x0, y0, z0),
            (i1, j1, k1, x0 - i1 + _G3, y0 - j1 + _G3, z0 - k1 + _G3),
            (i2, j2, k2, x0 - i2 + 2 * _G3, y0 - j2 + 2 * _G3, z0 - k2 + 2 * _G3),
            (1, 1, 1, x0 - 1 + 3 * _G3, y0 - 1 + 3 * _G3, z0 - 1 + 3 * _G3),
        )

        perm = self._perm
        ii, jj, kk = i & 255, j & 255, k & 255
        total = 0.0
        for di, dj, dk, cx, cy, cz in corners:
            falloff = 0.6 - cx * cx - cy * cy - cz * cz
            if falloff > 0:
                gx, gy, gz = _GRAD3[perm[ii + di + perm[jj + dj + perm[kk + dk]]] % 12]
                falloff *= falloff
                total += falloff * falloff * (gx * cx + gy * cy + gz * cz)
        return max(-1.0, min(1.0, 32.0 * total))


class TerrainNoise:
    """The five noise fields used by terrain generation, seeded from one seed."""

    def __init__(self, seed: int) -> None:
        self.seed = seed & 0xFFFF_FFFF
        self.density = _Simplex3(self.seed)
        self.hilly = _Simplex3(self.seed + 1)
        self.stone = _Simplex3(self.seed + 2)
        self.gravel = _Simplex3(self.seed + 3)
        self.grass = _Simplex3(self.seed + 4)


def _scale(p: Vec3, factor: float) -> Vec3:
    return (p[0] * factor, p[1] * factor, p[2] * factor)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between ``a`` and ``b``."""
    return a * (1.0 - t) + b * t


def lerpstep(edge0: float, edge1: float, x: float) -> float:
    """0 at or below ``edge0``, 1 at or above ``edge1``, linear in between."""
    if x <= edge0:
        return 0.0
    if x >= edge1:
        return 1.0
    return (x - edge0) / (edge1 - edge0)


def noise01(noise: _Simplex3, p: Vec3) -> float:
    """Sample ``noise`` at ``p`` rescaled to [0, 1]."""
    return (noise.get(p) + 1.0) / 2.0


def fbm(noise: _Simplex3, p: Vec3, octaves: int, lacunarity: float, persistence: float) -> float:
    """Fractal Brownian motion of ``noise``, normalised to [0, 1]."""
    if octaves < 1:
        raise ValueError("octaves must be positive")
    freq = 1.0
    amp = 1.0
    amp_sum = 0.0
    total = 0.0
    for _ in range(octaves):
        total += noise01(noise, _scale(p, freq)) * amp
        amp_sum += amp
        freq *= lacunarity
        amp *= persistence
    return total / amp_sum


def has_terrain_at(noises: TerrainNoise, p: Vec3) -> bool:
    """Whether the block at ``p`` is solid ground."""
    hilly = lerp(0.1, 1.0, noise01(noises.hilly, _scale(p, 1.0 / 400.0))) ** 2

    lower = 15.0 + 100.0 * hilly
    upper = lower + 100.0 * hilly

    y = p[1]
    if y <= lower:
        return True
    if y >= upper:
        return False

    density = 1.0 - lerpstep(lower, upper, y)
    n = fbm(noises.density, _scale(p, 1.0 / 100.0), 4, 2.0, 0.5)
    return n < density