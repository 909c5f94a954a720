"""Classic Perlin gradient noise in two and three dimensions."""

from __future__ import annotations

import math

PERMUTATION_SIZE = 256

_MASK32 = 0xFFFFFFFF


class _MersenneTwister:
    """32-bit Mersenne Twister (MT19937) seeded with a single integer."""

    _N = 624
    _M = 397

    def __init__(self, seed: int) -> None:
        state = [seed & _MASK32]
        for i in range(1, self._N):
            prev = state[-1]
            state.append((1812433253 * (prev ^ (prev >> 30)) + i) & _MASK32)
        self._state = state
        self._index = self._N

    def _twist(self) -> None:
        mt = self._state
        n, m = self._N, self._M
        for i in range(n):
            y = (mt[i] & 0x80000000) | (mt[(i + 1) % n] & 0x7FFFFFFF)
            value = mt[(i + m) % n] ^ (y >> 1)
            if y & 1:
                value ^= 0x9908B0DF
            mt[i] = value
        self._index = 0

    def next_u32(self) -> int:
        if self._index >= self._N:
            self._twist()
        y = self._state[self._index]
        self._index += 1
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & _MASK32

    def randint(self, upper: int) -> int:
        """Uniform integer in ``[0, upper]``."""
        span = upper + 1
        scaling = (1 << 32) // span
        limit = span * scaling
        while True:
            value = self.next_u32()
            if value < limit:
                return value // scaling


def _shuffled(values: list[int], rng: _MersenneTwister) -> list[int]:
    result = list(values)
    for i in range(1, len(result)):
        j = rng.randint(i)
        result[i], result[j] = result[j], result[i]
    return result


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(t: float, a: float, b: float) -> float:
    return a + t * (b - a)


def _grad(hash_value: int, x: float, y: float, z: float) -> float:
    h = hash_value & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h in (12, 14):
        v = x
    else:
        v = z
    return (u if h & 1 == 0 else -u) + (v if h & 2 == 0 else -v)


class PerlinNoise:
    """Seeded Perlin noise generator."""

    def __init__(self, seed: int = 0) -> None:
        rng = _MersenneTwister(seed)
        permutation = _shuffled(list(range(PERMUTATION_SIZE)), rng)
        self._p = permutation + permutation

    @property
    def permutation(self) -> tuple[int, ...]:
        """The shuffled permutation table (before duplication)."""
        return tuple(self._p[:PERMUTATION_SIZE])

    def noise(self, x: float, y: float, z: float) -> float:
        """Three-dimensional noise value at ``(x, y, z)``."""
        p = self._p
        fx, fy, fz = math.floor(x), math.floor(y), math.floor(z)
        xi, yi, zi = int(fx) & 255, int(fy) & 255, int(fz) & 255
        x -= fx
        y -= fy
        z -= fz
        u, v, w = _fade(x), _fade(y), _fade(z)

        a = p[xi] + yi
        aa = p[a] + zi
        ab = p[a + 1] + zi
        b = p[xi + 1] + yi
        ba = p[b] + zi
        bb = p[b + 1] + zi

        return _lerp(
            w,
            _lerp(
                v,
                _lerp(u, _grad(p[aa], x, y, z), _grad(p[ba], x - 1, y, z)),
                _lerp(u, _grad(p[ab], x, y - 1, z), _grad(p[bb], x - 1, y - 1, z)),
            ),
            _lerp(
                v,
                _lerp(u, _grad(p[aa + 1], x, y, z - 1), _grad(p[ba + 1], x - 1, y, z - 1)),
                _lerp(
                    u,
                    _grad(p[ab + 1], x, y - 1, z - 1),
                    _grad(p[bb + 1], x - 1, y - 1, z - 1),
                ),
            ),
        )

    def noise2d(self, x: float, y: float) -> float:
        """Two-dimensional noise value at ``(x, y)``."""
        p = self._p
        fx, fy = math.floor(x), math.floor(y)
        xi, yi = int(fx) & 255, int(fy) & 255
        x -= fx
        y -= fy
        u, v = _fade(x), _fade(y)

        a = p[xi] + yi
        aa = p[a]
        ab = p[a + 1]
        b = p[xi + 1] + yi
        ba = p[b]
        bb = p[b + 1]

        return _lerp(
            v,
            _lerp(u, _grad(p[aa], x, y, 0), _grad(p[ba], x - 1, y, 0)),
            _lerp(u, _grad(p[ab], x, y - 1, 0), _grad(p[bb], x - 1, y - 1, 0)),
        )