"""Grid terrain meshes displaced by multi-octave Perlin noise."""

from __future__ import annotations

import math
from dataclasses import dataclass

from globesim.perlin import PerlinNoise


@dataclass(frozen=True)
class PlanarTerrainSettings:
    """Parameters for a planar terrain chunk."""

    seed: int = 0
    chunk_size: int = 0
    resolution: int = 0
    num_octaves: int = 0
    initial_amplitude: float = 0.0
    amplitude_step: float = 0.0
    initial_frequency: float = 0.0
    frequency_step: float = 0.0
    scale: float = 0.0


def _normalize(x: float, y: float, z: float) -> tuple[float, float, float]:
    length = math.sqrt(x * x + y * y + z * z)
    return x / length, y / length, z / length


def generate_planar_terrain(
    settings: PlanarTerrainSettings,
) -> tuple[list[float], list[int]]:
    """Build a terrain grid.

    Returns ``(vertices, indices)``: six floats per vertex (position x, height,
    position z, then the normal) and three indices per triangle.
    """
    perlin = PerlinNoise(settings.seed)
    resolution = settings.resolution
    step = settings.chunk_size / (resolution - 1) if resolution != 1 else math.inf
    half = int(resolution / 2)

    vertices: list[float] = []
    for y in range(-half, half):
        for x in range(-half, half):
            pos_x = x * step
            pos_y = y * step

            noise_value = 0.0
            amplitude = settings.initial_amplitude
            frequency = settings.initial_frequency
            scale = settings.scale
            for _ in range(settings.num_octaves):
                noise_value += perlin.noise2d(x * frequency, y * frequency) * amplitude
                amplitude *= settings.amplitude_step
                frequency *= settings.frequency_step

            frequency /= 2.0 ** settings.num_octaves

            height_l = perlin.noise2d((x - 1) * frequency, y * frequency) * scale
            height_r = perlin.noise2d((x + 1) * frequency, y * frequency) * scale
            height_d = perlin.noise2d(x * frequency, (y - 1) * frequency) * scale
            height_u = perlin.noise2d(x * frequency, (y + 1) * frequency) * scale

            normal = _normalize(height_l - height_r, 2.0, height_d - height_u)

            vertices.extend((pos_x, noise_value * scale, pos_y))
            vertices.extend(normal)

    indices: list[int] = []
    for y in range(resolution - 1):
        for x in range(resolution - 1):
            top_left = y * resolution + x
            top_right = top_left + 1
            bottom_left = (y + 1) * resolution + x
            bottom_right = bottom_left + 1
            indices.extend((top_left, bottom_left, top_right))
            indices.extend((top_right, bottom_left, bottom_right))

    return vertices, indices