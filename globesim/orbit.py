"""Circular orbit mechanics around the Earth."""

from __future__ import annotations

import math
import struct
import time

G = 6.67430e-11
"""Gravitational constant."""
M = 5.972e24
"""Mass of the Earth in kilograms."""


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


PI = _f32(math.pi)
"""Single-precision pi, as used throughout the orbit maths."""


def orbital_speed(g: float, m: float, r: float) -> float:
    """Speed of a circular orbit of radius ``r``."""
    return math.sqrt(g * m / r)


def orbital_period(g: float, m: float, r: float) -> float:
    """Period of a circular orbit of radius ``r``."""
    return 2 * PI * math.sqrt(r * r * r / (g * m))


def position_in_orbit(
    r: float, period: float, t: float, inclination: float, omega: float
) -> tuple[float, float, float]:
    """Position at time ``t`` on an inclined circular orbit."""
    angle = 2 * PI * t / period
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    x = r * (math.cos(omega) * cos_a - math.sin(omega) * sin_a * math.cos(inclination))
    y = r * (math.sin(omega) * cos_a + math.cos(omega) * sin_a * math.cos(inclination))
    z = r * (sin_a * math.sin(inclination))
    return x, y, z


def position_at_time(
    radius: float,
    inclination: float,
    omega: float,
    period: float,
    now_ms: float | None = None,
) -> tuple[float, float, float]:
    """Position on the orbit at wall-clock time ``now_ms`` (ms since the epoch)."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    t = math.fmod(now_ms, period)
    return position_in_orbit(radius, period, t, inclination, omega)


def generate_orbit_trajectory(
    radius: float, inclination: float, omega: float
) -> list[float]:
    """Line segments tracing a full orbit, six floats per segment."""
    if radius <= 0:
        raise ValueError("orbit radius must be positive")
    period = orbital_period(G, M, radius)
    step = period / 100

    trajectory: list[float] = []
    previous: tuple[float, float, float] | None = None
    t = 0.0
    while t <= period:
        point = tuple(_f32(c) for c in position_in_orbit(radius, period, t, inclination, omega))
        if previous is not None:
            trajectory.extend(previous)
            trajectory.extend(point)
        previous = point
        t += step
    return trajectory