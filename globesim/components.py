"""Entity components and the per-model batches handed to the renderer."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from globesim.orbit import G, M, orbital_period, position_at_time

UNASSIGNED_CHUNK = (999, 999, 999)
"""Chunk value of a position that has not yet been placed in a chunk."""

_PERIOD_SCALE = 100000
_EDITED_PERIOD_SCALE = 10000


class Renderable(ABC):
    """A component that can describe itself for an inspector panel."""

    @abstractmethod
    def describe(self) -> list[str]:
        """Lines of text describing the component's state."""


def _vec3(values: Sequence[float]) -> tuple[float, float, float]:
    x, y, z = (float(v) for v in values)
    return x, y, z


def _ivec3(values: Sequence[int]) -> tuple[int, int, int]:
    x, y, z = (int(v) for v in values)
    return x, y, z


@dataclass
class PositionComponent(Renderable):
    """World position and the chunk it currently belongs to."""

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    chunk: tuple[int, int, int] = UNASSIGNED_CHUNK

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)
        self.chunk = _ivec3(self.chunk)

    def update_pos(self, position: Sequence[float]) -> None:
        self.position = _vec3(position)

    def update_chunk(self, chunk: Sequence[int]) -> None:
        self.chunk = _ivec3(chunk)

    def describe(self) -> list[str]:
        x, y, z = self.position
        return [f"Entity Position: x:{x:.3f} , y:{y:.3f} , z:{z:.3f}"]


@dataclass
class VelocityComponent:
    velocity: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        self.velocity = _vec3(self.velocity)


def _rotation(angle_degrees: float, axis: int) -> np.ndarray:
    angle = math.radians(angle_degrees)
    c, s = math.cos(angle), math.sin(angle)
    matrix = np.identity(4)
    i, j = [(1, 2), (2, 0), (0, 1)][axis]
    matrix[i, i] = c
    matrix[i, j] = -s
    matrix[j, i] = s
    matrix[j, j] = c
    return matrix


class TransformComponent(Renderable):
    """Model matrix (column-vector convention) with scale and Euler controls."""

    def __init__(
        self,
        transform: Sequence[Sequence[float]] | np.ndarray | None = None,
        model_id: int = 0,
        color: Sequence[float] = (1.0, 1.0, 1.0),
    ) -> None:
        matrix = np.identity(4) if transform is None else np.array(transform, dtype=float)
        if matrix.shape != (4, 4):
            raise ValueError("transform must be a 4x4 matrix")
        self.scale = 1.0
        self.yaw = 0.0
        self.pitch = 0.0
        self.roll = 0.0
        self.model_id = int(model_id)
        self.color = _vec3(color)
        self.transform = matrix @ np.diag([self.scale, self.scale, self.scale, 1.0])

    def update_position(self, position: Sequence[float]) -> np.ndarray:
        """Set the translation part and return the matrix."""
        self.transform[:3, 3] = _vec3(position)
        return self.transform

    def set_scale(self, scale: float) -> None:
        self.scale = float(scale)
        for i in range(3):
            self.transform[i, i] = self.scale

    def _reset_rotation(self, angle: float, axis: int) -> None:
        matrix = _rotation(angle, axis) * self.scale
        matrix[3, 3] = 1.0
        self.transform = matrix

    def set_yaw(self, yaw: float) -> None:
        """Replace the matrix with a scaled rotation about the Y axis."""
        self.yaw = float(yaw)
        self._reset_rotation(self.yaw, 1)

    def set_pitch(self, pitch: float) -> None:
        """Replace the matrix with a scaled rotation about the X axis."""
        self.pitch = float(pitch)
        self._reset_rotation(self.pitch, 0)

    def set_roll(self, roll: float) -> None:
        """Replace the matrix with a scaled rotation about the Z axis."""
        self.roll = float(roll)
        self._reset_rotation(self.roll, 2)

    def describe(self) -> list[str]:
        lines = ["Entity Transform Matrix"]
        for index, row in enumerate(self.transform, start=1):
            lines.append(f"Row {index}: " + ", ".join(f"{v:.3f}" for v in row))
        lines.append(f"Scale: {self.scale:.3f}")
        lines.append(f"Yaw (Y-axis): {self.yaw:.3f}")
        lines.append(f"Pitch (X-axis): {self.pitch:.3f}")
        lines.append(f"Roll (Z-axis): {self.roll:.3f}")
        return lines


@dataclass
class CircularOrbitComponent(Renderable):
    """A circular Earth orbit; its period is sped up for display."""

    radius: float
    inclination: float
    omega: float
    period: float = field(init=False)

    def __post_init__(self) -> None:
        self.period = orbital_period(G, M, self.radius) * _PERIOD_SCALE

    def current_position(self, now_ms: float | None = None) -> tuple[float, float, float]:
        """Position on the orbit at ``now_ms`` (ms since the epoch; default now)."""
        return position_at_time(self.radius, self.inclination, self.omega, self.period, now_ms)

    def set_radius(self, radius: float) -> None:
        """Change the radius as the inspector does, recomputing the period."""
        self.radius = float(radius)
        self.period = orbital_period(G, M, self.radius) * _EDITED_PERIOD_SCALE

    def describe(self) -> list[str]:
        return [
            "Entity Orbital Information",
            f"Radius: {self.radius:.3f}",
            f"Inclination: {self.inclination:.3f}",
            f"Omega: {self.omega:.3f}",
            f"Period: {self.period:.3f}",
        ]


@dataclass(eq=False)
class RenderTransferData:
    """One instance to draw: its model matrix and color."""

    transform: np.ndarray
    color: tuple[float, float, float]


@dataclass
class RenderBatch:
    """All instances of one model to draw in a frame."""

    model_id: int
    instances: list[RenderTransferData] = field(default_factory=list)