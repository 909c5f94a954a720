"""Per-frame update of orbiting entities: positions, chunks and draw batches."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Sequence

from globesim.components import (
    UNASSIGNED_CHUNK,
    CircularOrbitComponent,
    PositionComponent,
    RenderBatch,
    RenderTransferData,
    TransformComponent,
)
from globesim.ecs import Entity, Registry

RENDER_DISTANCE = 100
"""Entities further than this many chunks from the camera are not drawn."""


@dataclass(frozen=True)
class OrbitState:
    position: tuple[float, float, float]
    chunk: tuple[int, int, int]
    render: bool


@dataclass(frozen=True)
class ChunkMove:
    """An entity entering ``new_chunk``; ``old_chunk`` is None on first placement."""

    entity: Entity
    old_chunk: tuple[int, int, int] | None
    new_chunk: tuple[int, int, int]


def compute_orbit_state(
    orbit: CircularOrbitComponent,
    now_ms: float | None,
    chunk_size: float,
    camera_chunk: Sequence[int],
) -> OrbitState:
    """Where an orbiting entity is now, which chunk that is, and whether to draw it."""
    if chunk_size == 0:
        raise ValueError("chunk size must be non-zero")
    position = orbit.current_position(now_ms)
    chunk = tuple(math.floor(c / chunk_size + 0.5) for c in position)
    distance = math.dist(chunk, tuple(camera_chunk))
    return OrbitState(position, chunk, distance <= RENDER_DISTANCE)  # type: ignore[arg-type]


class OrbitSystem:
    """Moves every entity that has position, orbit and transform components."""

    def __init__(self, chunk_size: float) -> None:
        if chunk_size == 0:
            raise ValueError("chunk size must be non-zero")
        self.chunk_size = chunk_size

    def update(
        self,
        registry: Registry,
        now_ms: float | None = None,
        camera_chunk: Sequence[int] = (0, 0, 0),
    ) -> tuple[list[RenderBatch], list[ChunkMove]]:
        """Advance all orbits to ``now_ms``.

        Returns the draw batches, one per model in first-seen order, and the
        chunk changes the frame produced.
        """
        if now_ms is None:
            now_ms = time.time_ns() // 1_000_000
        batches: dict[int, RenderBatch] = {}
        moves: list[ChunkMove] = []

        for entity, pos, orbit, trans in registry.view(
            PositionComponent, CircularOrbitComponent, TransformComponent
        ):
            state = compute_orbit_state(orbit, now_ms, self.chunk_size, camera_chunk)
            pos.update_pos(state.position)

            if pos.chunk != state.chunk:
                old = None if pos.chunk == UNASSIGNED_CHUNK else pos.chunk
                moves.append(ChunkMove(entity, old, state.chunk))

            if state.render:
                matrix = trans.update_position(state.position).copy()
                batch = batches.setdefault(trans.model_id, RenderBatch(trans.model_id))
                batch.instances.append(RenderTransferData(matrix, trans.color))

            pos.update_chunk(state.chunk)

        return list(batches.values()), moves