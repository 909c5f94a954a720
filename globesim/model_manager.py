"""Registry of loaded meshes keyed by a stable id derived from their name."""

from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass
from typing import Iterable

from globesim.bvh import generate_bvh_for_model
from globesim.geometry import BVHNode

_MAX_ID = 2**31 - 1
_FLOATS_PER_VERTEX = 8


@dataclass
class Vertex:
    position: tuple[float, float, float]
    normal: tuple[float, float, float]
    tex_coords: tuple[float, float]


@dataclass
class Model:
    vertices: list[Vertex]
    indices: list[int]
    bvh: BVHNode | None


def model_id(name: str) -> int:
    """Stable non-negative id for a model name."""
    digest = hashlib.blake2b(name.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "little") % _MAX_ID


class ModelManager:
    """Thread-safe store of models."""

    def __init__(self) -> None:
        self._models: dict[int, Model] = {}
        self._lock = threading.Lock()

    def load_vertices(self, vertices: Iterable[float], indices: Iterable[int], name: str) -> int:
        """Store a model from interleaved vertex data under ``name``.

        Each vertex is eight floats: position, normal, texture coordinates.
        An existing model of the same name is replaced. Returns the model id.
        """
        data = [float(v) for v in vertices]
        if len(data) % _FLOATS_PER_VERTEX:
            raise ValueError("vertex data must hold eight floats per vertex")
        index_list = [int(i) for i in indices]

        parsed: list[Vertex] = []
        positions: list[float] = []
        it = iter(data)
        for px, py, pz, nx, ny, nz, u, v in zip(*[it] * _FLOATS_PER_VERTEX):
            parsed.append(Vertex((px, py, pz), (nx, ny, nz), (u, v)))
            positions.extend((px, py, pz))

        bvh = generate_bvh_for_model(positions, index_list) if index_list else None
        key = model_id(name)
        with self._lock:
            self._models[key] = Model(parsed, index_list, bvh)
        return key

    def get(self, model_id: int) -> Model | None:
        """The model with this id, or None."""
        with self._lock:
            return self._models.get(model_id)

    def remove(self, model_id: int) -> bool:
        """Drop a model; returns whether it was present."""
        with self._lock:
            return self._models.pop(model_id, None) is not None

    def __contains__(self, model_id: object) -> bool:
        with self._lock:
            return model_id in self._models