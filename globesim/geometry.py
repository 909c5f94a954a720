"""Geometric primitives for picking and bounding volume hierarchies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence

import numpy as np

_EDGES = (
    ("lbb", "rbb"),
    ("rbb", "rfb"),
    ("rfb", "lfb"),
    ("lfb", "lbb"),
    ("lbt", "rbt"),
    ("rbt", "rft"),
    ("rft", "lft"),
    ("lft", "lbt"),
    ("lbb", "lbt"),
    ("rbb", "rbt"),
    ("rfb", "rft"),
    ("lfb", "lft"),
)


def _vec(values: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.array(values, dtype=float)
    if arr.shape != (3,):
        raise ValueError("expected a 3-component vector")
    return arr


def _zeros() -> np.ndarray:
    return np.zeros(3)


def _normalized(v: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore", divide="ignore"):
        return v / np.linalg.norm(v)


@dataclass(eq=False)
class BoundingBox:
    """Axis-aligned box with its eight named corners.

    Corner names read Left/Right (x), Back/Front (z), Bottom/Top (y).
    Arrays held by a box are replaced, never changed in place, so a shallow
    copy of a box is independent of the original.
    """

    min: np.ndarray = field(default_factory=_zeros)
    max: np.ndarray = field(default_factory=_zeros)
    rbb: np.ndarray = field(default_factory=_zeros)
    rbt: np.ndarray = field(default_factory=_zeros)
    rft: np.ndarray = field(default_factory=_zeros)
    rfb: np.ndarray = field(default_factory=_zeros)
    lbb: np.ndarray = field(default_factory=_zeros)
    lbt: np.ndarray = field(default_factory=_zeros)
    lft: np.ndarray = field(default_factory=_zeros)
    lfb: np.ndarray = field(default_factory=_zeros)
    color: np.ndarray = field(default_factory=lambda: np.ones(3))
    is_set: bool = False

    @classmethod
    def from_aabb(cls, minimum, maximum) -> "BoundingBox":
        box = cls()
        box.set_from_aabb(minimum, maximum)
        return box

    def _corners_from_extents(self) -> None:
        lo, hi = self.min, self.max
        self.rbb = np.array([hi[0], lo[1], lo[2]])
        self.rbt = np.array([hi[0], hi[1], lo[2]])
        self.rft = np.array([hi[0], hi[1], hi[2]])
        self.rfb = np.array([hi[0], lo[1], hi[2]])
        self.lbb = np.array([lo[0], lo[1], lo[2]])
        self.lbt = np.array([lo[0], hi[1], lo[2]])
        self.lft = np.array([lo[0], hi[1], hi[2]])
        self.lfb = np.array([lo[0], lo[1], hi[2]])

    def set_from_aabb(self, minimum, maximum) -> None:
        self.min = _vec(minimum)
        self.max = _vec(maximum)
        self._corners_from_extents()
        self.is_set = True

    def expand(self, other: "BoundingBox") -> None:
        """Grow to enclose ``other``."""
        self.min = np.minimum(self.min, other.min)
        self.max = np.maximum(self.max, other.max)
        self._corners_from_extents()

    def max_extent(self) -> int:
        """Index of the longest axis (0, 1 or 2); ties go to the later axis."""
        ex, ey, ez = self.max - self.min
        if ex > ey and ex > ez:
            return 0
        if ey > ez:
            return 1
        return 2

    def set_from_corners(self, rbb, rbt, rft, rfb, lbb, lbt, lft, lfb) -> None:
        self.rbb, self.rbt, self.rft, self.rfb = _vec(rbb), _vec(rbt), _vec(rft), _vec(rfb)
        self.lbb, self.lbt, self.lft, self.lfb = _vec(lbb), _vec(lbt), _vec(lft), _vec(lfb)
        self.min = np.minimum(self.lbb, np.minimum(self.lft, self.rfb))
        self.max = np.maximum(self.rbb, np.maximum(self.rft, self.lbt))
        self.is_set = True

    def surface_area(self) -> float:
        width, height, depth = self.max - self.min
        return float(2.0 * (width * height + height * depth + depth * width))

    def render_lines(self) -> list[float]:
        """The twelve edges as line segments: position then color per endpoint."""
        color = [float(c) for c in self.color]
        lines: list[float] = []
        for start, end in _EDGES:
            for name in (start, end):
                lines.extend(float(c) for c in getattr(self, name))
                lines.extend(color)
        return lines

    def set_color(self, color) -> None:
        self.color = _vec(color)


class Triangle:
    """A triangle with its centroid, unit normal and bounding box."""

    def __init__(self, v0, v1, v2) -> None:
        self.v0 = _vec(v0)
        self.v1 = _vec(v1)
        self.v2 = _vec(v2)
        self.centroid = (self.v0 + self.v1 + self.v2) / 3.0
        self.bounding_box = BoundingBox.from_aabb(
            np.minimum(self.v0, np.minimum(self.v1, self.v2)),
            np.maximum(self.v0, np.maximum(self.v1, self.v2)),
        )
        self.normal = _normalized(np.cross(self.v1 - self.v0, self.v2 - self.v0))


@dataclass(eq=False)
class BVHNode:
    """Node of a bounding volume hierarchy; leaves hold triangles."""

    bounding_box: BoundingBox = field(default_factory=BoundingBox)
    left: "BVHNode | None" = None
    right: "BVHNode | None" = None
    triangles: list[Triangle] = field(default_factory=list)

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def iter_leaves(self) -> Iterator["BVHNode"]:
        """Leaves in depth-first order, left before right."""
        stack: list[BVHNode] = [self]
        while stack:
            node = stack.pop()
            if node.is_leaf():
                yield node
                continue
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)


@dataclass(eq=False)
class Ray:
    """A picking ray with a far end point and a line for drawing it."""

    origin: np.ndarray = field(default_factory=_zeros)
    direction: np.ndarray = field(default_factory=_zeros)
    end: np.ndarray = field(default_factory=_zeros)
    line_vertices: list[float] = field(default_factory=list)