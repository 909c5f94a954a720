"""Bounding volume hierarchy construction and ray/box tests."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

import numpy as np

from globesim.geometry import BoundingBox, BVHNode, Ray, Triangle

_CORNER_ORDER = ("rbb", "rbt", "rft", "rfb", "lbb", "lbt", "lft", "lfb")


def _transform_point(transform, point) -> np.ndarray:
    point = np.asarray(point, dtype=float)
    if transform is None:
        return point
    matrix = np.asarray(transform, dtype=float)
    return (matrix @ np.append(point, 1.0))[:3]


def ray_intersects_bounding_box(
    ray: Ray, bbox: BoundingBox, transform=None
) -> tuple[bool, float]:
    """Slab test of ``ray`` against ``bbox`` moved by a 4x4 ``transform``.

    Returns ``(hit, distance)``; the distance is ``0.0`` on a miss.
    """
    origin = np.asarray(ray.origin, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        inverse = 1.0 / np.asarray(ray.direction, dtype=float)
        t_min = (_transform_point(transform, bbox.lbb) - origin) * inverse
        t_max = (_transform_point(transform, bbox.rft) - origin) * inverse
    near = float(np.max(np.minimum(t_min, t_max)))
    far = float(np.min(np.maximum(t_min, t_max)))
    if near > far or far < 0:
        return False, 0.0
    return True, near


def generate_triangles(vertices: Iterable[float], indices: Sequence[int]) -> list[Triangle]:
    """Triangles from flat xyz positions and three indices per triangle."""
    coords = [float(v) for v in vertices]
    indices = [int(i) for i in indices]
    if len(indices) % 3:
        raise ValueError("index count must be a multiple of three")

    def point(index: int) -> list[float]:
        base = index * 3
        if index < 0 or base + 3 > len(coords):
            raise IndexError(f"vertex index {index} out of range")
        return coords[base:base + 3]

    it = iter(indices)
    return [Triangle(point(a), point(b), point(c)) for a, b, c in zip(it, it, it)]


def build_bvh(triangles: Iterable[Triangle]) -> BVHNode:
    """Build a hierarchy whose leaves hold at most two triangles."""
    tris = list(triangles)
    if not tris:
        raise ValueError("cannot build a BVH from no triangles")
    return _build(tris, 0, len(tris))


def generate_bvh_for_model(vertices: Iterable[float], indices: Sequence[int]) -> BVHNode:
    return build_bvh(generate_triangles(vertices, indices))


def _build(tris: list[Triangle], start: int, end: int) -> BVHNode:
    box = replace(tris[start].bounding_box)
    for tri in tris[start + 1:end]:
        box.expand(tri.bounding_box)

    count = end - start
    if count <= 2:
        return _leaf(tris, start, end, box)

    axis = box.max_extent()
    if count > 10:
        mid = partition_by_sah(tris, start, end, axis)
    else:
        mid = partition_by_spatial_median(tris, start, end, axis)
    if mid in (start, end):
        mid = (start + end) // 2

    left = _build(tris, start, mid)
    right = _build(tris, mid, end)
    return BVHNode(bounding_box=box, left=left, right=right)


def _leaf(tris: list[Triangle], start: int, end: int, box: BoundingBox) -> BVHNode:
    members = tris[start:end]
    with np.errstate(invalid="ignore", divide="ignore"):
        total = np.sum([t.normal / np.linalg.norm(t.normal) for t in members], axis=0)
        average = total / np.linalg.norm(total)
    box.set_color(average)
    return BVHNode(bounding_box=box, triangles=members)


def partition_by_spatial_median(
    triangles: list[Triangle], start: int, end: int, axis: int
) -> int:
    """Split ``triangles[start:end]`` in place about the centroid midpoint.

    Returns the index of the first triangle of the upper group.
    """
    if end <= start:
        raise ValueError("empty triangle range")
    median = (triangles[start].centroid[axis] + triangles[end - 1].centroid[axis]) / 2.0
    segment = triangles[start:end]
    lower = [t for t in segment if t.centroid[axis] < median]
    upper = [t for t in segment if not t.centroid[axis] < median]
    triangles[start:end] = lower + upper
    return start + len(lower)


def partition_by_sah(triangles: list[Triangle], start: int, end: int, axis: int) -> int:
    """Sort ``triangles[start:end]`` along ``axis`` and pick the cheapest split.

    Returns the index of the first triangle of the right-hand group.
    """
    if end <= start:
        raise ValueError("empty triangle range")
    segment = sorted(triangles[start:end], key=lambda t: t.centroid[axis])
    triangles[start:end] = segment
    count = len(segment)

    left_boxes: list[BoundingBox] = []
    box = replace(segment[0].bounding_box)
    left_boxes.append(box)
    for tri in segment[1:]:
        box = replace(box)
        box.expand(tri.bounding_box)
        left_boxes.append(box)

    right_boxes: list[BoundingBox] = []
    box = replace(segment[-1].bounding_box)
    right_boxes.append(box)
    for tri in reversed(segment[:-1]):
        box = replace(box)
        box.expand(tri.bounding_box)
        right_boxes.append(box)
    right_boxes.reverse()

    best_cost = float("inf")
    best = start
    for i in range(count - 1):
        cost = (
            left_boxes[i].surface_area() * (i + 1)
            + right_boxes[i + 1].surface_area() * (count - (i + 1))
        )
        if cost < best_cost:
            best_cost = cost
            best = start + i + 1
    return best


def bvh_leaf_lines(node: BVHNode | None, transform=None) -> list[float]:
    """Edge lines (position and color per endpoint) of every leaf box."""
    if node is None:
        return []
    lines: list[float] = []
    for leaf in node.iter_leaves():
        source = leaf.bounding_box
        box = BoundingBox(color=np.array(source.color, dtype=float))
        box.set_from_corners(
            *(_transform_point(transform, getattr(source, name)) for name in _CORNER_ORDER)
        )
        lines.extend(box.render_lines())
    return lines