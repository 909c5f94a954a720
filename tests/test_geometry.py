import itertools

import numpy as np
import pytest

from globesim.geometry import BoundingBox, BVHNode, Triangle


def test_default_box_is_unset_and_white():
    box = BoundingBox()
    assert not box.is_set
    assert np.allclose(box.color, (1.0, 1.0, 1.0))


def test_from_aabb_sets_extents_and_corners():
    box = BoundingBox.from_aabb((1, 2, 3), (4, 5, 6))
    assert box.is_set
    assert np.allclose(box.min, (1, 2, 3))
    assert np.allclose(box.max, (4, 5, 6))
    assert np.allclose(box.lbb, (1, 2, 3))
    assert np.allclose(box.rft, (4, 5, 6))
    assert np.allclose(box.rbb, (4, 2, 3))
    assert np.allclose(box.lft, (1, 5, 6))


def test_expand_encloses_both_boxes():
    box = BoundingBox.from_aabb((0, 0, 0), (1, 1, 1))
    other = BoundingBox.from_aabb((-1, 0.5, 0), (0.5, 3, 1))
    box.expand(other)
    assert np.allclose(box.min, (-1, 0, 0))
    assert np.allclose(box.max, (1, 3, 1))
    assert np.allclose(box.lbb, box.min)
    assert np.allclose(box.rft, box.max)


def test_expand_does_not_change_other():
    box = BoundingBox.from_aabb((0, 0, 0), (1, 1, 1))
    other = BoundingBox.from_aabb((2, 2, 2), (3, 3, 3))
    box.expand(other)
    assert np.allclose(other.min, (2, 2, 2))


@pytest.mark.parametrize("axis", [0, 1, 2])
def test_max_extent_picks_longest_axis(axis):
    extent = [1.0, 1.0, 1.0]
    extent[axis] = 5.0
    box = BoundingBox.from_aabb((0, 0, 0), extent)
    assert box.max_extent() == axis


def test_surface_area_of_unit_cube():
    assert BoundingBox.from_aabb((0, 0, 0), (1, 1, 1)).surface_area() == pytest.approx(6.0)


def test_surface_area_scales_quadratically():
    small = BoundingBox.from_aabb((0, 0, 0), (1, 2, 3)).surface_area()
    large = BoundingBox.from_aabb((0, 0, 0), (2, 4, 6)).surface_area()
    assert large == pytest.approx(4 * small)


def test_render_lines_cover_the_corners():
    lo, hi = (0.0, 1.0, 2.0), (3.0, 4.0, 5.0)
    box = BoundingBox.from_aabb(lo, hi)
    lines = box.render_lines()
    assert len(lines) == 144
    rows = np.array(lines).reshape(-1, 6)
    assert np.allclose(rows[:, 3:], box.color)
    corners = {tuple(c) for c in itertools.product(*zip(lo, hi))}
    assert {tuple(r) for r in rows[:, :3]} == corners


def test_set_color_changes_rendered_color():
    box = BoundingBox.from_aabb((0, 0, 0), (1, 1, 1))
    box.set_color((0.25, 0.5, 0.75))
    rows = np.array(box.render_lines()).reshape(-1, 6)
    assert np.allclose(rows[:, 3:], (0.25, 0.5, 0.75))


def test_set_from_corners_recovers_aabb():
    source = BoundingBox.from_aabb((-1, -2, -3), (1, 2, 3))
    box = BoundingBox()
    box.set_from_corners(
        source.rbb, source.rbt, source.rft, source.rfb,
        source.lbb, source.lbt, source.lft, source.lfb,
    )
    assert box.is_set
    assert np.allclose(box.min, (-1, -2, -3))
    assert np.allclose(box.max, (1, 2, 3))


def test_triangle_centroid_normal_and_box():
    v0, v1, v2 = (0, 0, 0), (3, 0, 0), (0, 3, 0)
    tri = Triangle(v0, v1, v2)
    assert np.allclose(tri.centroid, np.mean([v0, v1, v2], axis=0))
    assert np.allclose(tri.normal, (0, 0, 1))
    assert np.linalg.norm(tri.normal) == pytest.approx(1.0)
    assert np.allclose(tri.bounding_box.min, (0, 0, 0))
    assert np.allclose(tri.bounding_box.max, (3, 3, 0))


def test_triangle_rejects_bad_vertex():
    with pytest.raises(ValueError):
        Triangle((0, 0), (1, 0, 0), (0, 1, 0))


def test_bvh_node_leaves_in_order():
    a, b, c = BVHNode(), BVHNode(), BVHNode()
    inner = BVHNode(left=b, right=c)
    root = BVHNode(left=a, right=inner)
    assert a.is_leaf()
    assert not root.is_leaf()
    leaves = list(root.iter_leaves())
    assert len(leaves) == 3
    assert all(x is y for x, y in zip(leaves, [a, b, c]))