"""Unit tests for the device primitive table and scene-level intersection.

Tests cover:
- Loading primitives and counts
- Closest hit across mixed primitive kinds
- Tie-breaking in scene order
- Shadow ray queries (any hit)
- Table limits
"""

import pytest
import taichi as ti


def _sphere(center, radius, reflectivity=0.0):
    from whitted.core.vector import Vector3
    from whitted.geometry.sphere import Sphere
    from whitted.materials.material import Material

    return Sphere(Vector3(*center), radius, Material.from_rgb(1.0, 1.0, 1.0, reflectivity=reflectivity))


def _floor():
    from whitted.core.vector import Vector3
    from whitted.geometry.plane import Plane
    from whitted.materials.material import Material

    return Plane(Vector3(0.0, -1.0, 0.0), Vector3(0.0, 1.0, 0.0), Material.from_rgb(0.4, 0.8, 0.4))


_kernels = {}


def _query_kernels():
    """Build the single-ray query kernels once per session."""
    if not _kernels:
        from whitted.scene.intersection import intersect_scene, intersect_scene_any, vec3

        idx = ti.field(dtype=ti.i32, shape=())
        dist = ti.field(dtype=ti.f64, shape=())
        any_hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def closest_kernel(o: vec3, d: vec3):
            # Outer loop of one so the scan inside runs serially
            for _ in range(1):
                i, t = intersect_scene(o, ti.math.normalize(d))
                idx[None] = i
                dist[None] = t

        @ti.kernel
        def any_kernel(o: vec3, d: vec3):
            for _ in range(1):
                any_hit[None] = intersect_scene_any(o, ti.math.normalize(d))

        _kernels.update(
            closest=closest_kernel, any=any_kernel, idx=idx, dist=dist, any_hit=any_hit, vec3=vec3
        )
    return _kernels


def _closest(origin, direction):
    """Run intersect_scene for one ray; returns (index, distance)."""
    k = _query_kernels()
    k["closest"](k["vec3"](*origin), k["vec3"](*direction))
    return k["idx"][None], k["dist"][None]


def _occluded(origin, direction):
    k = _query_kernels()
    k["any"](k["vec3"](*origin), k["vec3"](*direction))
    return k["any_hit"][None]


class TestPrimitiveTable:
    """Tests for loading primitives into device fields."""

    def test_load_and_count(self):
        from whitted.scene.intersection import get_primitive_count, load_primitives

        assert get_primitive_count() == 0
        count = load_primitives([_floor(), _sphere((0.0, 0.0, -2.0), 0.5)])
        assert count == 2
        assert get_primitive_count() == 2

    def test_clear_scene(self):
        from whitted.scene.intersection import clear_scene, get_primitive_count, load_primitives

        load_primitives([_sphere((0.0, 0.0, -2.0), 0.5)])
        clear_scene()
        assert get_primitive_count() == 0

    def test_rows_hold_primitive_data(self):
        from whitted.geometry.base import PrimitiveKind
        from whitted.scene.intersection import (
            load_primitives,
            material_colors,
            material_reflectivities,
            primitive_kinds,
            primitive_normals,
            primitive_positions,
            primitive_radii,
        )

        load_primitives([_floor(), _sphere((1.0, 2.0, -3.0), 0.75, reflectivity=0.25)])
        assert primitive_kinds[0] == int(PrimitiveKind.PLANE)
        assert tuple(primitive_normals[0].to_numpy()) == pytest.approx((0.0, 1.0, 0.0))
        assert tuple(material_colors[0].to_numpy()) == pytest.approx((0.4, 0.8, 0.4))
        assert primitive_kinds[1] == int(PrimitiveKind.SPHERE)
        assert tuple(primitive_positions[1].to_numpy()) == pytest.approx((1.0, 2.0, -3.0))
        assert primitive_radii[1] == pytest.approx(0.75)
        assert material_reflectivities[1] == pytest.approx(0.25)

    def test_too_many_primitives(self):
        from whitted.scene.intersection import MAX_PRIMITIVES, load_primitives

        spheres = [_sphere((0.0, 0.0, -2.0), 0.5)] * (MAX_PRIMITIVES + 1)
        with pytest.raises(RuntimeError):
            load_primitives(spheres)


class TestIntersectScene:
    """Tests for the closest-hit scan."""

    def test_empty_scene_misses(self):
        idx, _ = _closest((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert idx == -1

    def test_closest_of_mixed_primitives(self):
        from whitted.scene.intersection import load_primitives

        load_primitives([_floor(), _sphere((0.0, 0.0, -5.0), 1.0), _sphere((0.0, 0.0, -3.0), 0.5)])
        idx, t = _closest((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert idx == 2
        assert t == pytest.approx(2.5)

        idx, t = _closest((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert idx == 0
        assert t == pytest.approx(1.0)

    def test_tie_keeps_first(self):
        from whitted.scene.intersection import load_primitives

        load_primitives([_sphere((0.0, 0.0, -3.0), 0.5), _sphere((0.0, 0.0, -3.0), 0.5)])
        idx, _ = _closest((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert idx == 0

    def test_matches_host_intersection(self):
        import math

        from whitted.scene.demo import create_demo_scene
        from whitted.scene.intersection import load_primitives

        scene = create_demo_scene(8, 6)
        load_primitives(scene.primitives)
        for x, y in scene.camera.pixel_coordinates():
            ray = scene.create_prime(x, y)
            hit = scene.intersect(ray)
            idx, t = _closest(ray.origin.to_tuple(), ray.direction.to_tuple())
            if hit is None:
                assert idx == -1
            else:
                assert idx == hit.index
                assert math.isclose(t, hit.distance, rel_tol=1e-9)


class TestIntersectSceneAny:
    """Tests for shadow queries."""

    def test_occluded_and_clear(self):
        from whitted.scene.intersection import load_primitives

        load_primitives([_floor(), _sphere((0.0, 0.0, -3.0), 0.5)])
        assert _occluded((0.0, -0.999999, -3.0), (0.0, 1.0, 0.0)) == 1
        assert _occluded((0.0, -0.999999, -1.0), (0.0, 1.0, 0.0)) == 0

    def test_no_distance_limit(self):
        from whitted.scene.intersection import load_primitives

        load_primitives([_sphere((0.0, 1.0e5, 0.0), 1.0)])
        assert _occluded((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == 1
