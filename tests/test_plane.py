"""Unit tests for plane intersection.

Tests cover:
- Front-facing hits and back-face culling
- Parallel rays
- Normal normalization and zero-normal rejection
- Update moves the origin and keeps the normal
- Host and device routines agree
"""

import pytest
import taichi as ti


def _floor(normal=(0.0, 1.0, 0.0)):
    from whitted.core.vector import Vector3
    from whitted.geometry.plane import Plane
    from whitted.materials.material import Material

    return Plane(Vector3(0.0, -1.0, 0.0), Vector3(*normal), Material.from_rgb(0.4, 0.8, 0.4))


def _ray(origin, direction):
    from whitted.core.ray import Ray
    from whitted.core.vector import Vector3

    return Ray(Vector3(*origin), Vector3(*direction))


class TestPlaneIntersection:
    """Tests for Plane.intersect."""

    def test_straight_down_hit(self):
        plane = _floor()
        assert plane.intersect(_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))) == pytest.approx(1.0)

    def test_oblique_hit_distance(self):
        plane = _floor()
        ray = _ray((0.0, 0.0, 0.0), (0.0, -1.0, -1.0))
        t = plane.intersect(ray)
        assert t == pytest.approx(2.0**0.5)
        assert ray.at(t).y == pytest.approx(-1.0)

    def test_back_face_is_culled(self):
        plane = _floor()
        assert plane.intersect(_ray((0.0, -2.0, 0.0), (0.0, 1.0, 0.0))) is None

    def test_parallel_ray_misses(self):
        plane = _floor()
        assert plane.intersect(_ray((0.0, 0.0, 0.0), (1.0, 0.0, -1.0))) is None

    def test_plane_behind_ray_origin(self):
        plane = _floor()
        # Moving away from the plane while below it along the normal
        assert plane.intersect(_ray((0.0, -2.0, 0.0), (0.0, -1.0, 0.0))) is None


class TestPlaneProperties:
    """Tests for normals, validation and updates."""

    def test_normal_is_normalized(self):
        from whitted.core.vector import Vector3

        plane = _floor(normal=(0.0, 5.0, 0.0))
        assert plane.normal == Vector3(0.0, 1.0, 0.0)
        assert plane.surface_normal(Vector3(3.0, -1.0, -7.0)) == plane.normal

    def test_zero_normal_raises(self):
        from whitted.core.errors import InvalidConfiguration

        with pytest.raises(InvalidConfiguration):
            _floor(normal=(0.0, 0.0, 0.0))

    def test_update_moves_origin_and_keeps_normal(self):
        from whitted.core.transform import AffineTransform
        from whitted.core.vector import Vector3

        plane = _floor()
        plane.update(AffineTransform.translation(0.0, 0.5, 0.0))
        assert plane.origin == Vector3(0.0, -0.5, 0.0)
        assert plane.normal == Vector3(0.0, 1.0, 0.0)
        assert plane.intersect(_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))) == pytest.approx(0.5)


class TestDevicePlane:
    """Tests for the Taichi plane routine."""

    def test_hit_plane_matches_host(self):
        from whitted.geometry.plane import hit_plane
        from whitted.geometry.sphere import NO_HIT, vec3

        result = ti.field(dtype=ti.f64, shape=3)

        @ti.kernel
        def test_kernel():
            origin = vec3(0.0, -1.0, 0.0)
            normal = vec3(0.0, 1.0, 0.0)
            result[0] = hit_plane(vec3(0.0, 0.0, 0.0), vec3(0.0, -1.0, 0.0), origin, normal)
            result[1] = hit_plane(vec3(0.0, -2.0, 0.0), vec3(0.0, 1.0, 0.0), origin, normal)
            result[2] = hit_plane(vec3(0.0, 0.0, 0.0), vec3(1.0, 0.0, 0.0), origin, normal)

        test_kernel()
        assert result[0] == pytest.approx(1.0)
        assert result[1] == NO_HIT
        assert result[2] == NO_HIT
