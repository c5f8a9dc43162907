"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere, or pointing away from it
- Ray starting inside sphere (no hit, the far root is never returned)
- Surface normals
- Host and device routines agree
- Construction validation
"""

import math

import pytest
import taichi as ti


def _sphere(center=(0.0, 0.0, -5.0), radius=1.0):
    from whitted.core.vector import Vector3
    from whitted.geometry.sphere import Sphere
    from whitted.materials.material import Material

    return Sphere(Vector3(*center), radius, Material.from_rgb(1.0, 1.0, 1.0))


def _ray(origin, direction):
    from whitted.core.ray import Ray
    from whitted.core.vector import Vector3

    return Ray(Vector3(*origin), Vector3(*direction))


class TestSphereIntersection:
    """Tests for Sphere.intersect."""

    def test_direct_hit(self):
        sphere = _sphere()
        assert sphere.intersect(_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))) == pytest.approx(4.0)

    def test_hit_through_center_is_distance_minus_radius(self):
        from whitted.core.vector import Vector3

        sphere = _sphere(center=(1.0, 2.0, -6.0), radius=1.5)
        origin = Vector3(-0.5, 0.3, 0.8)
        ray = _ray(origin.to_tuple(), sphere.center.subtract(origin).to_tuple())
        expected = sphere.center.subtract(origin).norm() - 1.5
        assert sphere.intersect(ray) == pytest.approx(expected, abs=1e-9)

    def test_miss(self):
        sphere = _sphere()
        assert sphere.intersect(_ray((0.0, 0.0, 0.0), (0.0, 1.0, -1.0))) is None

    def test_pointing_away(self):
        sphere = _sphere()
        assert sphere.intersect(_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))) is None

    def test_origin_inside_has_no_hit(self):
        sphere = _sphere(center=(0.0, 0.0, 0.0), radius=2.0)
        assert sphere.intersect(_ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))) is None

    def test_tangent_ray_hits(self):
        sphere = _sphere(center=(0.0, 1.0, -5.0), radius=1.0)
        t = sphere.intersect(_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)))
        assert t == pytest.approx(5.0)


class TestSphereNormal:
    """Tests for Sphere.surface_normal."""

    def test_normal_points_outward(self):
        from whitted.core.vector import Vector3

        sphere = _sphere()
        normal = sphere.surface_normal(Vector3(0.0, 0.0, -4.0))
        assert normal == Vector3(0.0, 0.0, 1.0)

    def test_normal_is_unit_length(self):
        from whitted.core.vector import Vector3

        sphere = _sphere(center=(0.3, -0.2, -3.0), radius=0.7)
        for theta in (0.1, 0.9, 2.0, 3.0):
            offset = Vector3(math.sin(theta), math.cos(theta), 0.4).normalize().scale(0.7)
            normal = sphere.surface_normal(sphere.center.add(offset))
            assert normal.norm() == pytest.approx(1.0, abs=1e-9)


class TestSphereUpdate:
    """Tests for moving spheres."""

    def test_update_moves_center(self):
        from whitted.core.transform import AffineTransform
        from whitted.core.vector import Vector3

        sphere = _sphere()
        sphere.update(AffineTransform.translation(1.0, 0.0, 0.0))
        assert sphere.center == Vector3(1.0, 0.0, -5.0)
        assert sphere.position == sphere.center
        assert sphere.radius == 1.0


class TestSphereValidation:
    """Tests for construction errors."""

    @pytest.mark.parametrize("radius", [0.0, -1.0, math.inf, math.nan])
    def test_bad_radius(self, radius):
        from whitted.core.errors import InvalidConfiguration

        with pytest.raises(InvalidConfiguration):
            _sphere(radius=radius)

    def test_non_finite_center(self):
        from whitted.core.errors import InvalidConfiguration

        with pytest.raises(InvalidConfiguration):
            _sphere(center=(math.inf, 0.0, 0.0))


class TestDeviceSphere:
    """Tests for the Taichi sphere routines."""

    def test_hit_sphere_matches_host(self):
        from whitted.geometry.sphere import NO_HIT, hit_sphere, vec3

        result = ti.field(dtype=ti.f64, shape=3)

        @ti.kernel
        def test_kernel():
            center = vec3(0.0, 0.0, -5.0)
            origin = vec3(0.0, 0.0, 0.0)
            result[0] = hit_sphere(origin, vec3(0.0, 0.0, -1.0), center, 1.0)
            result[1] = hit_sphere(origin, ti.math.normalize(vec3(0.0, 1.0, -1.0)), center, 1.0)
            result[2] = hit_sphere(center, vec3(1.0, 0.0, 0.0), center, 1.0)

        test_kernel()
        assert result[0] == pytest.approx(4.0)
        assert result[1] == NO_HIT
        assert result[2] == NO_HIT

    def test_sphere_normal(self):
        from whitted.geometry.sphere import sphere_normal, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = sphere_normal(vec3(0.0, 2.0, -5.0), vec3(0.0, 0.0, -5.0))

        test_kernel()
        assert tuple(result[None].to_numpy()) == pytest.approx((0.0, 1.0, 0.0))
