"""Sphere primitive with ray-sphere intersection.

The intersection uses the geometric (projection) form rather than the
quadratic formula. With ``L = center - origin`` and a unit direction ``D``:

    d  = L . D               projection of the center onto the ray
    h2 = L . L - d^2         squared distance from the center to the ray line
    s2 = radius^2 - h2       negative means the line misses the sphere

and the near root is ``t0 = d - sqrt(s2)``. Only ``t0 > 0`` counts as a hit;
the far root is never returned, so a ray starting inside the sphere does not
see it.

Example:
    >>> from whitted.core.ray import Ray
    >>> from whitted.core.vector import Vector3
    >>> from whitted.geometry.sphere import Sphere
    >>> from whitted.materials.material import Material
    >>> sphere = Sphere(Vector3(0, 0, -5), 1.0, Material.from_rgb(1, 1, 1))
    >>> sphere.intersect(Ray(Vector3(0, 0, 0), Vector3(0, 0, -1)))
    4.0
"""

import math

import taichi as ti
import taichi.math as tm

from whitted.core.errors import InvalidConfiguration
from whitted.core.ray import Ray
from whitted.core.vector import Vector3
from whitted.geometry.base import PointTransform, Primitive, PrimitiveKind
from whitted.materials.material import Material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Returned by device intersection routines when the ray misses
NO_HIT = -1.0


class Sphere(Primitive):
    """A sphere defined by center point and radius.

    Attributes:
        center: The center of the sphere. Moved by ``update``.
        radius: The radius (positive, finite).
        material: The surface material.
    """

    kind = PrimitiveKind.SPHERE

    def __init__(self, center: Vector3, radius: float, material: Material) -> None:
        super().__init__(material)
        if not center.is_finite():
            raise InvalidConfiguration(f"Sphere center must be finite, got {center}")
        if not math.isfinite(radius) or radius <= 0.0:
            raise InvalidConfiguration(f"Sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = float(radius)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"

    @property
    def position(self) -> Vector3:
        return self.center

    def intersect(self, ray: Ray) -> float | None:
        to_center = self.center.subtract(ray.origin)
        d = to_center.dot(ray.direction)
        h2 = to_center.dot(to_center) - d * d
        s2 = self.radius * self.radius - h2
        if s2 < 0.0:
            return None

        t0 = d - math.sqrt(s2)
        return t0 if t0 > 0.0 else None

    def surface_normal(self, hit_point: Vector3) -> Vector3:
        return hit_point.subtract(self.center).normalize()

    def update(self, transform: PointTransform) -> None:
        self.center = transform(self.center)


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, center: vec3, radius: ti.f64) -> ti.f64:
    """Device version of ``Sphere.intersect``.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        center: The sphere center.
        radius: The sphere radius.

    Returns:
        The near-root distance if it is positive, otherwise NO_HIT.
    """
    to_center = center - ray_origin
    d = tm.dot(to_center, ray_direction)
    h2 = tm.dot(to_center, to_center) - d * d
    s2 = radius * radius - h2

    t = NO_HIT
    if s2 >= 0.0:
        t0 = d - ti.sqrt(s2)
        if t0 > 0.0:
            t = t0
    return t


@ti.func
def sphere_normal(hit_point: vec3, center: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return tm.normalize(hit_point - center)
