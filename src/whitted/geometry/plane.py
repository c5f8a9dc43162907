"""Infinite plane primitive.

A plane is a point on it (``origin``) and a unit ``normal``. It is one-sided:
only rays travelling against the normal (``normal . direction < 0``) can hit
it, which also rules out rays parallel to the plane. The hit distance is

    t = ((origin_plane - origin_ray) . normal) / (normal . direction)

and is accepted when ``t >= 0``.

``update`` moves the origin only. The normal is orientation and is left
unchanged by transforms.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.errors import InvalidConfiguration, InvalidOperation
from whitted.core.ray import Ray
from whitted.core.vector import Vector3
from whitted.geometry.base import PointTransform, Primitive, PrimitiveKind
from whitted.geometry.sphere import NO_HIT
from whitted.materials.material import Material

vec3 = tm.vec3


class Plane(Primitive):
    """An infinite one-sided plane.

    Attributes:
        origin: A point on the plane. Moved by ``update``.
        normal: The unit front-face normal (normalized on construction).
        material: The surface material.
    """

    kind = PrimitiveKind.PLANE

    def __init__(self, origin: Vector3, normal: Vector3, material: Material) -> None:
        super().__init__(material)
        if not origin.is_finite():
            raise InvalidConfiguration(f"Plane origin must be finite, got {origin}")
        try:
            self.normal = normal.normalize()
        except InvalidOperation as e:
            raise InvalidConfiguration("Plane normal must be non-zero") from e
        self.origin = origin

    def __repr__(self) -> str:
        return f"Plane(origin={self.origin}, normal={self.normal})"

    @property
    def position(self) -> Vector3:
        return self.origin

    def intersect(self, ray: Ray) -> float | None:
        proj = self.normal.dot(ray.direction)
        if proj < 0.0:
            d = self.origin.subtract(ray.origin).dot(self.normal) / proj
            if d >= 0.0:
                return d
        return None

    def surface_normal(self, hit_point: Vector3) -> Vector3:
        return self.normal

    def update(self, transform: PointTransform) -> None:
        self.origin = transform(self.origin)


@ti.func
def hit_plane(ray_origin: vec3, ray_direction: vec3, origin: vec3, normal: vec3) -> ti.f64:
    """Device version of ``Plane.intersect``; returns NO_HIT on a miss."""
    proj = tm.dot(normal, ray_direction)

    t = NO_HIT
    if proj < 0.0:
        d = tm.dot(origin - ray_origin, normal) / proj
        if d >= 0.0:
            t = d
    return t
