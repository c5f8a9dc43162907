"""Ray data structure for host-side tracing and taichi helpers for kernels.

A Ray is the parametric half-line ``P(t) = origin + t * direction`` for
``t > 0``. The direction is always unit length: the constructor normalizes
whatever it is given, so a zero direction raises ``InvalidOperation``.

The ``@ti.func`` helpers mirror the host operations for use inside the
rendering kernel, where rays are passed around as ``(origin, direction)``
vec3 pairs.

Example:
    >>> from whitted.core.ray import Ray
    >>> from whitted.core.vector import Vector3
    >>> ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, -4.0))
    >>> ray.direction
    Vector3(x=0.0, y=0.0, z=-1.0)
    >>> ray.at(2.0)
    Vector3(x=0.0, y=0.0, z=-2.0)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.vector import Vector3

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@dataclass(frozen=True)
class Ray:
    """A directed half-line with a unit-length direction.

    Attributes:
        origin: The starting point of the ray.
        direction: The unit direction of travel. Normalized on construction.
    """

    origin: Vector3
    direction: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", self.direction.normalize())

    @classmethod
    def towards(cls, origin: Vector3, target: Vector3) -> "Ray":
        """Build the ray starting at ``origin`` and passing through ``target``."""
        return cls(origin, target.subtract(origin))

    def at(self, t: float) -> Vector3:
        """Point at parameter ``t``: ``origin + t * direction``."""
        return self.direction.scale(t).displace(self.origin)


@ti.func
def ray_at(origin: vec3, direction: vec3, t: ti.f64) -> vec3:
    """Compute the point along a ray at parameter t."""
    return origin + t * direction


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a unit normal.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        ``incident - 2 (incident . normal) normal``.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal
