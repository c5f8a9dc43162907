"""Geometric primitives.

Each primitive provides a host-side ``intersect`` for the Python backend and
a matching ``@ti.func`` used by the Taichi kernel.
"""

from .base import PointTransform, Primitive, PrimitiveKind
from .plane import Plane, hit_plane
from .sphere import NO_HIT, Sphere, hit_sphere, sphere_normal

__all__ = [
    "NO_HIT",
    "Plane",
    "PointTransform",
    "Primitive",
    "PrimitiveKind",
    "Sphere",
    "hit_plane",
    "hit_sphere",
    "sphere_normal",
]
