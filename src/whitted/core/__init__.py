"""Core building blocks: vectors, rays, transforms and errors.

Components:
    vector: Immutable 3D vector algebra
    ray: Ray data structure plus Taichi ray helpers
    transform: Affine transforms and 2x2 inversion
    errors: Exception types raised by the renderer
    integrator: Taichi shading kernel (import directly, see below)

Note: integrator is NOT imported here. It declares Taichi fields at import
time, so import ``whitted.core.integrator`` only after ``init_backend``.
"""

from .errors import InvalidConfiguration, InvalidOperation
from .ray import Ray, ray_at, reflect, vec3
from .transform import AffineTransform, inverse
from .vector import Vector3

__all__ = [
    "AffineTransform",
    "InvalidConfiguration",
    "InvalidOperation",
    "Ray",
    "Vector3",
    "inverse",
    "ray_at",
    "reflect",
    "vec3",
]
