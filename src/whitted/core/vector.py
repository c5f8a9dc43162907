"""Immutable 3-component vector algebra.

Every operation returns a new Vector3; nothing is mutated in place. Vectors
are used for points, directions and surface normals on the host side. The
taichi kernels use ``taichi.math.vec3`` instead and receive host vectors
through ``to_tuple()``.

Example:
    >>> from whitted.core.vector import Vector3
    >>> a = Vector3(1.0, 0.0, 0.0)
    >>> b = Vector3(0.0, 1.0, 0.0)
    >>> a.cross(b)
    Vector3(x=0.0, y=0.0, z=1.0)
    >>> a.dot(b)
    0.0
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from whitted.core.errors import InvalidOperation


@dataclass(frozen=True)
class Vector3:
    """A point or direction in 3D space.

    Attributes:
        x: The x component.
        y: The y component.
        z: The z component.
    """

    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> Vector3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> Vector3:
        """Build a vector from any 3-element iterable (tuple, list, ndarray)."""
        x, y, z = (float(v) for v in values)
        return cls(x, y, z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def add(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def subtract(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, factor: float) -> Vector3:
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    def displace(self, point: Vector3) -> Vector3:
        """Move ``point`` by this vector.

        Equivalent to ``point + self``; reads naturally when this vector is an
        offset, e.g. ``direction.scale(t).displace(origin)``.
        """
        return Vector3(point.x + self.x, point.y + self.y, point.z + self.z)

    def __add__(self, other: Vector3) -> Vector3:
        return self.add(other)

    def __sub__(self, other: Vector3) -> Vector3:
        return self.subtract(other)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, factor: float) -> Vector3:
        return self.scale(factor)

    def __rmul__(self, factor: float) -> Vector3:
        return self.scale(factor)

    def __truediv__(self, divisor: float) -> Vector3:
        return self.scale(1.0 / divisor)

    # =========================================================================
    # Products and norms
    # =========================================================================

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def norm_squared(self) -> float:
        return self.dot(self)

    def norm(self) -> float:
        return math.sqrt(self.dot(self))

    def normalize(self) -> Vector3:
        """Return the unit vector pointing in the same direction.

        Returns:
            A vector of length 1.

        Raises:
            InvalidOperation: If this is the zero vector.
        """
        length = self.norm()
        if length == 0.0:
            raise InvalidOperation("Cannot normalize a zero-length vector")
        return self.scale(1.0 / length)

    def reflect(self, normal: Vector3) -> Vector3:
        """Mirror this vector about a unit normal: ``v - 2 (v . n) n``."""
        return self.subtract(normal.scale(2.0 * self.dot(normal)))

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_numpy(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)
