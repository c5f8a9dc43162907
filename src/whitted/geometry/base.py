"""Common interface of the geometric primitives.

The primitive set is closed (spheres and planes), but both share one
capability set so the scene can scan them uniformly:

- ``intersect(ray)``: distance along the ray to the visible hit, or None.
- ``surface_normal(point)``: unit normal at a point on the surface.
- ``update(transform)``: move the primitive's position through a
  ``Vector3 -> Vector3`` mapping, in place.

``kind`` tags each variant for the device-side primitive table.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import IntEnum

from whitted.core.ray import Ray
from whitted.core.vector import Vector3
from whitted.materials.material import Material

# A per-frame point mapping, e.g. an AffineTransform
PointTransform = Callable[[Vector3], Vector3]


class PrimitiveKind(IntEnum):
    """Tag stored in the device primitive table to dispatch intersection."""

    SPHERE = 0
    PLANE = 1


class Primitive(ABC):
    """A surface that rays can hit.

    Attributes:
        material: The surface material used for shading.
    """

    kind: PrimitiveKind

    def __init__(self, material: Material) -> None:
        self.material = material

    @property
    @abstractmethod
    def position(self) -> Vector3:
        """The point that ``update`` moves (sphere center, plane origin)."""

    @abstractmethod
    def intersect(self, ray: Ray) -> float | None:
        """Return the distance to the hit along ``ray``, or None on a miss."""

    @abstractmethod
    def surface_normal(self, hit_point: Vector3) -> Vector3:
        """Return the unit surface normal at ``hit_point``."""

    @abstractmethod
    def update(self, transform: PointTransform) -> None:
        """Replace the primitive's position with ``transform(position)``."""
