"""Pinhole camera fixed at the world origin, looking down -Z.

For pixel ``(x, y)`` of a ``width x height`` image with full vertical field
of view ``fov`` (radians), the primary ray passes through

    fov_adjustment = tan(fov / 2)
    aspect_ratio   = width / height
    sen_x = ((x + 0.5) / width * 2 - 1) * aspect_ratio * fov_adjustment
    sen_y = 1 - (y + 0.5) / height * 2 * fov_adjustment

on the image plane ``z = -1``. The vertical term applies ``fov_adjustment``
only to the offset, not to the whole coordinate. ``symmetric_fov=True`` switches to
``sen_y = (1 - (y + 0.5) / height * 2) * fov_adjustment``, which frames the
image the same way horizontally and vertically.

Pixel ``y = 0`` is the top row of the image.

Example:
    >>> import math
    >>> from whitted.camera.pinhole import Camera
    >>> camera = Camera(width=640, height=480, fov=math.pi / 2)
    >>> ray = camera.primary_ray(320, 240)
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.errors import InvalidConfiguration
from whitted.core.ray import Ray
from whitted.core.vector import Vector3

vec3 = tm.vec3

# Every primary ray starts here
CAMERA_ORIGIN = Vector3(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Camera:
    """Image dimensions and field of view of the fixed pinhole camera.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Full vertical field of view in radians, in ``(0, pi)``.
        symmetric_fov: Use the symmetric vertical mapping (see module docs).
    """

    width: int
    height: int
    fov: float
    symmetric_fov: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidConfiguration(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if not 0.0 < self.fov < math.pi:
            raise InvalidConfiguration(f"fov must be in (0, pi) radians, got {self.fov}")

    @property
    def fov_adjustment(self) -> float:
        return math.tan(self.fov / 2.0)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def image_plane_point(self, x: int, y: int) -> tuple[float, float]:
        """Return ``(sen_x, sen_y)`` for the center of pixel ``(x, y)``."""
        fov_adjustment = self.fov_adjustment
        sen_x = ((x + 0.5) / self.width * 2.0 - 1.0) * self.aspect_ratio * fov_adjustment
        if self.symmetric_fov:
            sen_y = (1.0 - (y + 0.5) / self.height * 2.0) * fov_adjustment
        else:
            sen_y = 1.0 - (y + 0.5) / self.height * 2.0 * fov_adjustment
        return sen_x, sen_y

    def primary_ray(self, x: int, y: int) -> Ray:
        """Build the primary ray through the center of pixel ``(x, y)``."""
        sen_x, sen_y = self.image_plane_point(x, y)
        return Ray(CAMERA_ORIGIN, Vector3(sen_x, sen_y, -1.0))

    def pixel_coordinates(self) -> Iterator[tuple[int, int]]:
        """Iterate pixel coordinates row by row, top row first."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y


@ti.func
def primary_direction(
    x: ti.i32,
    y: ti.i32,
    width: ti.i32,
    height: ti.i32,
    aspect_ratio: ti.f64,
    fov_adjustment: ti.f64,
    symmetric_fov: ti.i32,
) -> vec3:
    """Device version of ``Camera.primary_ray``; returns the unit direction."""
    sen_x = ((x + 0.5) / width * 2.0 - 1.0) * aspect_ratio * fov_adjustment
    sen_y = 1.0 - (y + 0.5) / height * 2.0 * fov_adjustment
    if symmetric_fov == 1:
        sen_y = (1.0 - (y + 0.5) / height * 2.0) * fov_adjustment
    return tm.normalize(vec3(sen_x, sen_y, -1.0))
