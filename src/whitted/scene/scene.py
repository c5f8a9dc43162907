"""Scene container and the recursive Whitted shading algorithm.

The Scene owns an ordered list of primitives, one directional light and the
camera. It turns pixels into primary rays, finds the closest hit, shades it
with a binary shadow test and a Lambertian term, and recursively traces one
mirror reflection per hit.

Shading a hit (``Scene.evaluate``):

1. Stop with "no color" when the ray is absent, the accumulated attenuation
   fell below ``attenuation_floor``, or the depth ceiling was reached.
2. Closest hit by linear scan; ties keep the first primitive found.
3. Offset the hit point by ``shadow_bias`` along the normal and cast a shadow
   ray toward the light. Any hit, at any distance, puts the point in shadow.
4. ``local = color * light.color * intensity * albedo / pi`` where intensity
   is 0 in shadow, else ``max(n . l, 0) * light.intensity``.
5. Reflect the incoming direction about the normal; the reflected ray starts
   at the shadow-ray origin. Continue with ``attenuation * reflectivity``.
6. Blend ``local * (1 - r) + reflected * r`` when the reflection produced a
   color, then clamp to ``[0, 1]``.

Two render backends produce the same pixels: ``"python"`` calls
``evaluate`` per pixel on the host, ``"taichi"`` runs the kernel in
``whitted.core.integrator``.

Example:
    >>> import math
    >>> from whitted.core.vector import Vector3
    >>> from whitted.geometry.sphere import Sphere
    >>> from whitted.materials.material import Material
    >>> from whitted.preview.surface import ArraySurface
    >>> from whitted.scene.light import DirectionalLight
    >>> from whitted.scene.scene import Scene
    >>> light = DirectionalLight(Vector3(0, -1, 0), intensity=2.0)
    >>> scene = Scene(64, 48, math.pi / 2, light)
    >>> scene.add(Sphere(Vector3(0, 0, -2), 0.5, Material.from_rgb(1, 0, 0)))
    0
    >>> pixels = scene.render(ArraySurface(), backend="python")
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Literal

import numpy as np
import numpy.typing as npt

from whitted.camera.pinhole import Camera
from whitted.core.errors import InvalidConfiguration
from whitted.core.ray import Ray
from whitted.core.vector import Vector3
from whitted.geometry.base import PointTransform, Primitive
from whitted.materials.material import BACKGROUND_COLOR, Color
from whitted.preview.surface import Surface
from whitted.scene.light import DirectionalLight

logger = logging.getLogger(__name__)

Backend = Literal["taichi", "python"]

# Offset of shadow-ray origins off the surface
SHADOW_BIAS = 1e-6

# Accumulated reflectivity below which a reflection is not traced
ATTENUATION_FLOOR = 1e-6

# Hard ceiling on reflection depth (primary hit is depth 0)
MAX_DEPTH = 50


@dataclass(frozen=True)
class SceneSettings:
    """Shading parameters shared by both render backends.

    Attributes:
        shadow_bias: Offset applied along the normal to shadow-ray origins.
        attenuation_floor: Reflections whose accumulated weight falls below
            this value are not traced.
        max_depth: Number of shading levels (primary hit plus reflections)
            after which reflection stops.
        background: Color of pixels whose primary ray hits nothing.
        bias_reflection_along_direction: Start reflected rays on the side of
            the surface they leave, instead of reusing the shadow origin.
    """

    shadow_bias: float = SHADOW_BIAS
    attenuation_floor: float = ATTENUATION_FLOOR
    max_depth: int = MAX_DEPTH
    background: Color = field(default_factory=lambda: BACKGROUND_COLOR)
    bias_reflection_along_direction: bool = False

    def __post_init__(self) -> None:
        if self.shadow_bias < 0.0:
            raise InvalidConfiguration(f"shadow_bias must be non-negative, got {self.shadow_bias}")
        if self.attenuation_floor <= 0.0:
            raise InvalidConfiguration(
                f"attenuation_floor must be positive, got {self.attenuation_floor}"
            )
        if self.max_depth < 1:
            raise InvalidConfiguration(f"max_depth must be at least 1, got {self.max_depth}")
        self.background.validate("Background color")


@dataclass(frozen=True)
class Intersection:
    """The closest hit of a ray against the scene.

    Attributes:
        index: Position of the primitive in the scene's primitive list.
        primitive: The primitive that was hit.
        distance: Distance along the ray to the hit point.
    """

    index: int
    primitive: Primitive
    distance: float


class Scene:
    """A renderable set of primitives lit by one directional light.

    Attributes:
        camera: The pinhole camera (image size and field of view).
        light: The directional light.
        settings: Shading parameters.
    """

    def __init__(
        self,
        width: int,
        height: int,
        fov: float,
        light: DirectionalLight,
        primitives: Iterable[Primitive] = (),
        settings: SceneSettings | None = None,
        symmetric_fov: bool = False,
    ) -> None:
        self.camera = Camera(width, height, fov, symmetric_fov=symmetric_fov)
        self.light = light
        self.settings = settings if settings is not None else SceneSettings()
        self._primitives: list[Primitive] = []
        for primitive in primitives:
            self.add(primitive)

    def __repr__(self) -> str:
        return (
            f"Scene({self.width}x{self.height}, fov={self.fov:.4f}, "
            f"primitives={len(self._primitives)})"
        )

    # =========================================================================
    # Setup
    # =========================================================================

    @property
    def width(self) -> int:
        return self.camera.width

    @property
    def height(self) -> int:
        return self.camera.height

    @property
    def fov(self) -> float:
        return self.camera.fov

    @property
    def shadow_bias(self) -> float:
        return self.settings.shadow_bias

    @property
    def primitives(self) -> Sequence[Primitive]:
        """The primitives in intersection order (read-only view)."""
        return tuple(self._primitives)

    def add(self, primitive: Primitive) -> int:
        """Append a primitive and return its index.

        Raises:
            InvalidConfiguration: If ``primitive`` is not a Primitive.
        """
        if not isinstance(primitive, Primitive):
            raise InvalidConfiguration(f"Expected a Primitive, got {type(primitive).__name__}")
        self._primitives.append(primitive)
        return len(self._primitives) - 1

    def update(self, transform: PointTransform) -> None:
        """Move every primitive's position through ``transform``.

        Must not run while a render pass is in progress.
        """
        for primitive in self._primitives:
            primitive.update(transform)

    # =========================================================================
    # Ray queries
    # =========================================================================

    def create_prime(self, x: int, y: int) -> Ray:
        """Primary ray through the center of pixel ``(x, y)``."""
        return self.camera.primary_ray(x, y)

    def intersect(self, ray: Ray) -> Intersection | None:
        """Find the closest primitive hit by ``ray``.

        Ties at exactly equal distance keep the primitive added first.
        """
        closest: Intersection | None = None
        for index, primitive in enumerate(self._primitives):
            distance = primitive.intersect(ray)
            if distance is not None and (closest is None or distance < closest.distance):
                closest = Intersection(index, primitive, distance)
        return closest

    def is_occluded(self, ray: Ray) -> bool:
        """Whether any primitive intersects ``ray`` (no distance limit)."""
        return any(primitive.intersect(ray) is not None for primitive in self._primitives)

    def shadow_origin(self, hit_point: Vector3, normal: Vector3) -> Vector3:
        return hit_point.add(normal.scale(self.shadow_bias))

    def diffuse_intensity(self, hit_point: Vector3, normal: Vector3) -> float:
        """Light intensity arriving at a surface point with the given normal.

        Returns:
            0 when the biased shadow ray toward the light hits anything,
            otherwise ``max(normal . to_light, 0) * light.intensity``.
        """
        to_light = self.light.to_light
        shadow_ray = Ray(self.shadow_origin(hit_point, normal), to_light)
        if self.is_occluded(shadow_ray):
            return 0.0
        return max(normal.dot(to_light), 0.0) * self.light.intensity

    def _reflected_ray(self, ray: Ray, hit_point: Vector3, normal: Vector3) -> Ray:
        direction = ray.direction.reflect(normal)
        if self.settings.bias_reflection_along_direction:
            side = normal if direction.dot(normal) >= 0.0 else -normal
            return Ray(hit_point.add(side.scale(self.shadow_bias)), direction)
        return Ray(self.shadow_origin(hit_point, normal), direction)

    # =========================================================================
    # Shading
    # =========================================================================

    def evaluate(self, ray: Ray | None, attenuation: float = 1.0, depth: int = 0) -> Color | None:
        """Compute the color seen along ``ray``.

        The reflection chain is followed iteratively: each level's local
        color and reflectivity are collected on the way out, then blended
        from the deepest level back to the first. Very large ``max_depth``
        values cost time, not interpreter stack.

        Args:
            ray: The ray to trace. None yields None.
            attenuation: Product of the reflectivities along the path so far.
            depth: Number of reflections already followed.

        Returns:
            The clamped color, or None when nothing is hit (or the path is
            cut off by the attenuation floor or the depth ceiling).
        """
        settings = self.settings
        levels: list[tuple[Color, float]] = []

        while (
            ray is not None
            and attenuation >= settings.attenuation_floor
            and depth < settings.max_depth
        ):
            hit = self.intersect(ray)
            if hit is None:
                break

            material = hit.primitive.material
            hit_point = ray.at(hit.distance)
            normal = hit.primitive.surface_normal(hit_point)

            intensity = self.diffuse_intensity(hit_point, normal)
            local = material.color * self.light.color * (intensity * material.lambert_factor)
            levels.append((local, material.reflectivity))

            ray = self._reflected_ray(ray, hit_point, normal)
            attenuation *= material.reflectivity
            depth += 1

        color: Color | None = None
        for local, reflectivity in reversed(levels):
            if color is not None:
                local = local.blend(color, reflectivity)
            color = local.clamp()
        return color

    def shade_pixel(self, x: int, y: int) -> Color:
        """Color of pixel ``(x, y)``, falling back to the background."""
        color = self.evaluate(self.create_prime(x, y))
        return color if color is not None else self.settings.background

    # =========================================================================
    # Rendering
    # =========================================================================

    def _render_pixels_python(self) -> npt.NDArray[np.uint8]:
        pixels = np.empty((self.height, self.width, 4), dtype=np.uint8)
        for x, y in self.camera.pixel_coordinates():
            pixels[y, x] = self.shade_pixel(x, y).to_bytes()
        return pixels

    def render_pixels(self, backend: Backend = "taichi") -> npt.NDArray[np.uint8]:
        """Render one frame into a new ``(height, width, 4)`` RGBA array.

        Args:
            backend: ``"taichi"`` to run the data-parallel kernel (taichi must
                be initialized, see ``whitted.init_backend``), or ``"python"``
                for the pure Python host implementation.

        Returns:
            The frame as uint8 RGBA, row 0 at the top.

        Raises:
            ValueError: If the backend name is unknown.
        """
        start_time = time.perf_counter()
        if backend == "taichi":
            # Imported lazily: the integrator declares taichi fields at import
            from whitted.core.integrator import render_image

            pixels = render_image(self)
        elif backend == "python":
            pixels = self._render_pixels_python()
        else:
            raise ValueError(f"Unknown render backend: {backend!r}")

        logger.debug(
            "Rendered %dx%d frame with %d primitives in %.3fs (backend=%s)",
            self.width,
            self.height,
            len(self._primitives),
            time.perf_counter() - start_time,
            backend,
        )
        return pixels

    def render(self, surface: Surface, backend: Backend = "taichi") -> npt.NDArray[np.uint8]:
        """Render one frame and hand it to ``surface``.

        The surface receives exactly ``width * height * 4`` bytes in
        row-major ``[R, G, B, A]`` order.

        Returns:
            The rendered ``(height, width, 4)`` array.
        """
        pixels = self.render_pixels(backend)
        surface.put_image_data(pixels.tobytes(), self.width, self.height)
        return pixels
