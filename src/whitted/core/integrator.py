"""Whitted-style shading kernel for data-parallel frame rendering.

This module renders a whole frame with one Taichi kernel launch, evaluating
exactly the algorithm of ``Scene.evaluate`` for every pixel in parallel:
closest hit, binary shadow ray, Lambertian term, and a chain of mirror
reflections cut off by the attenuation floor or the depth ceiling.

Taichi functions cannot recurse, so the reflection chain runs forward as a
loop. Each shading level ``k`` maps the color returned by the level below
through ``f_k(x) = clamp(local_k * (1 - r_k) + r_k * x, 0, 1)``. For
``r_k >= 0`` every composition of such maps has the form

    F(x) = clamp(A + R * x, LO, HI)        (per channel, R scalar >= 0)

and composing one more level on the right gives

    LO' = clamp(A, LO, HI)
    HI' = clamp(A + R, LO, HI)
    A'  = A + R * local_k * (1 - r_k)
    R'  = R * r_k

so the loop carries ``(LO, HI, A, R)`` instead of a stack. When the chain
ends at level ``n`` (the next reflection misses, is too attenuated, or the
depth ceiling is reached) the pixel color is ``F(clamp(local_n, 0, 1))``.

Fields are double precision; initialize Taichi with ``default_fp=ti.f64``
(``whitted.init_backend`` does this) before importing this module.

Example:
    >>> import whitted
    >>> whitted.init_backend()
    >>> from whitted.core.integrator import render_image
    >>> from whitted.scene.demo import create_demo_scene
    >>> pixels = render_image(create_demo_scene(320, 240))
"""

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import Camera, primary_direction
from whitted.core.ray import ray_at, reflect
from whitted.scene.intersection import (
    FAR,
    intersect_scene,
    intersect_scene_any,
    load_primitives,
    material_albedos,
    material_colors,
    material_reflectivities,
    primitive_normal,
)

if TYPE_CHECKING:
    from whitted.scene.light import DirectionalLight
    from whitted.scene.scene import Scene, SceneSettings

logger = logging.getLogger(__name__)

vec3 = tm.vec3

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# RGBA output, indexed [row, column, channel] with row 0 at the top
_rgba_buffer = ti.field(dtype=ti.u8, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH, 4))

# =============================================================================
# Light, Camera and Shading Configuration
# =============================================================================

_light_direction = ti.Vector.field(3, dtype=ti.f64, shape=())
_light_color = ti.Vector.field(3, dtype=ti.f64, shape=())
_light_intensity = ti.field(dtype=ti.f64, shape=())

_camera_aspect_ratio = ti.field(dtype=ti.f64, shape=())
_camera_fov_adjustment = ti.field(dtype=ti.f64, shape=())
_camera_symmetric_fov = ti.field(dtype=ti.i32, shape=())

_shadow_bias = ti.field(dtype=ti.f64, shape=())
_attenuation_floor = ti.field(dtype=ti.f64, shape=())
_max_depth = ti.field(dtype=ti.i32, shape=())
_bias_reflection_along_direction = ti.field(dtype=ti.i32, shape=())
_background = ti.Vector.field(3, dtype=ti.f64, shape=())


def setup_light(light: "DirectionalLight") -> None:
    """Copy the directional light into device fields."""
    _light_direction[None] = list(light.direction.to_tuple())
    _light_color[None] = list(light.color.to_tuple())
    _light_intensity[None] = light.intensity


def setup_camera(camera: Camera) -> None:
    """Copy the camera projection parameters into device fields.

    Raises:
        ValueError: If the image exceeds the preallocated render target.
    """
    if camera.width > MAX_IMAGE_WIDTH or camera.height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({camera.width}x{camera.height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    _camera_aspect_ratio[None] = camera.aspect_ratio
    _camera_fov_adjustment[None] = camera.fov_adjustment
    _camera_symmetric_fov[None] = int(camera.symmetric_fov)


def setup_shading(settings: "SceneSettings") -> None:
    """Copy shading parameters into device fields."""
    _shadow_bias[None] = settings.shadow_bias
    _attenuation_floor[None] = settings.attenuation_floor
    _max_depth[None] = settings.max_depth
    _bias_reflection_along_direction[None] = int(settings.bias_reflection_along_direction)
    _background[None] = list(settings.background.to_tuple())


def upload_scene(scene: "Scene") -> None:
    """Copy everything a render pass reads into device fields."""
    setup_camera(scene.camera)
    setup_light(scene.light)
    setup_shading(scene.settings)
    load_primitives(scene.primitives)


# =============================================================================
# Whitted Shading
# =============================================================================


@ti.func
def _shade_hit(idx: ti.i32, origin: vec3, direction: vec3, distance: ti.f64):
    """Shade one hit and build the reflected ray.

    Args:
        idx: Table row of the hit primitive.
        origin: Origin of the incoming ray.
        direction: Unit direction of the incoming ray.
        distance: Distance along the ray to the hit.

    Returns:
        Tuple of (local_color, reflectivity, reflected_origin, reflected_direction).
    """
    hit_point = ray_at(origin, direction, distance)
    normal = primitive_normal(idx, hit_point)
    to_light = -_light_direction[None]

    shadow_origin = hit_point + _shadow_bias[None] * normal
    intensity = 0.0
    if intersect_scene_any(shadow_origin, to_light) == 0:
        intensity = ti.max(tm.dot(normal, to_light), 0.0) * _light_intensity[None]

    lambert = material_albedos[idx] / tm.pi
    local = material_colors[idx] * _light_color[None] * (intensity * lambert)

    reflected_direction = tm.normalize(reflect(direction, normal))
    reflected_origin = shadow_origin
    if _bias_reflection_along_direction[None] == 1:
        side = normal
        if tm.dot(reflected_direction, normal) < 0.0:
            side = -normal
        reflected_origin = hit_point + _shadow_bias[None] * side

    return local, material_reflectivities[idx], reflected_origin, reflected_direction


@ti.func
def _compose_level(lo: vec3, hi: vec3, offset: vec3, scale: ti.f64, local: vec3, reflectivity: ti.f64):
    """Compose the running map with one blended level (see module docs)."""
    new_lo = ti.min(ti.max(offset, lo), hi)
    new_hi = ti.min(ti.max(offset + scale, lo), hi)
    new_offset = offset + scale * (1.0 - reflectivity) * local
    new_scale = scale * reflectivity
    return new_lo, new_hi, new_offset, new_scale


@ti.func
def trace_ray(ray_origin: vec3, ray_direction: vec3):
    """Evaluate the color seen along a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        Tuple of (hit, color): hit is 1 if the ray produced a color, 0 if the
        background shows through; color is clamped to [0, 1].
    """
    origin = ray_origin
    direction = ray_direction

    lo = vec3(-FAR, -FAR, -FAR)
    hi = vec3(FAR, FAR, FAR)
    offset = vec3(0.0, 0.0, 0.0)
    scale = 1.0

    pending_local = vec3(0.0, 0.0, 0.0)
    pending_reflectivity = 0.0
    has_pending = 0

    attenuation = 1.0
    active = 1

    for _ in range(_max_depth[None]):
        if active == 1:
            if attenuation < _attenuation_floor[None]:
                active = 0
            else:
                idx, distance = intersect_scene(origin, direction)
                if idx < 0:
                    active = 0
                else:
                    local, reflectivity, next_origin, next_direction = _shade_hit(
                        idx, origin, direction, distance
                    )
                    # The previous level produced a reflected color: blend it in
                    if has_pending == 1:
                        lo, hi, offset, scale = _compose_level(
                            lo, hi, offset, scale, pending_local, pending_reflectivity
                        )
                    pending_local = local
                    pending_reflectivity = reflectivity
                    has_pending = 1

                    attenuation *= reflectivity
                    origin = next_origin
                    direction = next_direction

    color = vec3(0.0, 0.0, 0.0)
    if has_pending == 1:
        last = ti.min(ti.max(pending_local, 0.0), 1.0)
        color = ti.min(ti.max(offset + scale * last, lo), hi)
        color = ti.min(ti.max(color, 0.0), 1.0)

    return has_pending, color


@ti.func
def _primary_direction(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    return primary_direction(
        x,
        y,
        width,
        height,
        _camera_aspect_ratio[None],
        _camera_fov_adjustment[None],
        _camera_symmetric_fov[None],
    )


@ti.func
def shade_pixel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32):
    """Color of pixel ``(x, y)``; returns (hit, color)."""
    return trace_ray(vec3(0.0, 0.0, 0.0), _primary_direction(x, y, width, height))


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32):
    """Shade every pixel and quantize into the RGBA buffer."""
    for x, y in ti.ndrange(width, height):
        hit, color = shade_pixel(x, y, width, height)
        if hit == 0:
            color = _background[None]

        for c in ti.static(range(3)):
            _rgba_buffer[y, x, c] = ti.cast(ti.ceil(255.0 * color[c]), ti.u8)
        _rgba_buffer[y, x, 3] = ti.cast(255, ti.u8)


# (r, g, b, hit) of the last single-ray query
_probe = ti.Vector.field(4, dtype=ti.f64, shape=())


@ti.kernel
def _render_single_pixel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32):
    """Shade a single pixel into the probe field."""
    # Outer loop of one so the reflection loop below it runs serially
    for _ in range(1):
        hit, color = shade_pixel(x, y, width, height)
        _probe[None] = tm.vec4(color.x, color.y, color.z, ti.cast(hit, ti.f64))


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3):
    for _ in range(1):
        hit, color = trace_ray(origin, tm.normalize(direction))
        _probe[None] = tm.vec4(color.x, color.y, color.z, ti.cast(hit, ti.f64))


# =============================================================================
# Public Rendering API
# =============================================================================


def _read_probe() -> tuple[bool, tuple[float, float, float]]:
    result = _probe[None]
    return bool(result[3] > 0.5), (float(result[0]), float(result[1]), float(result[2]))


def render_image(scene: "Scene") -> npt.NDArray[np.uint8]:
    """Render a full frame of ``scene`` on the device.

    Args:
        scene: The scene to render. Its primitives, light, camera and
            settings are uploaded before the kernel runs.

    Returns:
        A new ``(height, width, 4)`` uint8 RGBA array, row 0 at the top.

    Raises:
        ValueError: If the image exceeds MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.
        RuntimeError: If the scene has more primitives than the device table holds.
    """
    upload_scene(scene)
    width, height = scene.width, scene.height
    _render_frame(width, height)
    return np.ascontiguousarray(_rgba_buffer.to_numpy()[:height, :width, :])


def render_pixel(scene: "Scene", x: int, y: int) -> tuple[bool, tuple[float, float, float]]:
    """Shade one pixel of ``scene`` on the device, for testing and debugging.

    Returns:
        Tuple of (hit, (r, g, b)); when hit is False the color is undefined
        and the pixel shows the background.
    """
    upload_scene(scene)
    _render_single_pixel(x, y, scene.width, scene.height)
    return _read_probe()


def trace(scene: "Scene", origin: tuple[float, float, float], direction: tuple[float, float, float]):
    """Trace an arbitrary ray through ``scene`` on the device.

    Returns:
        Tuple of (hit, (r, g, b)) as for ``render_pixel``.
    """
    upload_scene(scene)
    _trace_single_ray(vec3(*origin), vec3(*direction))
    return _read_probe()
