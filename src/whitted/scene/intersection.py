"""Device-side primitive table and scene-level intersection.

Primitives are copied from a Scene into Taichi fields before each render
pass. They are stored as one table in scene order (not one table per
shape) so that the closest-hit scan visits them in the same order as the
host loop and breaks distance ties the same way.

Each row holds the primitive kind, its position (sphere center or plane
origin), its plane normal or sphere radius, and its material.

Taichi must be initialized before this module is imported, because it
declares fields at import time.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.scene.intersection import load_primitives, get_primitive_count
    >>> load_primitives(scene.primitives)
    >>> get_primitive_count()
    4
"""

import logging
from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

from whitted.geometry.base import Primitive, PrimitiveKind
from whitted.geometry.plane import Plane, hit_plane
from whitted.geometry.sphere import NO_HIT, Sphere, hit_sphere, sphere_normal

logger = logging.getLogger(__name__)

vec3 = tm.vec3

# Maximum number of primitives supported in the scene
MAX_PRIMITIVES = 1024

# Upper bound on hit distances; stands in for infinity under fast math
FAR = 1.0e30

primitive_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
# Sphere center or plane origin
primitive_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PRIMITIVES)
primitive_normals = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PRIMITIVES)
primitive_radii = ti.field(dtype=ti.f64, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())

material_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PRIMITIVES)
material_albedos = ti.field(dtype=ti.f64, shape=MAX_PRIMITIVES)
material_reflectivities = ti.field(dtype=ti.f64, shape=MAX_PRIMITIVES)


def clear_scene() -> None:
    """Clear all primitives from the device table.

    Only the count is reset; stale rows are overwritten by the next load.
    """
    num_primitives[None] = 0


def _store_primitive(idx: int, primitive: Primitive) -> None:
    primitive_kinds[idx] = int(primitive.kind)
    primitive_positions[idx] = list(primitive.position.to_tuple())
    if isinstance(primitive, Sphere):
        primitive_radii[idx] = primitive.radius
        primitive_normals[idx] = [0.0, 0.0, 0.0]
    elif isinstance(primitive, Plane):
        primitive_radii[idx] = 0.0
        primitive_normals[idx] = list(primitive.normal.to_tuple())
    else:
        raise TypeError(f"Unsupported primitive type: {type(primitive).__name__}")

    material = primitive.material
    material_colors[idx] = list(material.color.to_tuple())
    material_albedos[idx] = material.albedo
    material_reflectivities[idx] = material.reflectivity


def load_primitives(primitives: Sequence[Primitive]) -> int:
    """Replace the device table with ``primitives``, preserving their order.

    Args:
        primitives: The scene's primitives in intersection order.

    Returns:
        The number of primitives loaded.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    if len(primitives) > MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")

    for idx, primitive in enumerate(primitives):
        _store_primitive(idx, primitive)
    num_primitives[None] = len(primitives)

    logger.debug("Loaded %d primitives into the device table", len(primitives))
    return len(primitives)


def get_primitive_count() -> int:
    """Get the number of primitives in the device table."""
    return int(num_primitives[None])


@ti.func
def hit_primitive(idx: ti.i32, ray_origin: vec3, ray_direction: vec3) -> ti.f64:
    """Intersect one table row; returns the hit distance or NO_HIT."""
    t = NO_HIT
    if primitive_kinds[idx] == int(PrimitiveKind.SPHERE):
        t = hit_sphere(ray_origin, ray_direction, primitive_positions[idx], primitive_radii[idx])
    else:
        t = hit_plane(ray_origin, ray_direction, primitive_positions[idx], primitive_normals[idx])
    return t


@ti.func
def primitive_normal(idx: ti.i32, hit_point: vec3) -> vec3:
    """Unit surface normal of table row ``idx`` at ``hit_point``."""
    normal = primitive_normals[idx]
    if primitive_kinds[idx] == int(PrimitiveKind.SPHERE):
        normal = sphere_normal(hit_point, primitive_positions[idx])
    return normal


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3):
    """Find the closest primitive hit by a ray.

    Scans the table in order, keeping the first primitive at equal distance.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        Tuple of (index, distance); index is -1 when nothing is hit.
    """
    closest_idx = -1
    closest_t = FAR

    for i in range(num_primitives[None]):
        t = hit_primitive(i, ray_origin, ray_direction)
        if t >= 0.0 and t < closest_t:
            closest_t = t
            closest_idx = i

    return closest_idx, closest_t


@ti.func
def intersect_scene_any(ray_origin: vec3, ray_direction: vec3) -> ti.i32:
    """Test if a ray hits any primitive (shadow ray query).

    There is no distance limit: anything along the ray occludes.

    Returns:
        1 if any primitive was hit, 0 otherwise.
    """
    hit_any = 0

    for i in range(num_primitives[None]):
        if hit_any == 0:
            if hit_primitive(i, ray_origin, ray_direction) >= 0.0:
                hit_any = 1

    return hit_any
