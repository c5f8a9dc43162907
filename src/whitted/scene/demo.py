"""The demo scene: three spheres over a reflective floor.

Scene layout:
    - Green floor plane at y = -1, strongly reflective
    - Grey sphere in front, half reflective
    - Large red sphere to the right, slightly reflective
    - Blue sphere behind on the left
    - White directional light from behind the camera, tilted downward

Every frame the spheres orbit the vertical axis through (0, 0, -1). The
floor only slides within its own plane, so it looks unchanged.
"""

from __future__ import annotations

import math

from whitted.core.transform import AffineTransform
from whitted.core.vector import Vector3
from whitted.geometry.plane import Plane
from whitted.geometry.sphere import Sphere
from whitted.materials.material import Color, Material
from whitted.scene.animation import DEFAULT_PIVOT, pivot_rotation
from whitted.scene.light import DirectionalLight
from whitted.scene.scene import Scene, SceneSettings

DEMO_FOV = math.pi / 2

FLOOR_MATERIAL = Material.from_rgb(0.4, 0.8, 0.4, albedo=1.0, reflectivity=0.9)
GREY_MATERIAL = Material.from_rgb(0.8, 0.8, 0.8, albedo=1.0, reflectivity=0.5)
RED_MATERIAL = Material.from_rgb(1.0, 0.4, 0.4, albedo=1.0, reflectivity=0.1)
BLUE_MATERIAL = Material.from_rgb(0.4, 0.4, 1.0, albedo=1.0, reflectivity=0.2)


def create_demo_light() -> DirectionalLight:
    return DirectionalLight(
        direction=Vector3(0.0, -0.3, -1.0),
        color=Color(1.0, 1.0, 1.0),
        intensity=2.0,
    )


def create_demo_scene(
    width: int = 640,
    height: int = 480,
    fov: float = DEMO_FOV,
    settings: SceneSettings | None = None,
    symmetric_fov: bool = False,
) -> Scene:
    """Build the demo scene.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in radians.
        settings: Optional shading parameters (defaults otherwise).
        symmetric_fov: Use the symmetric vertical field of view.

    Returns:
        A Scene whose primitives are, in order: floor, grey, red and blue.
    """
    scene = Scene(
        width,
        height,
        fov,
        create_demo_light(),
        settings=settings,
        symmetric_fov=symmetric_fov,
    )
    scene.add(Plane(Vector3(0.0, -1.0, 0.0), Vector3(0.0, 1.0, 0.0), FLOOR_MATERIAL))
    scene.add(Sphere(Vector3(0.0, 0.25, -2.0), 0.5, GREY_MATERIAL))
    scene.add(Sphere(Vector3(0.75, 0.75, -1.25), 0.75, RED_MATERIAL))
    scene.add(Sphere(Vector3(-1.0, 1.0, -3.0), 1.0, BLUE_MATERIAL))
    return scene


def orbit_transform(angle: float) -> AffineTransform:
    """Per-frame motion of the demo: a Y rotation about (0, 0, -1)."""
    return pivot_rotation(angle, pivot=DEFAULT_PIVOT, axis="y")
