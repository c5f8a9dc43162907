"""Scene representation, lighting and animation.

Components:
    scene: Scene container and the recursive Whitted shading algorithm
    light: The directional light
    animation: Update-then-render frame loop and pivot rotations
    demo: The three-sphere demo scene
    intersection: Device-side primitive table (import directly, see below)

Note: intersection is NOT imported here. It declares Taichi fields at import
time, so import ``whitted.scene.intersection`` only after ``init_backend``.
"""

from .animation import AnimationLoop, pivot_rotation
from .demo import create_demo_scene, orbit_transform
from .light import DirectionalLight
from .scene import (
    ATTENUATION_FLOOR,
    MAX_DEPTH,
    SHADOW_BIAS,
    Intersection,
    Scene,
    SceneSettings,
)

__all__ = [
    # Scene
    "Scene",
    "SceneSettings",
    "Intersection",
    "SHADOW_BIAS",
    "ATTENUATION_FLOOR",
    "MAX_DEPTH",
    # Lighting
    "DirectionalLight",
    # Animation
    "AnimationLoop",
    "pivot_rotation",
    # Demo
    "create_demo_scene",
    "orbit_transform",
]
