"""Frame loop that moves the scene and re-renders it.

Each step applies one transform to every primitive and then renders into a
surface. Steps never overlap: the scene is not touched while a frame is
being rendered.

Example:
    >>> from whitted.preview.surface import ImageFileSurface
    >>> from whitted.scene.animation import AnimationLoop, pivot_rotation
    >>> loop = AnimationLoop(scene, ImageFileSurface("out/frame_{frame:04d}.png"), pivot_rotation)
    >>> loop.run(frames=30, dt=0.05)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from whitted.core.transform import AffineTransform
from whitted.geometry.base import PointTransform
from whitted.preview.surface import Surface
from whitted.scene.scene import Backend, Scene

logger = logging.getLogger(__name__)

# Center of the default orbit
DEFAULT_PIVOT = (0.0, 0.0, -1.0)

_ROTATIONS = {
    "x": AffineTransform.rotate_x,
    "y": AffineTransform.rotate_y,
    "z": AffineTransform.rotate_z,
}


def pivot_rotation(
    angle: float,
    pivot: Sequence[float] = DEFAULT_PIVOT,
    axis: str = "y",
) -> AffineTransform:
    """Rotation by ``angle`` radians about an axis through ``pivot``.

    Args:
        angle: Rotation angle in radians.
        pivot: A point on the rotation axis.
        axis: One of ``"x"``, ``"y"`` or ``"z"``.

    Returns:
        ``translate(pivot) . rotate(angle) . translate(-pivot)``; the pivot
        itself is a fixed point.

    Raises:
        ValueError: If the axis name is unknown.
    """
    try:
        rotate = _ROTATIONS[axis.lower()]
    except KeyError:
        raise ValueError(f"Unknown rotation axis: {axis!r}") from None

    px, py, pz = (float(v) for v in pivot)
    to_origin = AffineTransform.translation(-px, -py, -pz)
    back = AffineTransform.translation(px, py, pz)
    return back @ rotate(angle) @ to_origin


class AnimationLoop:
    """Drives ``update`` then ``render`` once per frame.

    Attributes:
        scene: The scene to animate.
        surface: Receives every rendered frame.
        transform_factory: Maps the frame time step to the point transform
            applied before rendering.
        backend: Render backend passed to ``Scene.render``.
        frame: Number of frames rendered so far.
    """

    def __init__(
        self,
        scene: Scene,
        surface: Surface,
        transform_factory: Callable[[float], PointTransform],
        backend: Backend = "taichi",
    ) -> None:
        self.scene = scene
        self.surface = surface
        self.transform_factory = transform_factory
        self.backend = backend
        self.frame = 0

    def step(self, dt: float):
        """Advance the scene by ``dt`` and render one frame.

        Returns:
            The rendered RGBA array.
        """
        self.scene.update(self.transform_factory(dt))
        pixels = self.scene.render(self.surface, backend=self.backend)
        self.frame += 1
        logger.debug("Rendered animation frame %d (dt=%.4f)", self.frame, dt)
        return pixels

    def run(self, frames: int, dt: float, callback: Callable[[int, int], None] | None = None):
        """Render ``frames`` consecutive steps of size ``dt``.

        Args:
            frames: Number of frames to render.
            dt: Time step passed to the transform factory each frame.
            callback: Optional ``callback(current, total)`` after each frame.

        Returns:
            The last rendered RGBA array, or None when ``frames`` is 0.
        """
        pixels = None
        for i in range(frames):
            pixels = self.step(dt)
            if callback is not None:
                callback(i + 1, frames)
        return pixels

