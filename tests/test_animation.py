"""Unit tests for the animation loop.

Tests cover:
- Each step updates the scene before rendering
- Frames are delivered to the surface in order
- run() renders the requested number of frames
"""

import math

import numpy as np
import pytest


class RecordingSurface:
    """Surface that records frames along with scene state at render time."""

    def __init__(self, scene):
        self.scene = scene
        self.frames = []
        self.positions = []

    def put_image_data(self, data, width, height):
        self.frames.append((bytes(data), width, height))
        self.positions.append([p.position for p in self.scene.primitives])


def _small_demo():
    from whitted.scene.demo import create_demo_scene

    return create_demo_scene(8, 6)


class TestAnimationLoop:
    """Tests for AnimationLoop."""

    def test_step_updates_then_renders(self):
        from whitted.scene.animation import AnimationLoop
        from whitted.scene.demo import orbit_transform

        scene = _small_demo()
        before = [p.position for p in scene.primitives]
        surface = RecordingSurface(scene)
        loop = AnimationLoop(scene, surface, orbit_transform, backend="python")

        loop.step(0.3)

        expected = [orbit_transform(0.3)(p) for p in before]
        assert loop.frame == 1
        assert len(surface.frames) == 1
        # The surface saw the already-moved scene
        for seen, want in zip(surface.positions[0], expected):
            assert seen.to_tuple() == pytest.approx(want.to_tuple())

    def test_frame_matches_direct_render(self):
        from whitted.core.transform import AffineTransform
        from whitted.preview.surface import ArraySurface
        from whitted.scene.animation import AnimationLoop

        scene = _small_demo()
        surface = ArraySurface()
        loop = AnimationLoop(scene, surface, lambda dt: AffineTransform.identity(), backend="python")
        pixels = loop.step(0.1)

        np.testing.assert_array_equal(pixels, scene.render_pixels(backend="python"))
        np.testing.assert_array_equal(surface.pixels, pixels)

    def test_run_renders_all_frames(self):
        from whitted.scene.animation import AnimationLoop
        from whitted.scene.demo import orbit_transform

        scene = _small_demo()
        surface = RecordingSurface(scene)
        progress = []
        loop = AnimationLoop(scene, surface, orbit_transform, backend="python")

        loop.run(frames=4, dt=math.pi / 2, callback=lambda current, total: progress.append((current, total)))

        assert loop.frame == 4
        assert len(surface.frames) == 4
        assert progress == [(1, 4), (2, 4), (3, 4), (4, 4)]
        # A full turn brings every primitive back
        start = [p.position for p in _small_demo().primitives]
        for seen, want in zip(surface.positions[-1], start):
            assert seen.to_tuple() == pytest.approx(want.to_tuple(), abs=1e-9)

    def test_run_zero_frames(self):
        from whitted.scene.animation import AnimationLoop
        from whitted.scene.demo import orbit_transform

        scene = _small_demo()
        surface = RecordingSurface(scene)
        assert AnimationLoop(scene, surface, orbit_transform, backend="python").run(0, 0.1) is None
        assert surface.frames == []

    def test_taichi_backend_frames(self):
        from whitted.preview.surface import ArraySurface
        from whitted.scene.animation import AnimationLoop
        from whitted.scene.demo import orbit_transform

        scene = _small_demo()
        surface = ArraySurface()
        loop = AnimationLoop(scene, surface, orbit_transform)
        loop.run(frames=2, dt=0.2)
        assert surface.frame_count == 2
        assert surface.pixels.shape == (6, 8, 4)
