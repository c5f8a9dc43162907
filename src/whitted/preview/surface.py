"""Sinks that receive rendered frames.

``Scene.render`` hands each frame to a surface as a flat buffer of
``width * height * 4`` bytes in row-major ``[R, G, B, A]`` order. Anything
with a matching ``put_image_data`` method can be a surface; two are
provided:

- ArraySurface keeps the latest frame in memory as a NumPy array.
- ImageFileSurface writes every frame to a PNG file through Pillow.

Example:
    >>> from whitted.preview.surface import ImageFileSurface
    >>> surface = ImageFileSurface("frames/frame_{frame:04d}.png")
    >>> # scene.render(surface) writes frames/frame_0000.png, frame_0001.png, ...
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt

from whitted.preview.export import rgba_from_buffer, save_png_from_rgba


@runtime_checkable
class Surface(Protocol):
    """Anything that accepts a rendered RGBA frame."""

    def put_image_data(self, data: bytes, width: int, height: int) -> None:
        """Receive ``width * height * 4`` bytes of row-major RGBA."""
        ...


class ArraySurface:
    """Keeps the most recent frame as a ``(height, width, 4)`` uint8 array.

    Attributes:
        frame_count: Number of frames received so far.
    """

    def __init__(self) -> None:
        self._pixels: npt.NDArray[np.uint8] | None = None
        self.frame_count = 0

    def put_image_data(self, data: bytes, width: int, height: int) -> None:
        self._pixels = rgba_from_buffer(data, width, height)
        self.frame_count += 1

    @property
    def pixels(self) -> npt.NDArray[np.uint8]:
        """The last frame received.

        Raises:
            RuntimeError: If no frame has been rendered yet.
        """
        if self._pixels is None:
            raise RuntimeError("No frame has been rendered to this surface yet")
        return self._pixels


class ImageFileSurface:
    """Writes each frame to a PNG file.

    The path may contain a ``{frame}`` placeholder (with an optional format such as ``{frame:04d}``),
    replaced by the zero-based frame index. Without a placeholder every frame
    overwrites the same file.

    Attributes:
        path_pattern: The output path or pattern.
        frame_count: Number of frames written so far.
        written: Paths written, in order.
    """

    def __init__(self, path_pattern: str | Path) -> None:
        self.path_pattern = str(path_pattern)
        self.frame_count = 0
        self.written: list[Path] = []

    def next_path(self) -> Path:
        return Path(self.path_pattern.format(frame=self.frame_count))

    def put_image_data(self, data: bytes, width: int, height: int) -> None:
        path = self.next_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        save_png_from_rgba(rgba_from_buffer(data, width, height), path)
        self.written.append(path)
        self.frame_count += 1
