"""Image export utilities for rendered frames.

Frames are 8-bit RGBA arrays of shape ``(height, width, 4)``, already
clamped and quantized by the renderer, so export needs no tone mapping or
gamma step.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from whitted.preview.export import save_png_from_rgba
    >>> pixels = scene.render_pixels()
    >>> save_png_from_rgba(pixels, "frame.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def rgba_from_buffer(data: bytes, width: int, height: int) -> npt.NDArray[np.uint8]:
    """View a flat RGBA byte buffer as a ``(height, width, 4)`` array.

    Args:
        data: Row-major RGBA bytes.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A writable uint8 array holding a copy of the data.

    Raises:
        ValueError: If the buffer size is not ``width * height * 4``.
    """
    expected = width * height * 4
    if len(data) != expected:
        raise ValueError(
            f"Expected {expected} bytes for a {width}x{height} RGBA frame, got {len(data)}"
        )
    return np.frombuffer(data, dtype=np.uint8).reshape(height, width, 4).copy()


def rgba_to_image(pixels: npt.NDArray[np.uint8]) -> PILImage.Image:
    """Wrap an RGBA array in a Pillow image.

    Raises:
        ValueError: If the array is not ``(height, width, 4)`` uint8.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint8:
        raise ValueError(
            f"Expected a (height, width, 4) uint8 array, got {pixels.shape} {pixels.dtype}"
        )
    return PILImage.fromarray(np.ascontiguousarray(pixels))


def save_png_from_rgba(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an RGBA frame as a PNG file."""
    rgba_to_image(pixels).save(str(filepath), format="PNG")


def pixel_difference(
    image_a: npt.NDArray[np.uint8],
    image_b: npt.NDArray[np.uint8],
) -> npt.NDArray[np.int16]:
    """Per-channel absolute difference between two frames.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    return np.abs(image_a.astype(np.int16) - image_b.astype(np.int16))
