"""Frame surfaces and image export.

Components:
    surface: Surface protocol, in-memory and PNG file surfaces
    export: RGBA buffer conversion and PNG writing via Pillow
"""

from .export import pixel_difference, rgba_from_buffer, rgba_to_image, save_png_from_rgba
from .surface import ArraySurface, ImageFileSurface, Surface

__all__ = [
    "ArraySurface",
    "ImageFileSurface",
    "Surface",
    "pixel_difference",
    "rgba_from_buffer",
    "rgba_to_image",
    "save_png_from_rgba",
]
