"""Camera models."""

from .pinhole import CAMERA_ORIGIN, Camera, primary_direction

__all__ = ["CAMERA_ORIGIN", "Camera", "primary_direction"]
