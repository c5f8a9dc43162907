"""Colors and surface materials."""

from .material import BACKGROUND_COLOR, Color, Material

__all__ = ["BACKGROUND_COLOR", "Color", "Material"]
