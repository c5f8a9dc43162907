"""Colors and the diffuse-plus-mirror surface material.

A Material combines a base Color with two scalars:

- ``albedo``: diffuse reflectance. Shading uses the energy-conserving
  Lambertian factor ``albedo / pi``.
- ``reflectivity``: blend weight between the locally shaded color and the
  color seen along the mirror reflection, ``local * (1 - r) + reflected * r``.

Colors are conceptually in ``[0, 1]`` once clamped, but intermediate values
produced while shading may exceed 1 (light intensity is unbounded).

Example:
    >>> from whitted.materials.material import Color, Material
    >>> chrome = Material(Color(0.8, 0.8, 0.8), albedo=1.0, reflectivity=0.5)
    >>> chrome.lambert_factor
    0.3183098861837907
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass

from whitted.core.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Color:
    """An RGB triple.

    Attributes:
        r: Red channel.
        g: Green channel.
        b: Blue channel.
    """

    r: float
    g: float
    b: float

    def __iter__(self) -> Iterator[float]:
        yield self.r
        yield self.g
        yield self.b

    def __mul__(self, other: Color | float) -> Color:
        """Component-wise product with another Color, or scale by a number."""
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g, self.b * other.b)
        return Color(self.r * other, self.g * other, self.b * other)

    def __rmul__(self, factor: float) -> Color:
        return self * factor

    def __add__(self, other: Color) -> Color:
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def blend(self, other: Color, factor: float) -> Color:
        """Linear blend ``self * (1 - factor) + other * factor``."""
        return Color(
            self.r * (1.0 - factor) + other.r * factor,
            self.g * (1.0 - factor) + other.g * factor,
            self.b * (1.0 - factor) + other.b * factor,
        )

    def clamp(self) -> Color:
        """Clamp every channel to ``[0, 1]``."""
        return Color(
            max(min(self.r, 1.0), 0.0),
            max(min(self.g, 1.0), 0.0),
            max(min(self.b, 1.0), 0.0),
        )

    def to_bytes(self) -> tuple[int, int, int, int]:
        """Convert to an opaque 8-bit RGBA pixel.

        Each color channel becomes ``ceil(255 * c)`` after clamping; alpha is
        always 255.
        """
        c = self.clamp()
        return (math.ceil(255 * c.r), math.ceil(255 * c.g), math.ceil(255 * c.b), 255)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def validate(self, name: str = "color") -> None:
        """Check that every channel is finite and non-negative.

        Raises:
            InvalidConfiguration: If any channel is negative or not finite.
        """
        for channel in self:
            if not math.isfinite(channel) or channel < 0.0:
                raise InvalidConfiguration(
                    f"{name} components must be finite and non-negative, got {self.to_tuple()}"
                )


# Color shown where a primary ray hits nothing
BACKGROUND_COLOR = Color(0.6, 0.8, 1.0)


@dataclass(frozen=True)
class Material:
    """Surface appearance of a primitive.

    Attributes:
        color: Base (diffuse) color.
        albedo: Diffuse reflectance coefficient, non-negative.
        reflectivity: Mirror blend weight. Values in ``[0, 1)`` terminate
            through attenuation; values ``>= 1`` are accepted but only stop at
            the scene's depth ceiling.
    """

    color: Color
    albedo: float = 1.0
    reflectivity: float = 0.0

    def __post_init__(self) -> None:
        self.color.validate("Material color")
        if not math.isfinite(self.albedo) or self.albedo < 0.0:
            raise InvalidConfiguration(f"albedo must be non-negative, got {self.albedo}")
        if not math.isfinite(self.reflectivity) or self.reflectivity < 0.0:
            raise InvalidConfiguration(
                f"reflectivity must be non-negative, got {self.reflectivity}"
            )
        if self.reflectivity >= 1.0:
            logger.warning(
                "reflectivity %.3f >= 1 never attenuates; reflections stop at the depth ceiling",
                self.reflectivity,
            )

    @classmethod
    def from_rgb(
        cls,
        r: float,
        g: float,
        b: float,
        albedo: float = 1.0,
        reflectivity: float = 0.0,
    ) -> Material:
        return cls(Color(r, g, b), albedo=albedo, reflectivity=reflectivity)

    @property
    def lambert_factor(self) -> float:
        """Energy-conserving diffuse factor ``albedo / pi``."""
        return self.albedo / math.pi
