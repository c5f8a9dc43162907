"""The scene's single directional light."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from whitted.core.errors import InvalidConfiguration, InvalidOperation
from whitted.core.vector import Vector3
from whitted.materials.material import Color


@dataclass(frozen=True)
class DirectionalLight:
    """A light infinitely far away, shining along one direction.

    Attributes:
        direction: Unit vector pointing from the light toward the scene.
            Normalized on construction.
        color: Light color.
        intensity: Positive brightness multiplier (unbounded).
    """

    direction: Vector3
    color: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0))
    intensity: float = 1.0

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "direction", self.direction.normalize())
        except InvalidOperation as e:
            raise InvalidConfiguration("Light direction must be non-zero") from e
        self.color.validate("Light color")
        if not math.isfinite(self.intensity) or self.intensity <= 0.0:
            raise InvalidConfiguration(f"Light intensity must be positive, got {self.intensity}")

    @property
    def to_light(self) -> Vector3:
        """Direction from a surface point toward the light."""
        return -self.direction
