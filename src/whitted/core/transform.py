"""Affine transforms used to reposition primitives between frames.

An AffineTransform is a 3x3 linear map (stored row-major as a NumPy array)
followed by a translation. Transforms are immutable and compose like
functions: ``a.compose(b)`` (or ``a @ b``) applies ``b`` first, then ``a``.

A transform is also callable as a ``Vector3 -> Vector3`` mapping, which is
the shape ``Scene.update`` expects.

Example:
    >>> import math
    >>> from whitted.core.transform import AffineTransform
    >>> from whitted.core.vector import Vector3
    >>> to_pivot = AffineTransform.translation(0.0, 0.0, 1.0)
    >>> spin = AffineTransform.rotate_y(math.pi / 2)
    >>> back = AffineTransform.translation(0.0, 0.0, -1.0)
    >>> orbit = back @ spin @ to_pivot
    >>> moved = orbit(Vector3(0.0, 0.0, -2.0))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from whitted.core.vector import Vector3

# Determinant magnitude below which a 2x2 matrix is treated as singular
SINGULAR_EPSILON = 1e-13


def _frozen(matrix: npt.ArrayLike) -> npt.NDArray[np.float64]:
    array = np.array(matrix, dtype=np.float64).reshape(3, 3)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class AffineTransform:
    """A rotation (any 3x3 linear map) followed by a translation.

    Attributes:
        rotation: Row-major 3x3 matrix applied first. Read-only.
        displacement: Translation added after the linear map.
    """

    rotation: npt.NDArray[np.float64] = field(default_factory=lambda: _frozen(np.eye(3)))
    displacement: Vector3 = field(default_factory=Vector3.zero)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotation", _frozen(self.rotation))

    # =========================================================================
    # Construction helpers
    # =========================================================================

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def rotate_x(cls, angle: float) -> AffineTransform:
        """Rotation about the X axis by ``angle`` radians."""
        c, s = math.cos(angle), math.sin(angle)
        return cls(rotation=[[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])

    @classmethod
    def rotate_y(cls, angle: float) -> AffineTransform:
        """Rotation about the Y axis by ``angle`` radians.

        Uses the ``[[c, 0, -s], [0, 1, 0], [s, 0, c]]`` convention, so a
        positive angle turns +X toward +Z.
        """
        c, s = math.cos(angle), math.sin(angle)
        return cls(rotation=[[c, 0.0, -s], [0.0, 1.0, 0.0], [s, 0.0, c]])

    @classmethod
    def rotate_z(cls, angle: float) -> AffineTransform:
        """Rotation about the Z axis by ``angle`` radians."""
        c, s = math.cos(angle), math.sin(angle)
        return cls(rotation=[[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])

    @classmethod
    def translation(cls, x: float, y: float, z: float) -> AffineTransform:
        """Pure translation by ``(x, y, z)`` with an identity linear part."""
        return cls(displacement=Vector3(float(x), float(y), float(z)))

    # =========================================================================
    # Algebra
    # =========================================================================

    def apply(self, point: Vector3) -> Vector3:
        """Map a point: ``rotation . point + displacement``."""
        mapped = self.rotation @ point.to_numpy()
        return Vector3.from_iterable(mapped).add(self.displacement)

    def compose(self, other: AffineTransform) -> AffineTransform:
        """Return the transform that applies ``other`` first, then ``self``.

        Args:
            other: The transform applied first.

        Returns:
            A transform with rotation ``self.rotation . other.rotation`` and
            displacement ``self.rotation . other.displacement + self.displacement``.
        """
        rotation = self.rotation @ other.rotation
        displacement = self.apply(other.displacement)
        return AffineTransform(rotation=rotation, displacement=displacement)

    def __matmul__(self, other: AffineTransform) -> AffineTransform:
        return self.compose(other)

    def __call__(self, point: Vector3) -> Vector3:
        return self.apply(point)

    def is_orthonormal(self, tol: float = 1e-9) -> bool:
        """Whether the linear part is a pure rotation (or reflection)."""
        product = self.rotation @ self.rotation.T
        return bool(np.allclose(product, np.eye(3), atol=tol))


def inverse(
    a: float, b: float, c: float, d: float
) -> tuple[float, float, float, float] | None:
    """Invert the 2x2 matrix ``[[a, b], [c, d]]``.

    Args:
        a: Top-left entry.
        b: Top-right entry.
        c: Bottom-left entry.
        d: Bottom-right entry.

    Returns:
        The entries ``(a', b', c', d')`` of the inverse in the same row-major
        order, or None when ``|det| < 1e-13``.
    """
    det = a * d - b * c
    if abs(det) < SINGULAR_EPSILON:
        return None
    return (d / det, -b / det, -c / det, a / det)
