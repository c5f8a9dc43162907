"""Exceptions raised by the ray tracer.

Rendering a validated scene is a total function, so the only failures are
degenerate geometric input caught at scene-build time and arithmetic that
has no defined result.
"""


class InvalidOperation(ArithmeticError):
    """An operation with no defined result, such as normalizing a zero vector."""


class InvalidConfiguration(ValueError):
    """A scene, primitive, material or light was built with invalid parameters."""
