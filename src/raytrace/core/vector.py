"""Homogeneous 4-component vectors for host-side scene description.

A Vector4 with w == 1 is a point and one with w == 0 is a direction. The
arithmetic operators follow affine rules so that mixing the two up is caught
where it happens rather than deep inside a kernel:

    point - point          -> direction
    point +/- direction    -> point
    direction +/- direction -> direction
    scalar * direction     -> direction

Any other combination raises CoordinateTagError.

Example:
    >>> from raytrace.core.vector import point, direction
    >>> eye = point(0.0, 0.0, 5.0)
    >>> gaze = direction(0.0, 0.0, -1.0)
    >>> eye + 2.0 * gaze
    Vector4(x=0.0, y=0.0, z=3.0, w=1.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from raytrace.core.errors import CoordinateTagError, InvalidGeometryError

POINT_W = 1.0
DIRECTION_W = 0.0


@dataclass(frozen=True)
class Vector4:
    """An immutable homogeneous vector.

    Attributes:
        x: First spatial component.
        y: Second spatial component.
        z: Third spatial component.
        w: Homogeneous tag, 1.0 for points and 0.0 for directions.
    """

    x: float
    y: float
    z: float
    w: float

    def __post_init__(self) -> None:
        if self.w not in (POINT_W, DIRECTION_W):
            raise CoordinateTagError(
                f"Homogeneous w must be 1 (point) or 0 (direction), got {self.w}"
            )
        for name in ("x", "y", "z"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidGeometryError(f"Component {name} = {getattr(self, name)} is not finite")

    @property
    def is_point(self) -> bool:
        return self.w == POINT_W

    @property
    def is_direction(self) -> bool:
        return self.w == DIRECTION_W

    @property
    def xyz(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def as_array(self) -> npt.NDArray[np.float64]:
        """Return the spatial part as a float64 array of shape (3,)."""
        return np.array(self.xyz, dtype=np.float64)

    # -------------------------------------------------------------------------
    # Affine arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: Vector4) -> Vector4:
        if not isinstance(other, Vector4):
            return NotImplemented
        if self.is_point and other.is_point:
            raise CoordinateTagError("Cannot add two points")
        return Vector4(self.x + other.x, self.y + other.y, self.z + other.z, self.w + other.w)

    def __sub__(self, other: Vector4) -> Vector4:
        if not isinstance(other, Vector4):
            return NotImplemented
        if self.is_direction and other.is_point:
            raise CoordinateTagError("Cannot subtract a point from a direction")
        return Vector4(self.x - other.x, self.y - other.y, self.z - other.z, self.w - other.w)

    def __mul__(self, scalar: float) -> Vector4:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        require_direction(self, "scaled vector")
        return Vector4(self.x * scalar, self.y * scalar, self.z * scalar, DIRECTION_W)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector4:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return self * (1.0 / scalar)

    def __neg__(self) -> Vector4:
        return self * -1.0

    # -------------------------------------------------------------------------
    # Direction-only operations
    # -------------------------------------------------------------------------

    def dot(self, other: Vector4) -> float:
        require_direction(self, "left operand of dot")
        require_direction(other, "right operand of dot")
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector4) -> Vector4:
        require_direction(self, "left operand of cross")
        require_direction(other, "right operand of cross")
        c = np.cross(self.as_array(), other.as_array())
        return direction(float(c[0]), float(c[1]), float(c[2]))

    def magnitude(self) -> float:
        require_direction(self, "magnitude operand")
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vector4:
        """Return a unit-length copy of this direction.

        Raises:
            CoordinateTagError: If this vector is a point.
            InvalidGeometryError: If this direction has zero length.
        """
        length = self.magnitude()
        if length == 0.0:
            raise InvalidGeometryError("Cannot normalize a zero-length direction")
        return self / length


def point(x: float, y: float, z: float) -> Vector4:
    """Create a homogeneous point (w = 1)."""
    return Vector4(float(x), float(y), float(z), POINT_W)


def direction(x: float, y: float, z: float) -> Vector4:
    """Create a homogeneous direction (w = 0)."""
    return Vector4(float(x), float(y), float(z), DIRECTION_W)


def require_point(value: Vector4, name: str = "value") -> Vector4:
    """Return value unchanged if it is a point.

    Raises:
        CoordinateTagError: If value is not a Vector4 point.
    """
    if not isinstance(value, Vector4) or not value.is_point:
        raise CoordinateTagError(f"{name} must be a homogeneous point (w=1), got {value!r}")
    return value


def require_direction(value: Vector4, name: str = "value") -> Vector4:
    """Return value unchanged if it is a direction.

    Raises:
        CoordinateTagError: If value is not a Vector4 direction.
    """
    if not isinstance(value, Vector4) or not value.is_direction:
        raise CoordinateTagError(f"{name} must be a homogeneous direction (w=0), got {value!r}")
    return value
