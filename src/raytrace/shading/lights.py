"""Light sources: the positionless ambient term and point lights.

Example:
    >>> from raytrace.core.color import WHITE
    >>> from raytrace.core.vector import point
    >>> ambient = Light(color=WHITE, intensity=0.2)
    >>> lamp = PointLight(color=WHITE, intensity=50.0, location=point(0, 5, 0))
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from raytrace.core.color import Color, as_color
from raytrace.core.errors import InvalidGeometryError
from raytrace.core.vector import Vector4, require_point


@dataclass(frozen=True)
class Light:
    """A light with a color and a positive intensity.

    Used directly as a scene's ambient light, which contributes uniformly and
    has no position.

    Attributes:
        color: Light color (RGB in [0, 1]).
        intensity: Positive scalar power of the light.

    Raises:
        InvalidColorError: If color has a channel outside [0, 1].
        InvalidGeometryError: If intensity is not positive.
    """

    color: Color
    intensity: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", as_color(self.color))
        if not (math.isfinite(self.intensity) and self.intensity > 0.0):
            raise InvalidGeometryError(f"Light intensity must be positive, got {self.intensity}")


@dataclass(frozen=True)
class PointLight(Light):
    """A light radiating from a single location with inverse-square falloff.

    Attributes:
        location: Homogeneous point where the light sits.

    Raises:
        CoordinateTagError: If location is not a point.
    """

    location: Vector4

    def __post_init__(self) -> None:
        super().__post_init__()
        require_point(self.location, "point light location")
