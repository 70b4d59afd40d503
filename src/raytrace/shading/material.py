"""Surface material carried by every scene object."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from raytrace.core.color import BLACK, Color, as_color


@dataclass(frozen=True)
class Material:
    """Diffuse and specular reflectance of a surface.

    Attributes:
        diffuse_color: Lambertian reflectance (RGB in [0, 1]).
        specular_color: Reflectance of Blinn-Phong highlights (RGB in [0, 1]).
        shininess: Blinn-Phong exponent. None disables highlights, leaving a
            purely diffuse surface.

    Raises:
        InvalidColorError: If either color has a channel outside [0, 1].
        ValueError: If shininess is given and is not a positive finite number.
    """

    diffuse_color: Color
    specular_color: Color = BLACK
    shininess: float | None = None

    def __post_init__(self) -> None:
        # Frozen dataclass: coerce tuples via object.__setattr__
        object.__setattr__(self, "diffuse_color", as_color(self.diffuse_color))
        object.__setattr__(self, "specular_color", as_color(self.specular_color))
        if self.shininess is not None and not (
            math.isfinite(self.shininess) and self.shininess > 0.0
        ):
            raise ValueError(f"Shininess must be positive, got {self.shininess}")

    @property
    def has_specular(self) -> bool:
        return self.shininess is not None

    @classmethod
    def diffuse(cls, color: Color | Sequence[float]) -> Material:
        """Create a matte material with no highlights."""
        return cls(diffuse_color=as_color(color))
