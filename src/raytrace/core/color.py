"""RGB colors with channels in [0, 1].

Colors are validated on construction and never clamped silently on input.
Clamping is reserved for shading output, where accumulated light can exceed
the displayable range.

Example:
    >>> from raytrace.core.color import Color, web_color
    >>> red = Color(1.0, 0.0, 0.0)
    >>> web_color(0x336699)
    Color(r=0.2, g=0.4, b=0.6)
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from raytrace.core.errors import InvalidColorError


def is_color_intensity(x: float) -> bool:
    """Test whether a scalar is a valid channel intensity in [0, 1]."""
    return 0.0 <= x <= 1.0


@dataclass(frozen=True)
class Color:
    """An immutable RGB color.

    Attributes:
        r: Red intensity in [0, 1].
        g: Green intensity in [0, 1].
        b: Blue intensity in [0, 1].

    Raises:
        InvalidColorError: If any channel is outside [0, 1] or NaN.
    """

    r: float
    g: float
    b: float

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if not is_color_intensity(value):
                raise InvalidColorError(f"Color channel {name} = {value} is outside [0, 1]")

    def __iter__(self) -> Iterator[float]:
        return iter((self.r, self.g, self.b))

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def as_array(self) -> npt.NDArray[np.float64]:
        return np.array(self.as_tuple(), dtype=np.float64)


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)


def as_color(value: Color | Sequence[float]) -> Color:
    """Coerce an (R, G, B) sequence to a Color, validating the channels.

    Raises:
        InvalidColorError: If the value does not have three channels in [0, 1].
    """
    if isinstance(value, Color):
        return value
    channels = tuple(float(c) for c in value)
    if len(channels) != 3:
        raise InvalidColorError(f"A color needs exactly 3 channels, got {len(channels)}")
    return Color(*channels)


def clamp_color(value: Color | Sequence[float] | npt.NDArray[np.floating]) -> Color:
    """Clamp each channel of an RGB triple into [0, 1].

    This is a no-op on an already valid Color. NaN channels clamp to 0.

    Args:
        value: Any three-channel value, possibly out of range.

    Returns:
        A valid Color.
    """
    channels = np.nan_to_num(np.asarray(tuple(value), dtype=np.float64), nan=0.0)
    if channels.shape != (3,):
        raise InvalidColorError(f"A color needs exactly 3 channels, got shape {channels.shape}")
    clipped = np.clip(channels, 0.0, 1.0)
    return Color(float(clipped[0]), float(clipped[1]), float(clipped[2]))


def web_color(hex_value: int) -> Color:
    """Convert a 24-bit hexadecimal web color (as used in HTML) to a Color.

    Args:
        hex_value: Integer in [0x000000, 0xFFFFFF].

    Raises:
        InvalidColorError: If hex_value is outside the 24-bit range.
    """
    if not 0 <= hex_value <= 0xFFFFFF:
        raise InvalidColorError(f"Web color {hex_value:#x} is outside [0x000000, 0xFFFFFF]")
    return Color(
        (hex_value >> 16) / 255.0,
        ((hex_value >> 8) & 0xFF) / 255.0,
        (hex_value & 0xFF) / 255.0,
    )
