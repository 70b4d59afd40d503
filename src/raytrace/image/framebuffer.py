"""Raster image: a width x height grid of colors.

Pixel (x, y) follows the viewport convention: x grows to the right and y grows
upward, so y = 0 is the bottom row. Storage is a float64 NumPy array indexed
[y, x, channel].
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt

from raytrace.core.color import BLACK, Color, as_color
from raytrace.core.errors import InvalidColorError


class Image:
    """A mutable grid of Colors, changed only through set_pixel.

    Attributes:
        width: Number of columns.
        height: Number of rows.
    """

    def __init__(self, width: int, height: int, fill: Color = BLACK) -> None:
        """Initialize an image with every pixel set to fill.

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self._pixels = np.empty((height, width, 3), dtype=np.float64)
        self._pixels[:, :] = as_color(fill).as_array()

    @classmethod
    def from_array(cls, pixels: npt.ArrayLike) -> Image:
        """Build an image from an array of shape (height, width, 3).

        Row 0 of the array is the bottom row (y = 0).

        Raises:
            ValueError: If the array does not have shape (H, W, 3).
            InvalidColorError: If any value is outside [0, 1].
        """
        array = np.array(pixels, dtype=np.float64)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected an array of shape (height, width, 3), got {array.shape}")
        if not np.all((array >= 0.0) & (array <= 1.0)):
            raise InvalidColorError("Image values must lie in [0, 1]")
        image = cls.__new__(cls)
        image._pixels = array
        return image

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    def is_x_coordinate(self, x: int) -> bool:
        return 0 <= x < self.width

    def is_y_coordinate(self, y: int) -> bool:
        return 0 <= y < self.height

    def is_coordinate(self, x: int, y: int) -> bool:
        return self.is_x_coordinate(x) and self.is_y_coordinate(y)

    def _check_coordinate(self, x: int, y: int) -> None:
        if not self.is_coordinate(x, y):
            raise IndexError(f"Pixel ({x}, {y}) is outside a {self.width}x{self.height} image")

    def pixel(self, x: int, y: int) -> Color:
        """Get a single pixel.

        Raises:
            IndexError: If (x, y) is outside the image.
        """
        self._check_coordinate(x, y)
        r, g, b = self._pixels[y, x]
        return Color(float(r), float(g), float(b))

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        """Set a single pixel.

        Raises:
            IndexError: If (x, y) is outside the image.
            InvalidColorError: If color is not a valid color.
        """
        self._check_coordinate(x, y)
        self._pixels[y, x] = as_color(color).as_array()

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a copy of the pixels as an array of shape (height, width, 3).

        Row 0 is the bottom row; use np.flipud for top-down image order.
        """
        return self._pixels.copy()

    def write_ppm(self, path: str | Path) -> None:
        """Write the image as an ASCII PPM (P3) file.

        Raises:
            RasterWriteError: If the file cannot be written.
        """
        from raytrace.image.export import write_ppm

        write_ppm(self, path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    def __repr__(self) -> str:
        return f"Image(width={self.width}, height={self.height})"
