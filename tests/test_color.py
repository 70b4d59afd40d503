"""Unit tests for colors, materials, and lights.

Tests cover:
- Channel validation (never silently clamped on input)
- clamp_color for out-of-range shading results
- web_color conversion
- Material and Light validation
"""

import math

import numpy as np
import pytest

from raytrace.core.color import (
    BLACK,
    WHITE,
    Color,
    as_color,
    clamp_color,
    is_color_intensity,
    web_color,
)
from raytrace.core.errors import CoordinateTagError, InvalidColorError, InvalidGeometryError
from raytrace.core.vector import direction, point
from raytrace.shading.lights import Light, PointLight
from raytrace.shading.material import Material


class TestColor:
    """Tests for Color construction and validation."""

    def test_valid_color(self):
        c = Color(0.1, 0.5, 1.0)
        assert c.as_tuple() == (0.1, 0.5, 1.0)
        assert tuple(c) == (0.1, 0.5, 1.0)

    @pytest.mark.parametrize("channels", [(1.5, 0.0, 0.0), (0.0, -0.1, 0.0), (0.0, 0.0, math.nan)])
    def test_out_of_range_rejected(self, channels):
        with pytest.raises(InvalidColorError):
            Color(*channels)

    def test_is_color_intensity(self):
        assert is_color_intensity(0.0)
        assert is_color_intensity(1.0)
        assert not is_color_intensity(1.0001)
        assert not is_color_intensity(-0.0001)

    def test_as_color_from_tuple(self):
        assert as_color((0.2, 0.4, 0.6)) == Color(0.2, 0.4, 0.6)

    def test_as_color_wrong_length(self):
        with pytest.raises(InvalidColorError):
            as_color((0.2, 0.4))


class TestClampColor:
    """Tests for clamp_color."""

    @pytest.mark.parametrize("color", [BLACK, WHITE, Color(0.25, 0.5, 0.75), Color(0.0, 1.0, 0.3)])
    def test_clamp_is_identity_on_valid_colors(self, color):
        assert clamp_color(color) == color

    def test_clamp_bounds_out_of_range(self):
        assert clamp_color((1.7, -0.3, 0.5)) == Color(1.0, 0.0, 0.5)

    def test_clamp_accepts_arrays(self):
        assert clamp_color(np.array([2.0, 0.5, -1.0])) == Color(1.0, 0.5, 0.0)

    def test_clamp_nan_to_zero(self):
        assert clamp_color((math.nan, 0.5, 0.5)) == Color(0.0, 0.5, 0.5)


class TestWebColor:
    """Tests for web_color hex conversion."""

    def test_primary_colors(self):
        assert web_color(0xFF0000) == Color(1.0, 0.0, 0.0)
        assert web_color(0x00FF00) == Color(0.0, 1.0, 0.0)
        assert web_color(0x0000FF) == Color(0.0, 0.0, 1.0)

    def test_channel_values(self):
        c = web_color(0x336699)
        assert abs(c.r - 51 / 255) < 1e-12
        assert abs(c.g - 102 / 255) < 1e-12
        assert abs(c.b - 153 / 255) < 1e-12

    def test_out_of_range_rejected(self):
        with pytest.raises(InvalidColorError):
            web_color(0x1000000)
        with pytest.raises(InvalidColorError):
            web_color(-1)


class TestMaterial:
    """Tests for Material."""

    def test_diffuse_only(self):
        m = Material.diffuse((0.8, 0.2, 0.2))
        assert m.diffuse_color == Color(0.8, 0.2, 0.2)
        assert m.specular_color == BLACK
        assert not m.has_specular

    def test_specular(self):
        m = Material(diffuse_color=WHITE, specular_color=WHITE, shininess=32.0)
        assert m.has_specular

    def test_invalid_diffuse_rejected(self):
        with pytest.raises(InvalidColorError):
            Material.diffuse((1.2, 0.0, 0.0))

    @pytest.mark.parametrize("shininess", [0.0, -4.0, math.inf])
    def test_invalid_shininess_rejected(self, shininess):
        with pytest.raises(ValueError):
            Material(diffuse_color=WHITE, shininess=shininess)


class TestLights:
    """Tests for Light and PointLight."""

    def test_ambient_light(self):
        light = Light(color=(1.0, 1.0, 1.0), intensity=0.2)
        assert light.color == WHITE
        assert light.intensity == 0.2

    @pytest.mark.parametrize("intensity", [0.0, -1.0, math.nan])
    def test_non_positive_intensity_rejected(self, intensity):
        with pytest.raises(InvalidGeometryError):
            Light(color=WHITE, intensity=intensity)

    def test_intensity_may_exceed_one(self):
        """Intensity is a power, not a color channel."""
        assert PointLight(color=WHITE, intensity=50.0, location=point(0, 5, 0)).intensity == 50.0

    def test_point_light_requires_point(self):
        with pytest.raises(CoordinateTagError):
            PointLight(color=WHITE, intensity=1.0, location=direction(0, 1, 0))

    def test_invalid_light_color_rejected(self):
        with pytest.raises(InvalidColorError):
            PointLight(color=(2.0, 1.0, 1.0), intensity=1.0, location=point(0, 1, 0))
