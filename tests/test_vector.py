"""Unit tests for homogeneous points and directions.

Tests cover:
- Point/direction construction and tag validation
- Affine arithmetic rules
- Direction-only operations (dot, cross, magnitude, normalize)
"""

import math

import pytest

from raytrace.core.errors import CoordinateTagError, InvalidGeometryError
from raytrace.core.vector import Vector4, direction, point, require_direction, require_point


class TestConstruction:
    """Tests for building Vector4 values."""

    def test_point_has_w_one(self):
        p = point(1, 2, 3)
        assert p.w == 1.0
        assert p.is_point
        assert not p.is_direction
        assert p.xyz == (1.0, 2.0, 3.0)

    def test_direction_has_w_zero(self):
        d = direction(1, 2, 3)
        assert d.w == 0.0
        assert d.is_direction
        assert not d.is_point

    def test_invalid_tag_rejected(self):
        """Only w = 0 and w = 1 are valid homogeneous tags."""
        with pytest.raises(CoordinateTagError):
            Vector4(0.0, 0.0, 0.0, 0.5)

    def test_non_finite_component_rejected(self):
        with pytest.raises(InvalidGeometryError):
            point(math.nan, 0.0, 0.0)
        with pytest.raises(InvalidGeometryError):
            direction(0.0, math.inf, 0.0)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            Vector4(0.0, 0.0, 0.0, 2.0)


class TestAffineArithmetic:
    """Tests for the point/direction arithmetic rules."""

    def test_point_minus_point_is_direction(self):
        d = point(3, 2, 1) - point(1, 1, 1)
        assert d == direction(2, 1, 0)

    def test_point_plus_direction_is_point(self):
        p = point(0, 0, 5) + direction(0, 0, -2)
        assert p == point(0, 0, 3)

    def test_direction_plus_direction_is_direction(self):
        assert direction(1, 0, 0) + direction(0, 1, 0) == direction(1, 1, 0)

    def test_point_plus_point_rejected(self):
        with pytest.raises(CoordinateTagError):
            point(1, 0, 0) + point(0, 1, 0)

    def test_direction_minus_point_rejected(self):
        with pytest.raises(CoordinateTagError):
            direction(1, 0, 0) - point(0, 1, 0)

    def test_scalar_times_direction(self):
        assert 2.0 * direction(1, 2, 3) == direction(2, 4, 6)
        assert direction(1, 2, 3) * 2 == direction(2, 4, 6)
        assert -direction(1, 0, 0) == direction(-1, 0, 0)

    def test_scalar_times_point_rejected(self):
        with pytest.raises(CoordinateTagError):
            2.0 * point(1, 2, 3)


class TestDirectionOperations:
    """Tests for operations defined only on directions."""

    def test_dot(self):
        assert direction(1, 2, 3).dot(direction(4, 5, 6)) == 32.0

    def test_dot_with_point_rejected(self):
        with pytest.raises(CoordinateTagError):
            direction(1, 0, 0).dot(point(1, 0, 0))

    def test_cross_right_handed(self):
        assert direction(1, 0, 0).cross(direction(0, 1, 0)) == direction(0, 0, 1)

    def test_magnitude(self):
        assert abs(direction(3, 4, 0).magnitude() - 5.0) < 1e-12

    def test_normalized(self):
        n = direction(0, 0, -7).normalized()
        assert n.is_direction
        assert abs(n.z + 1.0) < 1e-12
        assert n.x == 0.0 and n.y == 0.0

    def test_normalize_zero_rejected(self):
        with pytest.raises(InvalidGeometryError):
            direction(0, 0, 0).normalized()


class TestRequireHelpers:
    """Tests for require_point / require_direction."""

    def test_require_point_passes_through(self):
        p = point(1, 1, 1)
        assert require_point(p) is p

    def test_require_point_rejects_direction(self):
        with pytest.raises(CoordinateTagError, match="center"):
            require_point(direction(1, 1, 1), "center")

    def test_require_direction_rejects_point(self):
        with pytest.raises(CoordinateTagError):
            require_direction(point(1, 1, 1))

    def test_require_rejects_plain_tuple(self):
        with pytest.raises(CoordinateTagError):
            require_point((1.0, 1.0, 1.0))
