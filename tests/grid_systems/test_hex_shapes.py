"""Tests for hexagonal token footprints."""

import pytest
from shapely.geometry import Polygon

from src.abstractions.types import GridOffset, Point, TokenShape
from src.grid_systems import get_hexagonal_offsets, get_hexagonal_shape


class TestHexagonalShape:
    """Test token shapes."""

    def test_single_space(self):
        """Test that a 1x1 token occupies one hexagon."""
        shape = get_hexagonal_shape(1, 1, TokenShape.ELLIPSE_1, False)
        assert shape.even == (GridOffset(0, 0),)
        assert shape.odd == (GridOffset(0, 0),)
        assert shape.anchor == Point(0.5, 0.5)
        polygon = shape.get_polygon(100, 100)
        assert len(polygon) == 6
        assert polygon[0] == Point(50, 0)

    def test_ellipse_rows(self):
        """Test the offsets of a 2x2 ellipse in a row-based grid."""
        shape = get_hexagonal_shape(2, 2, TokenShape.ELLIPSE_1, False)
        assert shape.even == (GridOffset(0, 0), GridOffset(0, 1), GridOffset(1, 1))
        assert shape.odd == (GridOffset(0, 0), GridOffset(0, 1), GridOffset(1, 0))

    def test_ellipse_columns_are_transposed(self):
        """Test that column shapes transpose the row shapes."""
        shape = get_hexagonal_shape(2, 2, TokenShape.ELLIPSE_1, True)
        assert shape.even == (GridOffset(0, 0), GridOffset(1, 0), GridOffset(1, 1))
        row_shape = get_hexagonal_shape(2, 2, TokenShape.ELLIPSE_1, False)
        assert shape.anchor == Point(row_shape.anchor.y, row_shape.anchor.x)

    def test_polygon_area_matches_spaces(self):
        """Test that the outline covers exactly the occupied hexagons."""
        shape = get_hexagonal_shape(2, 2, TokenShape.ELLIPSE_1, False)
        polygon = Polygon([(p.x, p.y) for p in shape.get_polygon(1, 1)])
        assert polygon.is_valid
        # A hexagon spans 0.75 in units of its bounding box
        assert polygon.area == pytest.approx(0.75 * len(shape.even))

    @pytest.mark.parametrize('width,height,shape', [
        (3, 2, TokenShape.ELLIPSE_1),
        (3, 3, TokenShape.ELLIPSE_2),
        (3, 2, TokenShape.TRAPEZOID_1),
        (3, 3, TokenShape.TRAPEZOID_2),
        (2, 2, TokenShape.RECTANGLE_1)
    ])
    def test_outline_area(self, width, height, shape):
        """Test the outline area of larger shapes."""
        data = get_hexagonal_shape(width, height, shape, False)
        assert data is not None
        assert len(data.even) == len(data.odd)
        polygon = Polygon([(p.x, p.y) for p in data.get_polygon(1, 1)])
        assert polygon.area == pytest.approx(0.75 * len(data.even))

    def test_no_shape(self):
        """Test sizes without a hexagonal shape."""
        assert get_hexagonal_shape(1.3, 1, TokenShape.ELLIPSE_1, False) is None
        assert get_hexagonal_shape(1, 2, TokenShape.ELLIPSE_1, False) is None
        assert get_hexagonal_shape(2, 3, TokenShape.TRAPEZOID_1, False) is None

    def test_shapes_are_memoized(self):
        """Test that repeated calls return the same object."""
        first = get_hexagonal_shape(3, 2, TokenShape.ELLIPSE_1, False)
        assert get_hexagonal_shape(3, 2, TokenShape.ELLIPSE_1, False) is first


class TestHexagonalOffsets:
    """Test occupied offsets with the rectangular fallback."""

    def test_shape_offsets(self):
        """Test that sizes with a shape use its offsets and anchor."""
        data = get_hexagonal_offsets(2, 2, TokenShape.ELLIPSE_1, False)
        shape = get_hexagonal_shape(2, 2, TokenShape.ELLIPSE_1, False)
        assert data.even == shape.even
        assert data.anchor == shape.anchor

    def test_rectangular_fallback(self):
        """Test that other sizes fall back to a hexagonal rectangle."""
        data = get_hexagonal_offsets(1.5, 1, TokenShape.ELLIPSE_1, False)
        assert len(data.even) == 2
        assert data.anchor == Point(0.25, 0.25)

    def test_no_fallback(self):
        """Test that tiny sizes have no footprint."""
        with pytest.raises(ValueError):
            get_hexagonal_offsets(0.3, 1, TokenShape.ELLIPSE_1, False)
