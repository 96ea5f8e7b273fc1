"""Tests for the GridHex value object."""

import pytest

from src.abstractions.types import GridOffset, HexCube, Point
from src.base import InvalidCoordinatesError
from src.grid_systems import GridHex, HexagonalGrid


class TestGridHex:
    """Test hex construction and navigation."""

    def test_from_offset(self, hex_grid):
        """Test that offsets and cubes agree."""
        hex_ = GridHex(GridOffset(2, 3), hex_grid)
        assert hex_.offset == GridOffset(2, 3)
        assert hex_.cube == hex_grid.offset_to_cube(GridOffset(2, 3))

    def test_from_point(self, hex_grid):
        """Test that a point selects the containing hex."""
        hex_ = GridHex(Point(10, 60), hex_grid)
        assert hex_.offset == GridOffset(0, 0)

    def test_center_and_top_left(self, any_hex_grid):
        """Test that the anchor points match the grid's."""
        hex_ = GridHex(GridOffset(1, 2), any_hex_grid)
        center = any_hex_grid.get_center_point(GridOffset(1, 2))
        top_left = any_hex_grid.get_top_left_point(GridOffset(1, 2))
        assert hex_.center.x == pytest.approx(center.x)
        assert hex_.center.y == pytest.approx(center.y)
        assert hex_.top_left.x == pytest.approx(top_left.x)
        assert hex_.top_left.y == pytest.approx(top_left.y)

    def test_neighbors(self, any_hex_grid):
        """Test that a hex has six distinct adjacent neighbors."""
        hex_ = GridHex(GridOffset(1, 1), any_hex_grid)
        neighbors = hex_.get_neighbors()
        assert len(set(neighbors)) == 6
        assert hex_ not in neighbors
        for neighbor in neighbors:
            assert any_hex_grid.test_adjacency(hex_.offset, neighbor.offset)

    def test_shift_cube(self, hex_grid):
        """Test shifting by cube deltas."""
        hex_ = GridHex(HexCube(0, 0, 0), hex_grid)
        shifted = hex_.shift_cube(1, -1, 0)
        assert shifted.cube == HexCube(1, -1, 0)
        assert shifted in hex_.get_neighbors()

    def test_shift_cube_keeps_layer(self, hex_grid):
        """Test that shifting keeps the elevation layer."""
        hex_ = GridHex(HexCube(0, 0, 0, 2), hex_grid)
        shifted = hex_.shift_cube(0, 1, -1)
        assert shifted.cube == HexCube(0, 1, -1, 2)
        assert shifted.offset.k == 2

    def test_equality_and_hash(self, hex_grid):
        """Test that hexes with the same offset are equal."""
        a = GridHex(GridOffset(4, 5), hex_grid)
        b = GridHex(hex_grid.get_center_point(GridOffset(4, 5)), hex_grid)
        assert a == b
        assert hash(a) == hash(b)
        assert a != GridHex(GridOffset(4, 6), hex_grid)
        assert len({a, b}) == 1
        assert repr(a) == "GridHex(i=4, j=5)"

    def test_requires_hexagonal_grid(self, square_grid):
        """Test that other grids are rejected."""
        with pytest.raises(TypeError):
            GridHex(GridOffset(0, 0), square_grid)

    def test_invalid_cube(self):
        """Test that invalid cube coordinates are rejected."""
        with pytest.raises(InvalidCoordinatesError):
            GridHex(HexCube(1, 1, 1), HexagonalGrid(size=100))
