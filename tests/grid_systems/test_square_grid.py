"""Tests for square grid implementation."""

import math
import pytest

from src.abstractions.types import (
    GridDiagonalRule, GridDimensions, GridOffset, MovementDirection, PathWaypoint, Point, Rectangle,
    SnappingBehavior, SnappingMode
)
from src.base import GridConfigurationError, InvalidSnappingModeError
from src.grid_systems import SquareGrid


class TestSquareGridCoordinates:
    """Test conversion between points and offsets."""

    def test_get_offset(self, square_grid):
        """Test offset of the space containing a point."""
        assert square_grid.get_offset(Point(150, 250)) == GridOffset(2, 1)
        assert square_grid.get_offset(Point(-1, -1)) == GridOffset(-1, -1)

    def test_get_offset_is_idempotent_on_offsets(self, square_grid):
        """Test that offsets are returned unchanged."""
        offset = GridOffset(3, -2)
        assert square_grid.get_offset(offset) is offset

    def test_get_offset_elevated(self, square_grid):
        """Test layer of an elevated point."""
        assert square_grid.get_offset(Point(50, 50, 10)) == GridOffset(0, 0, 2)
        assert square_grid.get_offset(Point(50, 50, 9.99)) == GridOffset(0, 0, 1)

    def test_top_left_and_center_points(self, square_grid):
        """Test anchor points of a space."""
        assert square_grid.get_top_left_point(GridOffset(2, 1)) == Point(100, 200)
        assert square_grid.get_center_point(GridOffset(2, 1)) == Point(150, 250)
        assert square_grid.get_center_point(GridOffset(0, 0, 1)) == Point(50, 50, 7.5)
        assert square_grid.get_center_point(Point(120, 260)) == Point(150, 250)

    def test_offset_range(self, square_grid):
        """Test the offset range covering a rectangle."""
        assert square_grid.get_offset_range(Rectangle(50, 50, 100, 100)) == [0, 0, 2, 2]
        assert square_grid.get_offset_range(Rectangle(0, 0, 100, 100)) == [0, 0, 1, 1]

    def test_offset_range_empty_rectangle(self, square_grid):
        """Test that an empty rectangle yields an empty range."""
        i0, j0, i1, j1 = square_grid.get_offset_range(Rectangle(150, 250, 0, 10))
        assert i0 == i1 == 2
        assert j0 == j1 == 1

    def test_shape_and_vertices(self, square_grid):
        """Test the outline of a space."""
        assert square_grid.get_shape() == [Point(-50, -50), Point(50, -50), Point(50, 50), Point(-50, 50)]
        assert square_grid.get_vertices(GridOffset(1, 2)) == [
            Point(200, 100), Point(300, 100), Point(300, 200), Point(200, 200)
        ]

    def test_cell_polygon(self, square_grid):
        """Test the shapely polygon of a space."""
        polygon = square_grid.get_cell_polygon(GridOffset(1, 2))
        assert polygon.area == pytest.approx(10000)
        assert polygon.bounds == (200, 100, 300, 200)


class TestSquareGridAdjacency:
    """Test adjacency and shifting."""

    def test_adjacent_offsets_2d(self, square_grid):
        """Test 8-connected neighbors."""
        adjacent = square_grid.get_adjacent_offsets(GridOffset(5, 5))
        assert len(adjacent) == 8
        assert GridOffset(5, 5) not in adjacent
        assert GridOffset(4, 4) in adjacent

    def test_adjacent_offsets_illegal_diagonals(self):
        """Test 4-connected neighbors when diagonals are illegal."""
        grid = SquareGrid(size=100, diagonals=GridDiagonalRule.ILLEGAL)
        adjacent = grid.get_adjacent_offsets(GridOffset(5, 5))
        assert adjacent == [GridOffset(4, 5), GridOffset(5, 4), GridOffset(5, 6), GridOffset(6, 5)]

    def test_adjacent_offsets_3d(self, square_grid):
        """Test neighbors in 3D."""
        assert len(square_grid.get_adjacent_offsets(GridOffset(0, 0, 0))) == 26
        grid = SquareGrid(size=100, diagonals=GridDiagonalRule.ILLEGAL)
        assert len(grid.get_adjacent_offsets(GridOffset(0, 0, 0))) == 6

    def test_adjacency_consistent_with_neighbors(self, square_grid):
        """Test that every neighbor passes the adjacency test."""
        origin = GridOffset(2, 3)
        for offset in square_grid.get_adjacent_offsets(origin):
            assert square_grid.test_adjacency(origin, offset)
        assert not square_grid.test_adjacency(origin, origin)
        assert not square_grid.test_adjacency(origin, GridOffset(4, 3))

    def test_adjacency_illegal_diagonals(self):
        """Test that diagonal spaces are not adjacent when diagonals are illegal."""
        grid = SquareGrid(size=100, diagonals=GridDiagonalRule.ILLEGAL)
        assert grid.test_adjacency(GridOffset(0, 0), GridOffset(0, 1))
        assert not grid.test_adjacency(GridOffset(0, 0), GridOffset(1, 1))

    def test_shifted_offset(self, square_grid):
        """Test shifting by one space."""
        assert square_grid.get_shifted_offset(GridOffset(0, 0), MovementDirection.DOWN_RIGHT) == GridOffset(1, 1)
        assert square_grid.get_shifted_offset(GridOffset(0, 0, 0), MovementDirection.ASCEND) == GridOffset(0, 0, 1)

    def test_shifted_offset_suppresses_illegal_diagonal(self):
        """Test that diagonal shifts do not move when diagonals are illegal."""
        grid = SquareGrid(size=100, diagonals=GridDiagonalRule.ILLEGAL)
        assert grid.get_shifted_offset(GridOffset(0, 0), MovementDirection.UP_LEFT) == GridOffset(0, 0)
        assert grid.get_shifted_offset(GridOffset(0, 0), MovementDirection.LEFT) == GridOffset(0, -1)

    def test_shifted_point(self, square_grid):
        """Test that shifting keeps the position within the space."""
        assert square_grid.get_shifted_point(Point(10, 20), MovementDirection.RIGHT) == Point(110, 20)
        assert square_grid.get_shifted_point(Point(10, 20, 6), MovementDirection.DESCEND) == Point(10, 20, 1)


class TestSquareGridSnapping:
    """Test snapping to grid-aligned points."""

    def test_snap_to_center(self, square_grid):
        """Test snapping to the center of a space."""
        snapped = square_grid.get_snapped_point(Point(40, 160), SnappingBehavior(SnappingMode.CENTER))
        assert snapped == Point(50, 150)

    def test_snap_to_center_with_resolution(self, square_grid):
        """Test snapping to the centers of subdivided spaces."""
        snapped = square_grid.get_snapped_point(Point(80, 160), SnappingBehavior(SnappingMode.CENTER, 2))
        assert snapped == Point(100, 150)

    def test_snap_to_vertex(self, square_grid):
        """Test snapping to the nearest vertex."""
        snapped = square_grid.get_snapped_point(Point(40, 160), SnappingBehavior(SnappingMode.VERTEX))
        assert snapped == Point(0, 200)

    def test_snap_to_edge(self, square_grid):
        """Test snapping to the nearest edge midpoint."""
        snapped = square_grid.get_snapped_point(Point(10, 45), SnappingBehavior(SnappingMode.EDGE_MIDPOINT))
        assert snapped == Point(0, 50)

    def test_snap_to_nearest_candidate(self, square_grid):
        """Test that the nearest of the requested targets wins."""
        behavior = SnappingBehavior(SnappingMode.CENTER | SnappingMode.VERTEX)
        assert square_grid.get_snapped_point(Point(45, 55), behavior) == Point(50, 50)
        assert square_grid.get_snapped_point(Point(95, 5), behavior) == Point(100, 0)

    def test_mode_zero_keeps_position(self, square_grid):
        """Test that mode 0 only snaps the elevation."""
        assert square_grid.get_snapped_point(Point(3, 4), SnappingBehavior(0)) == Point(3, 4)
        assert square_grid.get_snapped_point(Point(3, 4, 7), SnappingBehavior(0)) == Point(3, 4, 5)

    def test_elevation_snapped_to_distance(self, square_grid):
        """Test that elevation is rounded to a multiple of the grid distance."""
        snapped = square_grid.get_snapped_point(Point(40, 160, 8), SnappingBehavior(SnappingMode.CENTER))
        assert snapped == Point(50, 150, 10)

    @pytest.mark.parametrize('mode', [0x4, 0x8, 0x10000])
    def test_invalid_mode(self, square_grid, mode):
        """Test that modes with unknown bits are rejected."""
        with pytest.raises(InvalidSnappingModeError):
            square_grid.get_snapped_point(Point(0, 0), SnappingBehavior(mode))

    def test_invalid_resolution(self):
        """Test that the resolution must be a positive integer."""
        with pytest.raises(ValueError):
            SnappingBehavior(SnappingMode.CENTER, 0)


class TestSquareGridMeasurement:
    """Test path measurement under each diagonal rule."""

    def test_measure_path_equidistant(self, square_grid):
        """Test the straight line from (0, 0) to (300, 400)."""
        result = square_grid.measure_path([Point(0, 0), Point(300, 400)])
        assert result.spaces == 4
        assert result.diagonals == 3
        assert result.distance == pytest.approx(20)
        assert result.cost == pytest.approx(20)
        assert result.euclidean == pytest.approx(25)

    def test_measure_path_exact(self):
        """Test that a diagonal step measures the square root of two."""
        grid = SquareGrid(size=100, distance=1, diagonals=GridDiagonalRule.EXACT)
        result = grid.measure_path([GridOffset(0, 0), GridOffset(1, 1)])
        assert result.distance == pytest.approx(math.sqrt(2))
        assert result.cost == pytest.approx(math.sqrt(2))

    def test_measure_path_approximate(self):
        """Test that diagonal steps count one and a half."""
        grid = SquareGrid(size=100, distance=1, diagonals=GridDiagonalRule.APPROXIMATE)
        result = grid.measure_path([GridOffset(0, 0), GridOffset(2, 2)])
        assert result.distance == pytest.approx(3)

    def test_measure_path_rectilinear(self):
        """Test that diagonal steps count two."""
        grid = SquareGrid(size=100, distance=1, diagonals=GridDiagonalRule.RECTILINEAR)
        result = grid.measure_path([GridOffset(0, 0), GridOffset(2, 3)])
        assert result.distance == pytest.approx(5)
        assert result.cost == pytest.approx(5)

    def test_measure_path_alternating_1(self):
        """Test that diagonal costs alternate 1, 2 across segments."""
        grid = SquareGrid(size=100, distance=5, diagonals=GridDiagonalRule.ALTERNATING_1)
        result = grid.measure_path([GridOffset(0, 0), GridOffset(1, 1), GridOffset(2, 2)])
        assert [s.distance for s in result.segments] == pytest.approx([5, 10])
        assert [s.cost for s in result.segments] == pytest.approx([5, 10])
        assert result.distance == pytest.approx(15)
        assert result.diagonals == 2

    def test_measure_path_alternating_2(self):
        """Test that the first diagonal costs two."""
        grid = SquareGrid(size=100, distance=5, diagonals=GridDiagonalRule.ALTERNATING_2)
        result = grid.measure_path([GridOffset(0, 0), GridOffset(1, 1), GridOffset(2, 2)])
        assert [s.cost for s in result.segments] == pytest.approx([10, 5])

    @pytest.mark.parametrize('rule,distances,costs', [
        (GridDiagonalRule.ALTERNATING_1, [5, 10, 5], [5, 0, 5]),
        (GridDiagonalRule.ALTERNATING_2, [10, 5, 10], [10, 0, 10])
    ])
    def test_alternating_counter_across_teleport(self, rule, distances, costs):
        """Test that a teleported diagonal still advances the alternation."""
        grid = SquareGrid(size=100, distance=5, diagonals=rule)
        result = grid.measure_path([
            GridOffset(0, 0),
            GridOffset(1, 1),
            PathWaypoint(GridOffset(2, 2), teleport=True),
            GridOffset(3, 3)
        ])

        assert [s.distance for s in result.segments] == pytest.approx(distances)
        assert [s.cost for s in result.segments] == pytest.approx(costs)
        assert [s.spaces for s in result.segments] == [1, 0, 1]
        assert result.diagonals == 2

    @pytest.mark.parametrize('rule,distances', [
        (GridDiagonalRule.ALTERNATING_1, [5, 0, 10]),
        (GridDiagonalRule.ALTERNATING_2, [10, 0, 5])
    ])
    def test_alternating_counter_across_unmeasured_waypoint(self, rule, distances):
        """Test that an unmeasured segment leaves the alternation where it was."""
        grid = SquareGrid(size=100, distance=5, diagonals=rule)
        result = grid.measure_path([
            GridOffset(0, 0),
            GridOffset(1, 1),
            PathWaypoint(GridOffset(2, 2), measure=False),
            GridOffset(3, 3)
        ])

        assert [s.distance for s in result.segments] == pytest.approx(distances)
        assert [s.cost for s in result.segments] == pytest.approx(distances)
        assert [s.spaces for s in result.segments] == [1, 0, 1]
        assert result.distance == pytest.approx(15)

    def test_measure_path_illegal(self):
        """Test that diagonal moves decompose into orthogonal steps."""
        grid = SquareGrid(size=100, distance=1, diagonals=GridDiagonalRule.ILLEGAL)
        result = grid.measure_path([GridOffset(0, 0), GridOffset(1, 1)])
        assert result.spaces == 2
        assert result.diagonals == 0
        assert result.distance == pytest.approx(2)

    def test_measure_path_3d(self):
        """Test a diagonal step through three axes."""
        grid = SquareGrid(size=100, distance=1, diagonals=GridDiagonalRule.EXACT)
        result = grid.measure_path([GridOffset(0, 0, 0), GridOffset(1, 1, 1)])
        assert result.distance == pytest.approx(math.sqrt(3))
        assert result.spaces == 1

    def test_cost_function_per_step(self, square_grid):
        """Test that the cost function is called for every step of the direct path."""
        calls = []

        def cost(start, end, distance, waypoint):
            calls.append((start, end, distance))
            return 2 * distance

        result = square_grid.measure_path([GridOffset(0, 0), GridOffset(0, 3)], cost=cost)
        assert len(calls) == 3
        assert all(distance == 5 for _, _, distance in calls)
        assert result.cost == pytest.approx(30)


class TestSquareGridDirectPath:
    """Test the line walking between waypoints."""

    def test_direct_path_diagonal(self, square_grid):
        """Test that the walk steps diagonally."""
        path = square_grid.get_direct_path([GridOffset(0, 0), GridOffset(2, 2)])
        assert path == [GridOffset(0, 0), GridOffset(1, 1), GridOffset(2, 2)]

    def test_direct_path_illegal_diagonals(self):
        """Test that the walk is 4-connected when diagonals are illegal."""
        grid = SquareGrid(size=100, diagonals=GridDiagonalRule.ILLEGAL)
        path = grid.get_direct_path([GridOffset(0, 0), GridOffset(1, 1)])
        assert path == [GridOffset(0, 0), GridOffset(0, 1), GridOffset(1, 1)]

    def test_direct_path_is_connected(self, square_grid):
        """Test that consecutive offsets are adjacent."""
        path = square_grid.get_direct_path([GridOffset(0, 0), GridOffset(3, 7), GridOffset(-2, 1)])
        assert path[0] == GridOffset(0, 0)
        assert path[-1] == GridOffset(-2, 1)
        for o0, o1 in zip(path, path[1:]):
            assert square_grid.test_adjacency(o0, o1)

    def test_direct_path_skips_repeated_waypoints(self, square_grid):
        """Test that coincident waypoints add nothing."""
        assert square_grid.get_direct_path([GridOffset(0, 0), GridOffset(0, 0)]) == [GridOffset(0, 0)]
        assert square_grid.get_direct_path([]) == []

    def test_direct_path_3d(self, square_grid):
        """Test the walk through layers."""
        path = square_grid.get_direct_path([GridOffset(0, 0, 0), GridOffset(2, 0, 2)])
        assert path == [GridOffset(0, 0, 0), GridOffset(1, 0, 1), GridOffset(2, 0, 2)]

    def test_direct_path_3d_illegal_diagonals(self):
        """Test that the 3D walk changes one axis per step when diagonals are illegal."""
        grid = SquareGrid(size=100, diagonals=GridDiagonalRule.ILLEGAL)
        path = grid.get_direct_path([GridOffset(0, 0, 0), GridOffset(1, 1, 1)])
        assert len(path) == 4
        for o0, o1 in zip(path, path[1:]):
            assert abs(o0.i - o1.i) + abs(o0.j - o1.j) + abs(o0.k - o1.k) == 1


class TestSquareGridShapes:
    """Test translation, circles and dimensions."""

    def test_translated_point_equidistant(self, square_grid):
        """Test that diagonal translation covers a full space per distance."""
        p = square_grid.get_translated_point(Point(0, 0), 0, 5)
        assert p.x == pytest.approx(100)
        assert p.y == pytest.approx(0)
        p = square_grid.get_translated_point(Point(0, 0), 45, 5)
        assert p.x == pytest.approx(100)
        assert p.y == pytest.approx(100)

    def test_translated_point_exact(self):
        """Test Euclidean translation under the exact rule."""
        grid = SquareGrid(size=100, distance=1, diagonals=GridDiagonalRule.EXACT)
        p = grid.get_translated_point(Point(0, 0), 45, math.sqrt(2))
        assert p.x == pytest.approx(100)
        assert p.y == pytest.approx(100)

    def test_circle_equidistant_is_square(self, square_grid):
        """Test the circle of the equidistant rule."""
        circle = square_grid.get_circle(Point(0, 0), 5)
        assert circle == [Point(100, 100), Point(-100, 100), Point(-100, -100), Point(100, -100)]

    def test_circle_exact_is_octagon(self):
        """Test the circle of the exact rule."""
        grid = SquareGrid(size=100, distance=1, diagonals=GridDiagonalRule.EXACT)
        circle = grid.get_circle(Point(0, 0), 1)
        assert len(circle) == 8
        assert circle[0] == Point(100, 0)

    def test_circle_rectilinear_is_diamond(self):
        """Test the circle of the rectilinear rule."""
        grid = SquareGrid(size=100, distance=1, diagonals=GridDiagonalRule.RECTILINEAR)
        circle = grid.get_circle(Point(0, 0), 1)
        assert circle == [Point(100, 0), Point(0, 100), Point(-100, 0), Point(0, -100)]

    @pytest.mark.parametrize('rule', [GridDiagonalRule.ALTERNATING_1, GridDiagonalRule.ALTERNATING_2])
    def test_circle_alternating_is_symmetric(self, rule):
        """Test that the alternating circle has four-fold symmetry."""
        grid = SquareGrid(size=100, distance=1, diagonals=rule)
        circle = grid.get_circle(Point(0, 0), 3)
        assert len(circle) % 4 == 0
        assert max(abs(p.x) for p in circle) == pytest.approx(300)

    def test_circle_zero_radius(self, square_grid):
        """Test that a zero radius yields no polygon."""
        assert square_grid.get_circle(Point(0, 0), 0) == []

    def test_calculate_dimensions(self, square_grid):
        """Test padded scene dimensions."""
        dimensions = square_grid.calculate_dimensions(1000, 800, 0.25)
        assert dimensions == GridDimensions(width=1600, height=1200, x=300, y=200, rows=12, columns=16)

    def test_unknown_diagonal_rule(self):
        """Test that unknown diagonal rules are rejected."""
        with pytest.raises(GridConfigurationError):
            SquareGrid(size=100, diagonals=7)

    def test_measure_path_with_waypoint_options(self, square_grid):
        """Test waypoint-level cost overrides."""
        result = square_grid.measure_path([
            PathWaypoint(GridOffset(0, 0)),
            PathWaypoint(GridOffset(0, 2), cost=7)
        ])
        assert result.cost == pytest.approx(7)
        assert result.distance == pytest.approx(10)
