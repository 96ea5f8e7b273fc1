"""Tests for the BaseGrid skeleton shared by all grids."""

import pytest

from src.abstractions.types import GridDiagonalRule, GridOffset, PathWaypoint, Point, SnappingBehavior
from src.base import BaseGrid, GridConfigurationError, GridError
from src.grid_systems import GridlessGrid, SquareGrid


@pytest.fixture
def grid():
    """Square grid of 100 px spaces measuring 5 units."""
    return SquareGrid(size=100, distance=5, diagonals=GridDiagonalRule.EQUIDISTANT)


class TestGridConstruction:
    """Test grid settings validation."""

    def test_base_grid_is_abstract(self):
        """Test that BaseGrid cannot be instantiated."""
        with pytest.raises(TypeError):
            BaseGrid(size=100)

    @pytest.mark.parametrize('size,distance,setting', [
        (0, 1, 'size'),
        (-100, 1, 'size'),
        (100, 0, 'distance'),
        (100, -1, 'distance')
    ])
    def test_invalid_settings(self, size, distance, setting):
        """Test that size and distance must be positive."""
        with pytest.raises(GridConfigurationError) as exc_info:
            SquareGrid(size=size, distance=distance)

        assert exc_info.value.setting == setting
        assert "must be positive" in str(exc_info.value)

    def test_missing_size(self):
        """Test that a size is required."""
        with pytest.raises(GridConfigurationError, match="is required"):
            GridlessGrid(size=None)

    def test_configuration_error_hierarchy(self):
        """Test that configuration errors are grid and value errors."""
        error = GridConfigurationError("size", 0)
        assert isinstance(error, GridError)
        assert isinstance(error, ValueError)
        assert str(error) == "The size must be positive, got: 0"

    def test_config_section_merged(self, grid):
        """Test that the configuration section of the grid is merged."""
        assert grid.config['diagonals'] == 0
        grid = SquareGrid(size=100, shiftX=3)
        assert grid.config['shiftX'] == 3

    def test_to_dict(self, grid):
        """Test the scene configuration of a grid."""
        assert grid.to_dict() == {
            'type': 1,
            'size': 100,
            'distance': 5,
            'units': '',
            'style': 'solidLines',
            'thickness': 1,
            'color': '#000000',
            'alpha': 1,
            'diagonals': 0
        }
        assert 'diagonals' not in GridlessGrid(size=100).to_dict()

    def test_snapping_behavior_resolution(self):
        """Test that the resolution must be a positive integer."""
        with pytest.raises(ValueError):
            SnappingBehavior(0x1, 0)
        with pytest.raises(ValueError):
            SnappingBehavior(0x1, 1.5)
        assert SnappingBehavior(0x1).resolution == 1


class TestMeasurePath:
    """Test the path measurement skeleton."""

    def test_empty_path(self, grid):
        """Test that an empty path measures nothing."""
        result = grid.measure_path([])
        assert result.waypoints == []
        assert result.segments == []
        assert result.distance == 0

    def test_single_waypoint(self, grid):
        """Test that one waypoint has no segments."""
        result = grid.measure_path([GridOffset(3, 3)])
        assert len(result.waypoints) == 1
        assert result.segments == []
        assert result.waypoints[0].backward is None
        assert result.waypoints[0].forward is None

    def test_segments_link_waypoints(self, grid):
        """Test that consecutive waypoints share their segment."""
        result = grid.measure_path([GridOffset(0, 0), GridOffset(0, 2), GridOffset(3, 2)])
        assert len(result.waypoints) == 3
        assert len(result.segments) == 2
        for index, segment in enumerate(result.segments):
            assert segment.start is result.waypoints[index]
            assert segment.end is result.waypoints[index + 1]
            assert result.waypoints[index].forward is segment
            assert result.waypoints[index + 1].backward is segment

    def test_running_totals(self, grid):
        """Test that waypoints carry the totals up to themselves."""
        result = grid.measure_path([GridOffset(0, 0), GridOffset(0, 2), GridOffset(3, 2)])
        assert [w.distance for w in result.waypoints] == [0, 10, 25]
        assert [w.spaces for w in result.waypoints] == [0, 2, 5]
        assert result.distance == 25
        assert result.cost == 25
        assert result.spaces == 5

    def test_unmeasured_segment(self, grid):
        """Test that unmeasured segments do not add to the totals."""
        result = grid.measure_path([
            PathWaypoint(GridOffset(0, 0)),
            PathWaypoint(GridOffset(0, 2), measure=False),
            PathWaypoint(GridOffset(3, 2))
        ])
        assert result.segments[0].distance == 0
        assert result.segments[1].distance == 15
        assert result.distance == 15

    def test_constant_cost(self, grid):
        """Test that a constant cost replaces the distance based cost."""
        result = grid.measure_path([GridOffset(0, 0), GridOffset(0, 2), GridOffset(3, 2)], cost=7)
        assert [s.cost for s in result.segments] == [7, 7]
        assert result.cost == 14
        assert result.distance == 25

    def test_waypoint_cost_overrides_default(self, grid):
        """Test that a waypoint's own cost takes precedence."""
        result = grid.measure_path([
            PathWaypoint(GridOffset(0, 0)),
            PathWaypoint(GridOffset(0, 2), cost=1),
            PathWaypoint(GridOffset(3, 2))
        ], cost=7)
        assert [s.cost for s in result.segments] == [1, 7]

    def test_teleport(self, grid):
        """Test that teleporting is measured but neither costs nor moves through spaces."""
        result = grid.measure_path([PathWaypoint(GridOffset(0, 0)), PathWaypoint(GridOffset(0, 2), teleport=True)])
        assert result.distance == 10
        assert result.cost == 0
        assert result.spaces == 0
        assert result.diagonals == 0

    def test_teleport_with_cost_function(self, grid):
        """Test that the cost function is called once for a teleport."""
        calls = []

        def cost(start, end, distance, waypoint):
            calls.append((start, end, distance))
            return 3

        result = grid.measure_path(
            [PathWaypoint(GridOffset(0, 0)), PathWaypoint(GridOffset(0, 2), teleport=True)],
            cost=cost
        )
        assert calls == [(GridOffset(0, 0), GridOffset(0, 2), 10)]
        assert result.cost == 3

    def test_cost_function_skips_zero_moves(self, grid):
        """Test that the cost function is not called when nothing moves."""
        def cost(start, end, distance, waypoint):
            raise AssertionError("cost function must not be called")

        result = grid.measure_path([GridOffset(1, 1), Point(150, 150)], cost=cost)
        assert result.cost == 0
        assert result.spaces == 0

    def test_mixed_coordinates(self, grid):
        """Test that points and offsets can be mixed."""
        result = grid.measure_path([Point(50, 50), GridOffset(0, 3)])
        assert result.spaces == 3
        assert result.distance == 15


class TestCone:
    """Test the cone skeleton."""

    def test_degenerate_cones(self, grid):
        """Test that a zero radius or angle yields no polygon."""
        assert grid.get_cone(Point(0, 0), 0, 0, 90) == []
        assert grid.get_cone(Point(0, 0), 2, 0, 0) == []

    def test_full_cone_is_circle(self, grid):
        """Test that a full angle yields the circle."""
        assert grid.get_cone(Point(0, 0), 10, 45, 360) == grid.get_circle(Point(0, 0), 10)

    def test_cone_starts_at_origin(self, grid):
        """Test that the cone polygon starts at its apex."""
        cone = grid.get_cone(Point(20, 30), 10, 0, 90)
        assert cone[0] == Point(20, 30)
        assert len(cone) >= 3


class TestCellPolygon:
    """Test shapely polygons of grid spaces."""

    def test_square_cell(self, grid):
        polygon = grid.get_cell_polygon(GridOffset(2, 3))
        assert polygon.area == pytest.approx(100 * 100)
        assert polygon.bounds == pytest.approx((300, 200, 400, 300))
