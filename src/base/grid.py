"""Base grid class for battle map grid systems."""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional, Sequence, Union
import math
import logging

from shapely.geometry import Polygon

from src.abstractions.types import (
    Coordinates, GridDimensions, GridLineStyle, GridOffset, GridType, PathMeasurement, PathWaypoint,
    MeasuredSegment, MeasuredWaypoint, Point, Rectangle, SnappingBehavior, CostFunction
)
from src.config import config
from src.utils.geometry import js_round, line_line_intersection, normalize_radians
from .exceptions import GridConfigurationError

logger = logging.getLogger(__name__)


class BaseGrid(ABC):
    """
    Base class for all grid systems.

    Handles:
    - Grid configuration (size, distance, units and line style)
    - Conversion between points and grid offsets
    - Path measurement skeleton
    - Cone generation from circles
    """

    type: GridType

    def __init__(self,
                 size: float,
                 distance: float = 1,
                 units: str = "",
                 style: str = GridLineStyle.SOLID_LINES.value,
                 thickness: int = 1,
                 color: Optional[str] = None,
                 alpha: float = 1,
                 **kwargs):
        """
        Initialize grid system.

        Args:
            size: Size of a grid space in pixels
            distance: Distance of a grid space in game units
            units: Label of the distance units
            style: Line style the grid is drawn with
            thickness: Line thickness in pixels
            color: Line color as hex string
            alpha: Line opacity
            **kwargs: Grid-specific parameters

        Raises:
            GridConfigurationError: If size or distance is not positive
        """
        if size is None:
            raise GridConfigurationError("size", size, "is required")
        if not size > 0:
            raise GridConfigurationError("size", size)
        if not distance > 0:
            raise GridConfigurationError("distance", distance)

        self.size = size
        self.size_x = size
        self.size_y = size
        self.distance = distance
        self.units = units
        self.style = style
        self.thickness = thickness
        self.color = color or "#000000"
        self.alpha = alpha
        self.config = self._merge_config(kwargs)

    def _merge_config(self, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge kwargs with default config."""
        name = self.__class__.__name__
        grid_type = (name[:-len('Grid')] if name.endswith('Grid') else name).lower()
        default_config = config.get(f'grids.{grid_type}', {})
        return {**default_config, **kwargs}

    @property
    def is_gridless(self) -> bool:
        return self.type == GridType.GRIDLESS

    @property
    def is_square(self) -> bool:
        return self.type == GridType.SQUARE

    @property
    def is_hexagonal(self) -> bool:
        return self.type.is_hexagonal

    def to_dict(self) -> Dict[str, Any]:
        """Grid settings in scene configuration form."""
        data = {
            'type': int(self.type),
            'size': self.size,
            'distance': self.distance,
            'units': self.units,
            'style': self.style,
            'thickness': self.thickness,
            'color': self.color,
            'alpha': self.alpha
        }
        diagonals = getattr(self, 'diagonals', None)
        if diagonals is not None:
            data['diagonals'] = int(diagonals)
        return data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={self.size}, distance={self.distance}, units={self.units!r})"

    @abstractmethod
    def calculate_dimensions(self, scene_width: float, scene_height: float, padding: float) -> GridDimensions:
        """
        Calculate the total size of the canvas with padding applied.

        Args:
            scene_width: Width of the scene in pixels
            scene_height: Height of the scene in pixels
            padding: Fraction of the scene size added on each side

        Returns:
            Padded width and height, the scene offset and the row/column count
        """
        pass

    @abstractmethod
    def get_offset(self, coords: Coordinates) -> GridOffset:
        """
        Get the offset of the grid space containing the coordinates.

        Offsets are returned unchanged.
        """
        pass

    @abstractmethod
    def get_offset_range(self, bounds: Rectangle) -> List[int]:
        """
        Get the smallest offset range [i0, j0, i1, j1] covering a rectangle.

        The range is exclusive in i1 and j1; an empty rectangle yields i0 == i1 and j0 == j1.
        """
        pass

    @abstractmethod
    def get_adjacent_offsets(self, coords: Coordinates) -> List[GridOffset]:
        """Get the offsets of the grid spaces adjacent to the coordinates."""
        pass

    @abstractmethod
    def test_adjacency(self, coords1: Coordinates, coords2: Coordinates) -> bool:
        """Test whether two grid spaces are adjacent."""
        pass

    @abstractmethod
    def get_shifted_offset(self, coords: Coordinates, direction: int) -> GridOffset:
        """
        Shift the grid space by one in the given direction.

        Args:
            coords: The coordinates of the grid space
            direction: MovementDirection flags

        Returns:
            The offset of the shifted grid space
        """
        pass

    @abstractmethod
    def get_shifted_point(self, point: Point, direction: int) -> Point:
        """Shift the point by one grid space in the given direction."""
        pass

    @abstractmethod
    def get_top_left_point(self, coords: Coordinates) -> Point:
        """Get the top-left point of the grid space containing the coordinates."""
        pass

    @abstractmethod
    def get_center_point(self, coords: Coordinates) -> Point:
        """Get the center point of the grid space containing the coordinates."""
        pass

    @abstractmethod
    def get_shape(self) -> List[Point]:
        """Get the outline of a grid space relative to its center."""
        pass

    @abstractmethod
    def get_vertices(self, coords: Coordinates) -> List[Point]:
        """Get the vertices of the grid space containing the coordinates."""
        pass

    @abstractmethod
    def get_snapped_point(self, point: Point, behavior: SnappingBehavior) -> Point:
        """
        Snap the point to the nearest target allowed by the snapping behavior.

        Args:
            point: The point to snap
            behavior: Snapping mode and resolution

        Returns:
            The snapped point; its elevation is rounded to a multiple of the grid distance

        Raises:
            InvalidSnappingModeError: If the mode has bits outside the snapping modes
        """
        pass

    def _snap_elevation(self, point: Point, snapped: Point) -> Point:
        """Attach the elevation of the point rounded to the nearest multiple of the grid distance."""
        if point.elevation is None:
            return snapped.with_elevation(None)
        elevation = js_round(point.elevation / self.distance + 1e-8) * self.distance
        return snapped.with_elevation(elevation)

    def measure_path(self,
                     waypoints: Sequence[Union[PathWaypoint, Coordinates]],
                     cost: Optional[Union[float, CostFunction]] = None) -> PathMeasurement:
        """
        Measure a path through the waypoints.

        Args:
            waypoints: Waypoints as coordinates or PathWaypoint with segment options
            cost: Default cost (constant or function) of segments without their own cost

        Returns:
            Per-segment measurements and running totals at each waypoint
        """
        result = PathMeasurement()
        if not waypoints:
            return result

        waypoints = [w if isinstance(w, PathWaypoint) else PathWaypoint(coords=w) for w in waypoints]

        start = MeasuredWaypoint()
        result.waypoints.append(start)
        for _ in waypoints[1:]:
            end = MeasuredWaypoint()
            segment = MeasuredSegment(start=start, end=end)
            start.forward = end.backward = segment
            result.waypoints.append(end)
            result.segments.append(segment)
            start = end

        self._measure_path(waypoints, cost, result)

        for waypoint in result.waypoints[1:]:
            segment = waypoint.backward
            result.distance += segment.distance
            result.cost += segment.cost
            result.spaces += segment.spaces
            result.diagonals += segment.diagonals
            result.euclidean += segment.euclidean

            waypoint.distance = result.distance
            waypoint.cost = result.cost
            waypoint.spaces = result.spaces
            waypoint.diagonals = result.diagonals
            waypoint.euclidean = result.euclidean

        logger.debug(f"Measured path through {len(waypoints)} waypoints: distance={result.distance}")
        return result

    @abstractmethod
    def _measure_path(self,
                      waypoints: List[PathWaypoint],
                      cost: Optional[Union[float, CostFunction]],
                      result: PathMeasurement):
        """
        Write the segment measurements into the result.

        Waypoint totals are filled in by measure_path.
        """
        pass

    @abstractmethod
    def get_direct_path(self, waypoints: Sequence[Coordinates]) -> List[GridOffset]:
        """Get the offsets of a shortest, direct path through the waypoints."""
        pass

    @abstractmethod
    def get_translated_point(self, point: Point, direction: float, distance: float) -> Point:
        """
        Translate the point in a direction by a distance.

        Args:
            point: The point to translate
            direction: Angle of direction in degrees
            distance: Distance in grid units

        Returns:
            The translated point, elevation unchanged
        """
        pass

    @abstractmethod
    def get_circle(self, center: Point, radius: float) -> List[Point]:
        """
        Get the circle polygon for a radius in grid units.

        The points are ordered in positive orientation.
        """
        pass

    def get_cone(self, origin: Point, radius: float, direction: float, angle: float) -> List[Point]:
        """
        Get the cone polygon for a radius in grid units.

        Args:
            origin: Apex of the cone
            radius: Radius in grid units
            direction: Direction in degrees
            angle: Opening angle in degrees

        Returns:
            The points of the cone polygon in positive orientation
        """
        if radius <= 0 or angle <= 0:
            return []
        circle = self.get_circle(origin, radius)
        if angle >= 360:
            return circle

        n = len(circle)
        a_min = normalize_radians(math.radians(direction - angle / 2))
        a_max = a_min + math.radians(angle)
        p_min = Point(origin.x + math.cos(a_min) * self.size, origin.y + math.sin(a_min) * self.size)
        p_max = Point(origin.x + math.cos(a_max) * self.size, origin.y + math.sin(a_max) * self.size)

        angles = []
        for p in circle:
            a = math.atan2(p.y - origin.y, p.x - origin.x)
            angles.append(a if a >= a_min else a + 2 * math.pi)

        points = [Point(origin.x, origin.y)]
        c0 = circle[n - 1]
        a0 = angles[n - 1]
        i = 0
        while i < n:
            c1 = circle[i]
            a1 = angles[i]
            if a0 > a1:
                p = line_line_intersection(c0, c1, origin, p_min)
                points.append(Point(p.x, p.y))
                while a1 < a_max:
                    points.append(c1)
                    i = (i + 1) % n
                    c0 = c1
                    c1 = circle[i]
                    a0 = a1
                    a1 = angles[i]
                    if a0 > a1:
                        break
                p = line_line_intersection(c0, c1, origin, p_max)
                points.append(Point(p.x, p.y))
                break
            c0 = c1
            a0 = a1
            i += 1
        return points

    def get_cell_polygon(self, coords: Coordinates) -> Polygon:
        """Get the grid space containing the coordinates as a shapely polygon."""
        vertices = self.get_vertices(coords)
        if not vertices:
            return Polygon()
        return Polygon([(p.x, p.y) for p in vertices])
