# src/grid_systems/gridless_grid.py
"""Gridless (continuous) grid implementation."""

from typing import List, Optional, Sequence, Union
import math
import logging

import numpy as np

from ..abstractions.types import (
    INVALID_SNAPPING_BITS, Coordinates, CostFunction, GridDimensions, GridOffset, GridType, MovementDirection,
    PathMeasurement, PathWaypoint, Point, Rectangle, SnappingBehavior
)
from ..base import BaseGrid, InvalidSnappingModeError
from ..core.registry import component_registry

logger = logging.getLogger(__name__)


def _direction_deltas(direction: int):
    """Row, column and layer deltas of a movement direction."""
    di = dj = dk = 0
    if direction & MovementDirection.UP:
        di -= 1
    if direction & MovementDirection.DOWN:
        di += 1
    if direction & MovementDirection.LEFT:
        dj -= 1
    if direction & MovementDirection.RIGHT:
        dj += 1
    if direction & MovementDirection.DESCEND:
        dk -= 1
    if direction & MovementDirection.ASCEND:
        dk += 1
    return di, dj, dk


@component_registry.grids.register_decorator(
    grid_types={GridType.GRIDLESS},
    supports_snapping=False,
    description="Continuous grid without discrete spaces"
)
class GridlessGrid(BaseGrid):
    """
    Grid without discrete spaces.

    Offsets are the floored pixel coordinates and distances are Euclidean.
    """

    type = GridType.GRIDLESS

    def calculate_dimensions(self, scene_width: float, scene_height: float, padding: float) -> GridDimensions:
        # `* (1 / size)` is not the same as `/ size` in floating point and existing scenes rely on it
        x = math.ceil((padding * scene_width) * (1 / self.size)) * self.size
        y = math.ceil((padding * scene_height) * (1 / self.size)) * self.size
        width = scene_width + 2 * x
        height = scene_height + 2 * y
        return GridDimensions(width=width, height=height, x=x, y=y,
                              rows=math.ceil(height), columns=math.ceil(width))

    def get_offset(self, coords: Coordinates) -> GridOffset:
        if isinstance(coords, GridOffset):
            return coords
        i = math.floor(coords.y)
        j = math.floor(coords.x)
        if coords.elevation is None:
            return GridOffset(i, j)
        k = math.floor(coords.elevation / self.distance * self.size + 1e-8)
        return GridOffset(i, j, k)

    def get_offset_range(self, bounds: Rectangle) -> List[int]:
        i0 = math.floor(bounds.y)
        j0 = math.floor(bounds.x)
        if not (bounds.width > 0 and bounds.height > 0):
            return [i0, j0, i0, j0]
        return [i0, j0, math.ceil(bounds.y + bounds.height), math.ceil(bounds.x + bounds.width)]

    def get_adjacent_offsets(self, coords: Coordinates) -> List[GridOffset]:
        return []

    def test_adjacency(self, coords1: Coordinates, coords2: Coordinates) -> bool:
        return False

    def get_shifted_offset(self, coords: Coordinates, direction: int) -> GridOffset:
        if isinstance(coords, GridOffset):
            coords = self._offset_to_point(coords)
        return self.get_offset(self.get_shifted_point(coords, direction))

    def get_shifted_point(self, point: Point, direction: int) -> Point:
        di, dj, dk = _direction_deltas(direction)
        x = point.x + dj * self.size
        y = point.y + di * self.size
        if point.elevation is None:
            return Point(x, y)
        return Point(x, y, point.elevation + dk * self.distance)

    def _offset_to_point(self, offset: GridOffset) -> Point:
        if offset.k is None:
            return Point(offset.j, offset.i)
        return Point(offset.j, offset.i, offset.k / self.size * self.distance)

    def get_top_left_point(self, coords: Coordinates) -> Point:
        if isinstance(coords, GridOffset):
            return self._offset_to_point(coords)
        return Point(coords.x, coords.y, coords.elevation)

    def get_center_point(self, coords: Coordinates) -> Point:
        if isinstance(coords, GridOffset):
            return self._offset_to_point(coords)
        return Point(coords.x, coords.y, coords.elevation)

    def get_shape(self) -> List[Point]:
        return []

    def get_vertices(self, coords: Coordinates) -> List[Point]:
        return []

    def get_snapped_point(self, point: Point, behavior: SnappingBehavior) -> Point:
        if int(behavior.mode) & INVALID_SNAPPING_BITS:
            raise InvalidSnappingModeError(int(behavior.mode))
        return self._snap_elevation(point, Point(point.x, point.y))

    def _measure_path(self,
                      waypoints: List[PathWaypoint],
                      cost: Optional[Union[float, CostFunction]],
                      result: PathMeasurement):
        w0 = waypoints[0]
        o0 = self.get_offset(w0.coords)
        p0 = self.get_center_point(w0.coords)

        is_3d = o0.k is not None
        for index in range(1, len(waypoints)):
            w1 = waypoints[index]
            o1 = self.get_offset(w1.coords)
            p1 = self.get_center_point(w1.coords)
            cost1 = w1.cost if w1.cost is not None else cost

            if w1.measure:
                segment = result.waypoints[index].backward
                dz = (p0.elevation - p1.elevation) / self.distance * self.size if is_3d else 0
                segment.distance = math.hypot(p0.x - p1.x, p0.y - p1.y, dz) / self.size * self.distance
                segment.euclidean = segment.distance
                offset_distance = math.hypot(
                    o0.i - o1.i, o0.j - o1.j, o0.k - o1.k if is_3d else 0
                ) / self.size * self.distance
                if cost1 is None or offset_distance == 0:
                    segment.cost = 0 if w1.teleport else offset_distance
                elif callable(cost1):
                    segment.cost = cost1(o0, o1, offset_distance, w1)
                else:
                    segment.cost = float(cost1)

            o0 = o1
            p0 = p1

    def get_direct_path(self, waypoints: Sequence[Coordinates]) -> List[GridOffset]:
        if not waypoints:
            return []
        o0 = self.get_offset(waypoints[0])
        path = [o0]
        for waypoint in waypoints[1:]:
            o1 = self.get_offset(waypoint)
            if o1 == o0:
                continue
            path.append(o1)
            o0 = o1
        return path

    def get_translated_point(self, point: Point, direction: float, distance: float) -> Point:
        direction = math.radians(direction)
        s = distance / self.distance * self.size
        return Point(point.x + math.cos(direction) * s, point.y + math.sin(direction) * s, point.elevation)

    def _vertex_count(self, r: float) -> float:
        """Polygon vertex count keeping the deviation from the true circle below 0.25 pixels."""
        return math.pi / math.acos(max(r - 0.25, 0) / r)

    def get_circle(self, center: Point, radius: float) -> List[Point]:
        if radius <= 0:
            return []
        r = radius / self.distance * self.size
        n = max(math.ceil(self._vertex_count(r)), 4)
        angles = 2 * np.pi * (np.arange(n) / n)
        xs = center.x + np.cos(angles) * r
        ys = center.y + np.sin(angles) * r
        return [Point(float(x), float(y)) for x, y in zip(xs, ys)]

    def get_cone(self, origin: Point, radius: float, direction: float, angle: float) -> List[Point]:
        if radius <= 0 or angle <= 0:
            return []
        if angle >= 360:
            return self.get_circle(origin, radius)
        r = radius / self.distance * self.size
        n = max(math.ceil(self._vertex_count(r) * (angle / 360)), 4)
        a0 = math.radians(direction - angle / 2)
        a1 = math.radians(direction + angle / 2)
        angles = np.linspace(a0, a1, n + 1)
        xs = origin.x + np.cos(angles) * r
        ys = origin.y + np.sin(angles) * r
        return [Point(origin.x, origin.y)] + [Point(float(x), float(y)) for x, y in zip(xs, ys)]
