# src/grid_systems/square_grid.py
"""Square grid implementation."""

from typing import List, Optional, Sequence, Union
import math
import logging

from ..abstractions.types import (
    INVALID_SNAPPING_BITS, Coordinates, CostFunction, GridDiagonalRule, GridDimensions, GridOffset,
    GridType, PathMeasurement, PathWaypoint, Point, Rectangle, SnappingBehavior
)
from ..base import BaseGrid, GridConfigurationError, InvalidSnappingModeError
from ..core.registry import component_registry
from ..utils.geometry import almost_equal, js_round
from .gridless_grid import _direction_deltas

logger = logging.getLogger(__name__)

SQRT2 = math.sqrt(2)
SQRT3 = math.sqrt(3)


def resolve_diagonal_rule(value) -> GridDiagonalRule:
    """Convert a configured diagonal rule to the enum."""
    try:
        return GridDiagonalRule(value)
    except ValueError:
        raise GridConfigurationError("diagonal rule", value, "must be a GridDiagonalRule")


def keep_nearest(point: Point, candidates: List[Point]) -> Point:
    """The first candidate with the smallest squared distance to the point."""
    nearest = None
    distance = None
    for candidate in candidates:
        d = (candidate.x - point.x) ** 2 + (candidate.y - point.y) ** 2
        if nearest is None or d < distance:
            nearest = candidate
            distance = d
    return nearest


@component_registry.grids.register_decorator(
    grid_types={GridType.SQUARE},
    description="Square grid with configurable diagonal rule"
)
class SquareGrid(BaseGrid):
    """
    Square grid system.

    The diagonal rule decides the cost of diagonal moves, the adjacency
    of grid spaces and the shape of circles.
    """

    type = GridType.SQUARE

    def __init__(self,
                 size: float,
                 distance: float = 1,
                 diagonals: Optional[Union[int, GridDiagonalRule]] = None,
                 **kwargs):
        """
        Initialize square grid.

        Args:
            size: Size of a grid space in pixels
            distance: Distance of a grid space in game units
            diagonals: Diagonal rule (defaults to the configured rule)
            **kwargs: Additional parameters
        """
        super().__init__(size=size, distance=distance, **kwargs)
        if diagonals is None:
            diagonals = self.config.get('diagonals', GridDiagonalRule.EQUIDISTANT)
        self.diagonals = resolve_diagonal_rule(diagonals)

    def get_offset(self, coords: Coordinates) -> GridOffset:
        if isinstance(coords, GridOffset):
            return coords
        j = math.floor(coords.x / self.size)
        i = math.floor(coords.y / self.size)
        if coords.elevation is None:
            return GridOffset(i, j)
        return GridOffset(i, j, math.floor(coords.elevation / self.distance + 1e-8))

    def get_offset_range(self, bounds: Rectangle) -> List[int]:
        i0 = math.floor(bounds.y / self.size)
        j0 = math.floor(bounds.x / self.size)
        if not (bounds.width > 0 and bounds.height > 0):
            return [i0, j0, i0, j0]
        return [i0, j0,
                math.ceil((bounds.y + bounds.height) / self.size),
                math.ceil((bounds.x + bounds.width) / self.size)]

    def get_adjacent_offsets(self, coords: Coordinates) -> List[GridOffset]:
        o = self.get_offset(coords)
        i, j, k = o.i, o.j, o.k
        illegal = self.diagonals == GridDiagonalRule.ILLEGAL

        if k is None:
            if illegal:
                return [GridOffset(i - 1, j), GridOffset(i, j - 1), GridOffset(i, j + 1), GridOffset(i + 1, j)]
            return [GridOffset(i + di, j + dj)
                    for di in (-1, 0, 1) for dj in (-1, 0, 1) if di or dj]

        if illegal:
            return [
                GridOffset(i - 1, j, k),
                GridOffset(i, j - 1, k),
                GridOffset(i, j, k - 1),
                GridOffset(i, j, k + 1),
                GridOffset(i, j + 1, k),
                GridOffset(i + 1, j, k)
            ]
        return [GridOffset(i + di, j + dj, k + dk)
                for di in (-1, 0, 1) for dj in (-1, 0, 1) for dk in (-1, 0, 1) if di or dj or dk]

    def test_adjacency(self, coords1: Coordinates, coords2: Coordinates) -> bool:
        o1 = self.get_offset(coords1)
        o2 = self.get_offset(coords2)
        di = abs(o1.i - o2.i)
        dj = abs(o1.j - o2.j)
        dk = abs(o1.k - o2.k) if o1.k is not None else 0
        if self.diagonals != GridDiagonalRule.ILLEGAL:
            return max(di, dj, dk) == 1
        return di + dj + dk == 1

    def get_shifted_offset(self, coords: Coordinates, direction: int) -> GridOffset:
        di, dj, dk = _direction_deltas(direction)
        if abs(di) + abs(dj) + abs(dk) > 1 and self.diagonals == GridDiagonalRule.ILLEGAL:
            # Diagonal movement is not allowed
            di = dj = dk = 0
        o = self.get_offset(coords)
        return GridOffset(o.i + di, o.j + dj, o.k + dk if o.k is not None else None)

    def get_shifted_point(self, point: Point, direction: int) -> Point:
        top_left = self.get_top_left_point(point)
        shifted = self.get_top_left_point(self.get_shifted_offset(top_left, direction))
        x = point.x + (shifted.x - top_left.x)
        y = point.y + (shifted.y - top_left.y)
        if shifted.elevation is None:
            return Point(x, y)
        return Point(x, y, point.elevation + (shifted.elevation - top_left.elevation))

    def get_top_left_point(self, coords: Coordinates) -> Point:
        o = self.get_offset(coords)
        x = o.j * self.size
        y = o.i * self.size
        if o.k is None:
            return Point(x, y)
        return Point(x, y, o.k * self.distance)

    def get_center_point(self, coords: Coordinates) -> Point:
        o = self.get_offset(coords)
        x = (o.j + 0.5) * self.size
        y = (o.i + 0.5) * self.size
        if o.k is None:
            return Point(x, y)
        return Point(x, y, (o.k + 0.5) * self.distance)

    def get_shape(self) -> List[Point]:
        s = self.size / 2
        return [Point(-s, -s), Point(s, -s), Point(s, s), Point(-s, s)]

    def get_vertices(self, coords: Coordinates) -> List[Point]:
        o = self.get_offset(coords)
        x0 = o.j * self.size
        x1 = (o.j + 1) * self.size
        y0 = o.i * self.size
        y1 = (o.i + 1) * self.size
        return [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)]

    def get_snapped_point(self, point: Point, behavior: SnappingBehavior) -> Point:
        mode = int(behavior.mode)
        resolution = behavior.resolution
        if mode & INVALID_SNAPPING_BITS:
            raise InvalidSnappingModeError(mode)
        if mode == 0:
            return self._snap_elevation(point, point)

        candidates = []

        # Any edge = Any side
        if not mode & 0x2:
            # Horizontal (Top/Bottom) side + Vertical (Left/Right) side = Any edge
            if (mode & 0x3000) and (mode & 0xC000):
                mode |= 0x2
            elif mode & 0x3000:
                candidates.append(self._snap_to_top_or_bottom(point, resolution))
            elif mode & 0xC000:
                candidates.append(self._snap_to_left_or_right(point, resolution))

        # Vertices coincide with corners
        if mode & 0xFF0:
            snap = {
                0x0: self._snap_to_vertex,
                0x1: self._snap_to_vertex_or_center,
                0x2: self._snap_to_edge_or_vertex,
                0x3: self._snap_to_edge_or_vertex_or_center
            }[mode & 0x3]
            candidates.append(snap(point, resolution))
        elif mode & 0x3:
            snap = {
                0x1: self._snap_to_center,
                0x2: self._snap_to_edge,
                0x3: self._snap_to_edge_or_center
            }[mode & 0x3]
            candidates.append(snap(point, resolution))

        return self._snap_elevation(point, keep_nearest(point, candidates))

    def _snap_to_center(self, point: Point, resolution: int) -> Point:
        s = self.size / resolution
        t = self.size / 2
        return Point(js_round((point.x - t) / s) * s + t, js_round((point.y - t) / s) * s + t)

    def _snap_to_vertex(self, point: Point, resolution: int) -> Point:
        s = self.size / resolution
        t = self.size / 2
        return Point((math.floor((point.x - t) / s) + 0.5) * s + t,
                     (math.floor((point.y - t) / s) + 0.5) * s + t)

    def _snap_to_vertex_or_center(self, point: Point, resolution: int) -> Point:
        s = self.size / resolution
        t = self.size / 2
        c0 = (point.x - t) / s
        r0 = (point.y - t) / s
        c1 = js_round(c0 + r0)
        r1 = js_round(r0 - c0)
        return Point((c1 - r1) * s / 2 + t, (c1 + r1) * s / 2 + t)

    def _snap_to_edge(self, point: Point, resolution: int) -> Point:
        s = self.size / resolution
        t = self.size / 2
        c0 = (point.x - t) / s
        r0 = (point.y - t) / s
        c1 = math.floor(c0 + r0)
        r1 = math.floor(r0 - c0)
        return Point((c1 - r1) * s / 2 + t, (c1 + r1 + 1) * s / 2 + t)

    def _snap_to_edge_or_center(self, point: Point, resolution: int) -> Point:
        s = self.size / resolution
        t = self.size / 2
        x0 = js_round((point.x - t) / s) * s + t
        y0 = js_round((point.y - t) / s) * s + t
        if max(abs(point.x - x0), abs(point.y - y0)) <= s / 4:
            return Point(x0, y0)
        return self._snap_to_edge(point, resolution)

    def _snap_to_edge_or_vertex(self, point: Point, resolution: int) -> Point:
        s = self.size / resolution
        t = self.size / 2
        x0 = (math.floor((point.x - t) / s) + 0.5) * s + t
        y0 = (math.floor((point.y - t) / s) + 0.5) * s + t
        if max(abs(point.x - x0), abs(point.y - y0)) <= s / 4:
            return Point(x0, y0)
        return self._snap_to_edge(point, resolution)

    def _snap_to_edge_or_vertex_or_center(self, point: Point, resolution: int) -> Point:
        s = self.size / (resolution * 2)
        return Point(js_round(point.x / s) * s, js_round(point.y / s) * s)

    def _snap_to_top_or_bottom(self, point: Point, resolution: int) -> Point:
        s = self.size / resolution
        t = self.size / 2
        return Point(js_round((point.x - t) / s) * s + t,
                     (math.floor((point.y - t) / s) + 0.5) * s + t)

    def _snap_to_left_or_right(self, point: Point, resolution: int) -> Point:
        s = self.size / resolution
        t = self.size / 2
        return Point((math.floor((point.x - t) / s) + 0.5) * s + t,
                     js_round((point.y - t) / s) * s + t)

    def _to_point(self, coords: Coordinates) -> Point:
        if isinstance(coords, Point):
            return coords
        return self.get_center_point(coords)

    def _measure_path(self,
                      waypoints: List[PathWaypoint],
                      cost: Optional[Union[float, CostFunction]],
                      result: PathMeasurement):
        w0 = waypoints[0]
        o0 = self.get_offset(w0.coords)
        p0 = self._to_point(w0.coords)

        is_3d = o0.k is not None
        diagonals = self.diagonals
        alternating = diagonals in (GridDiagonalRule.ALTERNATING_1, GridDiagonalRule.ALTERNATING_2)

        # Running diagonal counters of the alternating rules, threaded through all segments
        l0 = 1.0 if diagonals == GridDiagonalRule.ALTERNATING_2 else 0.0
        dx0 = dy0 = dz0 = l0
        nd = l0 * 1.5

        for index in range(1, len(waypoints)):
            w1 = waypoints[index]
            o1 = self.get_offset(w1.coords)
            p1 = self._to_point(w1.coords)
            cost1 = w1.cost if w1.cost is not None else cost

            if w1.measure:
                # Number of moves, number of diagonal moves and cost of the moves
                di, dj, dk = sorted(
                    (abs(o0.i - o1.i), abs(o0.j - o1.j), abs(o0.k - o1.k) if is_3d else 0),
                    reverse=True
                )
                n = di
                d = dj
                nd0 = nd
                if diagonals == GridDiagonalRule.EQUIDISTANT:
                    c = di
                elif diagonals == GridDiagonalRule.EXACT:
                    c = di + ((SQRT2 - 1) * (dj - dk) + (SQRT3 - 1) * dk)
                elif diagonals == GridDiagonalRule.APPROXIMATE:
                    c = di + (0.5 * (dj - dk) + 0.75 * dk)
                elif diagonals == GridDiagonalRule.RECTILINEAR:
                    c = di + (dj + dk)
                elif alternating:
                    nd += dj + 0.5 * dk
                    c = di + (math.floor(nd / 2) - math.floor(nd0 / 2))
                else:
                    n = di + (dj + dk)
                    d = 0
                    c = n

                # Distance of the segment
                dx, dy, dz = sorted(
                    (abs(p0.x - p1.x) / self.size,
                     abs(p0.y - p1.y) / self.size,
                     abs(p0.elevation - p1.elevation) / self.distance if is_3d else 0),
                    reverse=True
                )
                if diagonals == GridDiagonalRule.EQUIDISTANT:
                    length = dx
                elif diagonals == GridDiagonalRule.EXACT:
                    length = dx + ((SQRT2 - 1) * (dy - dz) + (SQRT3 - 1) * dz)
                elif diagonals == GridDiagonalRule.APPROXIMATE:
                    length = dx + (0.5 * (dy - dz) + 0.75 * dz)
                elif alternating:
                    dx0 += dx
                    dy0 += dy
                    dz0 += dz
                    fx = math.floor(dx0)
                    fy = math.floor(dy0)
                    fz = math.floor(dz0)
                    a = fx + 0.5 * fy + 0.25 * fz
                    a0 = math.floor(a)
                    a1 = math.floor(a + 1)
                    a2 = math.floor(a + 1.5)
                    a3 = math.floor(a + 1.75)
                    mx = dx0 - fx
                    my = dy0 - fy
                    mz = dz0 - fz
                    l1 = a0 * (1 - mx) + a1 * (mx - my) + a2 * (my - mz) + a3 * mz
                    length = l1 - l0
                    l0 = l1
                else:
                    length = dx + (dy + dz)
                if almost_equal(length, c):
                    length = c

                segment = result.waypoints[index].backward
                segment.distance = length * self.distance
                if cost1 is None or c == 0:
                    segment.cost = 0 if w1.teleport else c * self.distance
                elif callable(cost1):
                    if w1.teleport:
                        segment.cost = cost1(o0, o1, c * self.distance, w1)
                    else:
                        segment.cost = self._calculate_cost(o0, o1, cost1, nd0, w1)
                else:
                    segment.cost = float(cost1)
                segment.spaces = 0 if w1.teleport else n
                segment.diagonals = 0 if w1.teleport else d
                dz_pixels = (p0.elevation - p1.elevation) / self.distance * self.size if is_3d else 0
                segment.euclidean = math.hypot(p0.x - p1.x, p0.y - p1.y, dz_pixels) / self.size * self.distance

            o0 = o1
            p0 = p1

    def _calculate_cost(self,
                        start: GridOffset,
                        end: GridOffset,
                        cost: CostFunction,
                        diagonals: float,
                        waypoint: PathWaypoint) -> float:
        """Sum the cost function over the single steps of the direct path."""
        path = self.get_direct_path([start, end])
        if len(path) <= 1:
            return 0

        alternating = self.diagonals in (GridDiagonalRule.ALTERNATING_1, GridDiagonalRule.ALTERNATING_2)
        o0 = path[0]
        c = 0
        for o1 in path[1:]:
            # Number of unchanged components (the missing k counts as unchanged in 2D)
            m = (o0.i == o1.i) + (o0.j == o1.j) + (o0.k == o1.k)
            if m == 2:
                k = 1
            elif m == 1:
                if alternating:
                    k = 1 + (math.floor((diagonals + 1) / 2) - math.floor(diagonals / 2))
                else:
                    k = {
                        GridDiagonalRule.EQUIDISTANT: 1,
                        GridDiagonalRule.EXACT: SQRT2,
                        GridDiagonalRule.APPROXIMATE: 1.5,
                        GridDiagonalRule.RECTILINEAR: 2
                    }[self.diagonals]
                diagonals += 1
            else:
                if alternating:
                    k = 1 + (math.floor((diagonals + 1.5) / 2) - math.floor(diagonals / 2))
                else:
                    k = {
                        GridDiagonalRule.EQUIDISTANT: 1,
                        GridDiagonalRule.EXACT: SQRT3,
                        GridDiagonalRule.APPROXIMATE: 1.75,
                        GridDiagonalRule.RECTILINEAR: 3
                    }[self.diagonals]
                diagonals += 1.5

            c += cost(o0, o1, k * self.distance, waypoint)
            o0 = o1
        return c

    def get_direct_path(self, waypoints: Sequence[Coordinates]) -> List[GridOffset]:
        if not waypoints:
            return []
        if waypoints[0].is_elevated:
            return self._get_direct_path_3d(waypoints)
        return self._get_direct_path_2d(waypoints)

    def _get_direct_path_2d(self, waypoints: Sequence[Coordinates]) -> List[GridOffset]:
        o0 = self.get_offset(waypoints[0])
        i0, j0 = o0.i, o0.j
        path = [o0]

        diagonals = self.diagonals != GridDiagonalRule.ILLEGAL
        for waypoint in waypoints[1:]:
            o1 = self.get_offset(waypoint)
            i1, j1 = o1.i, o1.j
            if i0 == i1 and j0 == j1:
                continue

            # Walk from (i0, j0) to (i1, j1)
            di = abs(i0 - i1)
            dj = -abs(j0 - j1)
            si = 1 if i0 < i1 else -1
            sj = 1 if j0 < j1 else -1
            e = di + dj
            if diagonals:
                while True:
                    e2 = e * 2
                    if e2 >= dj:
                        e += dj
                        i0 += si
                    if e2 <= di:
                        e += di
                        j0 += sj
                    if i0 == i1 and j0 == j1:
                        break
                    path.append(GridOffset(i0, j0))
            else:
                di2 = 2 * di
                dj2 = 2 * dj
                while True:
                    if e > 0:
                        e += dj2
                        i0 += si
                    else:
                        e += di2
                        j0 += sj
                    if i0 == i1 and j0 == j1:
                        break
                    path.append(GridOffset(i0, j0))
            path.append(o1)

            i0, j0 = i1, j1
        return path

    def _get_direct_path_3d(self, waypoints: Sequence[Coordinates]) -> List[GridOffset]:
        o0 = self.get_offset(waypoints[0])
        i0, j0, k0 = o0.i, o0.j, o0.k
        path = [o0]

        diagonals = self.diagonals != GridDiagonalRule.ILLEGAL
        for waypoint in waypoints[1:]:
            o1 = self.get_offset(waypoint)
            i1, j1, k1 = o1.i, o1.j, o1.k
            if i0 == i1 and j0 == j1 and k0 == k1:
                continue

            # Walk from (i0, j0, k0) to (i1, j1, k1)
            di = abs(i0 - i1)
            dj = abs(j0 - j1)
            dk = abs(k0 - k1)
            si = 1 if i0 < i1 else -1
            sj = 1 if j0 < j1 else -1
            sk = 1 if k0 < k1 else -1
            if diagonals:
                di2 = 2 * di
                dj2 = 2 * dj
                dk2 = 2 * dk
                if di >= dj and di >= dk:
                    ej = ek = -di
                    while True:
                        ej += dj2
                        ek += dk2
                        i0 += si
                        if ej >= 0:
                            ej -= di2
                            j0 += sj
                        if ek >= 0:
                            ek -= di2
                            k0 += sk
                        if i0 == i1:
                            break
                        path.append(GridOffset(i0, j0, k0))
                elif dj >= di and dj >= dk:
                    ei = ek = -dj
                    while True:
                        ei += di2
                        ek += dk2
                        j0 += sj
                        if ei >= 0:
                            ei -= dj2
                            i0 += si
                        if ek >= 0:
                            ek -= dj2
                            k0 += sk
                        if j0 == j1:
                            break
                        path.append(GridOffset(i0, j0, k0))
                else:
                    ei = ej = -dk
                    while True:
                        ei += di2
                        ej += dj2
                        k0 += sk
                        if ei >= 0:
                            ei -= dk2
                            i0 += si
                        if ej >= 0:
                            ej -= dk2
                            j0 += sj
                        if k0 == k1:
                            break
                        path.append(GridOffset(i0, j0, k0))
            else:
                # One axis per step, picking the axis with the least elapsed progress
                di1 = di or 1
                dj1 = dj or 1
                dk1 = dk or 1
                tdi = dj1 * dk1
                tdj = di1 * dk1
                tdk = di1 * dj1
                tm = di1 * dj1 * dk1 + 1
                ti = tdi if di > 0 else tm
                tj = tdj if dj > 0 else tm
                tk = tdk if dk > 0 else tm
                while True:
                    if ti < tj:
                        if ti <= tk:
                            ti += tdi
                            i0 += si
                        else:
                            tk += tdk
                            k0 += sk
                    else:
                        if tj <= tk:
                            tj += tdj
                            j0 += sj
                        else:
                            tk += tdk
                            k0 += sk
                    if i0 == i1 and j0 == j1 and k0 == k1:
                        break
                    path.append(GridOffset(i0, j0, k0))
            path.append(o1)

            i0, j0, k0 = i1, j1, k1
        return path

    def get_translated_point(self, point: Point, direction: float, distance: float) -> Point:
        direction = math.radians(direction)
        dx = math.cos(direction)
        dy = math.sin(direction)
        adx = abs(dx)
        ady = abs(dy)
        s = distance / self.distance
        diagonals = self.diagonals
        if diagonals == GridDiagonalRule.EQUIDISTANT:
            s /= max(adx, ady)
        elif diagonals == GridDiagonalRule.EXACT:
            s /= max(adx, ady) + (SQRT2 - 1) * min(adx, ady)
        elif diagonals == GridDiagonalRule.APPROXIMATE:
            s /= max(adx, ady) + 0.5 * min(adx, ady)
        elif diagonals == GridDiagonalRule.ALTERNATING_1:
            a = max(adx, ady)
            b = min(adx, ady)
            t = 2 * a + b
            k = math.floor(s * b / t)
            if s * b - k * t > a:
                a += b
                k = -1 - k
            s = (s - k) / a
        elif diagonals == GridDiagonalRule.ALTERNATING_2:
            a = max(adx, ady)
            b = min(adx, ady)
            t = 2 * a + b
            k = math.floor(s * b / t)
            if s * b - k * t > a + b:
                k += 1
            else:
                a += b
                k = -k
            s = (s - k) / a
        else:
            s /= adx + ady
        s *= self.size
        return Point(point.x + dx * s, point.y + dy * s, point.elevation)

    def get_circle(self, center: Point, radius: float) -> List[Point]:
        if radius <= 0:
            return []
        diagonals = self.diagonals
        if diagonals == GridDiagonalRule.EQUIDISTANT:
            return self._get_circle_equidistant(center, radius)
        if diagonals == GridDiagonalRule.EXACT:
            return self._get_circle_octagon(center, radius, SQRT2)
        if diagonals == GridDiagonalRule.APPROXIMATE:
            return self._get_circle_octagon(center, radius, 1.5)
        if diagonals == GridDiagonalRule.ALTERNATING_1:
            return self._get_circle_alternating(center, radius, False)
        if diagonals == GridDiagonalRule.ALTERNATING_2:
            return self._get_circle_alternating(center, radius, True)
        return self._get_circle_rectilinear(center, radius)

    def _get_circle_equidistant(self, center: Point, radius: float) -> List[Point]:
        r = radius / self.distance * self.size
        x0 = center.x + r
        x1 = center.x - r
        y0 = center.y + r
        y1 = center.y - r
        return [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)]

    def _get_circle_octagon(self, center: Point, radius: float, diagonal: float) -> List[Point]:
        r = radius / self.distance * self.size
        s = r / diagonal
        x, y = center.x, center.y
        return [
            Point(x + r, y),
            Point(x + s, y + s),
            Point(x, y + r),
            Point(x - s, y + s),
            Point(x - r, y),
            Point(x - s, y - s),
            Point(x, y - r),
            Point(x + s, y - s)
        ]

    def _get_circle_alternating(self, center: Point, radius: float, first_double: bool) -> List[Point]:
        r = radius / self.distance
        points = []
        dx = 0
        dy = 0

        # First quarter
        if first_double:
            points.append((r - dx, dy))
            dx += 1
            dy += 1
        while True:
            if r - dx <= dy:
                dx, dy = dy - 1, dx - 1
                break
            points.append((r - dx, dy))
            dy += 1
            if r - dx <= dy:
                points.append((r - dx, r - dx))
                if dx != 0:
                    points.append((dy - 1, r - dx))
                    dx, dy = dy - 2, dx - 1
                break
            points.append((r - dx, dy))
            dx += 1
            dy += 1
        while True:
            if dx == 0:
                break
            points.append((dx, r - dy))
            dx -= 1
            if dx == 0:
                break
            points.append((dx, r - dy))
            dx -= 1
            dy -= 1

        # The other three quarters mirror the first
        quarter = list(points)
        points.extend((-y, x) for x, y in quarter)
        points.extend((-x, -y) for x, y in quarter)
        points.extend((y, -x) for x, y in quarter)

        return [Point(x * self.size + center.x, y * self.size + center.y) for x, y in points]

    def _get_circle_rectilinear(self, center: Point, radius: float) -> List[Point]:
        r = radius / self.distance * self.size
        x, y = center.x, center.y
        return [Point(x + r, y), Point(x, y + r), Point(x - r, y), Point(x, y - r)]

    def calculate_dimensions(self, scene_width: float, scene_height: float, padding: float) -> GridDimensions:
        # `* (1 / size)` is not the same as `/ size` in floating point and existing scenes rely on it
        x = math.ceil((padding * scene_width) * (1 / self.size)) * self.size
        y = math.ceil((padding * scene_height) * (1 / self.size)) * self.size
        width = scene_width + 2 * x
        height = scene_height + 2 * y
        rows = math.ceil(height / self.size - 1e-6)
        columns = math.ceil(width / self.size - 1e-6)
        return GridDimensions(width=width, height=height, x=x, y=y, rows=rows, columns=columns)
