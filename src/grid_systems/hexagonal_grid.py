# src/grid_systems/hexagonal_grid.py
"""Hexagonal grid system implementation using cube coordinates."""

from functools import lru_cache
from typing import List, Optional, Sequence, Union
import math
import logging

from ..abstractions.types import (
    INVALID_SNAPPING_BITS, Coordinates, CostFunction, GridDiagonalRule, GridDimensions, GridOffset, GridType,
    HexCube, MovementDirection, PathMeasurement, PathWaypoint, Point, Rectangle, SnappingBehavior, SnappingMode,
    TokenShape
)
from ..base import BaseGrid, InvalidCoordinatesError, InvalidSnappingModeError
from ..core.registry import component_registry
from ..utils.geometry import almost_equal, js_round, mix
from .hex_shapes import get_hexagonal_offsets, get_hexagonal_shape
from .square_grid import keep_nearest, resolve_diagonal_rule

logger = logging.getLogger(__name__)

SQRT2 = math.sqrt(2)
SQRT3 = math.sqrt(3)
SQRT1_3 = math.sqrt(1 / 3)

# Nudge of the cube interpolation for segments collinear with hexagon edges
EDGE_EPSILON = 1e-6


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


@lru_cache(maxsize=None)
def _subdivision_grid(columns: bool, size: float) -> 'HexagonalGrid':
    """Odd hexagonal grid used to probe the centers of a subdivided grid."""
    return HexagonalGrid(size=size, columns=columns, even=False)


@component_registry.grids.register_decorator(
    grid_types={GridType.HEXODDR, GridType.HEXEVENR, GridType.HEXODDQ, GridType.HEXEVENQ},
    description="Hexagonal grid in row (pointy-top) or column (flat-top) orientation"
)
class HexagonalGrid(BaseGrid):
    """
    Hexagonal grid system.

    Grid spaces are addressed by offsets (i, j) and by cube coordinates
    (q, r, s) with q + r + s == 0. The grid size is the distance between
    the centers of two adjacent hexagons.
    """

    # Normalized step length of a diagonal (vertical) move by diagonal rule
    DIAGONAL_STEP = {
        GridDiagonalRule.EQUIDISTANT: 1,
        GridDiagonalRule.EXACT: SQRT2,
        GridDiagonalRule.APPROXIMATE: 1.5,
        GridDiagonalRule.RECTILINEAR: 2
    }

    def __init__(self,
                 size: float,
                 distance: float = 1,
                 columns: bool = False,
                 even: bool = False,
                 diagonals: Optional[Union[int, GridDiagonalRule]] = None,
                 **kwargs):
        """
        Initialize hexagonal grid.

        Args:
            size: Distance between the centers of adjacent hexagons in pixels
            distance: Distance of a grid space in game units
            columns: Column-based (flat-top) instead of row-based (pointy-top) grid
            even: Even instead of odd grid
            diagonals: Diagonal rule for vertical moves (defaults to the configured rule)
            **kwargs: Additional parameters
        """
        super().__init__(size=size, distance=distance, **kwargs)
        self.columns = bool(columns)
        self.even = bool(even)
        if self.columns:
            self.type = GridType.HEXEVENQ if self.even else GridType.HEXODDQ
            self.size_x *= 2 * SQRT1_3
        else:
            self.type = GridType.HEXEVENR if self.even else GridType.HEXODDR
            self.size_y *= 2 * SQRT1_3
        if diagonals is None:
            diagonals = self.config.get('diagonals', GridDiagonalRule.EQUIDISTANT)
        self.diagonals = resolve_diagonal_rule(diagonals)

    def __repr__(self) -> str:
        return (f"HexagonalGrid(size={self.size}, distance={self.distance}, "
                f"columns={self.columns}, even={self.even})")

    @staticmethod
    def _check_cube(cube: HexCube) -> HexCube:
        if not almost_equal(cube.q + cube.r + cube.s, 0, 1e-6):
            raise InvalidCoordinatesError(
                f"Cube coordinates must satisfy q + r + s == 0, got: ({cube.q}, {cube.r}, {cube.s})"
            )
        return cube

    def get_offset(self, coords: Coordinates) -> GridOffset:
        if isinstance(coords, GridOffset):
            return coords
        return self.cube_to_offset(self.get_cube(coords))

    def get_offset_range(self, bounds: Rectangle) -> List[int]:
        x0 = bounds.x
        y0 = bounds.y
        o00 = self.get_offset(Point(x0, y0))
        if not (bounds.width > 0 and bounds.height > 0):
            return [o00.i, o00.j, o00.i, o00.j]
        x1 = x0 + bounds.width
        y1 = y0 + bounds.height
        o01 = self.get_offset(Point(x1, y0))
        o10 = self.get_offset(Point(x0, y1))
        o11 = self.get_offset(Point(x1, y1))
        i00, j00 = o00.i, o00.j
        i01, j01 = o01.i, o01.j
        i10, j10 = o10.i, o10.j
        i11, j11 = o11.i, o11.j
        i0 = min(i00, i01, i10, i11)
        j0 = min(j00, j01, j10, j11)
        i1 = max(i00, i01, i10, i11) + 1
        j1 = max(j00, j01, j10, j11) + 1

        # The edges of the rectangle may reach into rows or columns beyond the corners
        if self.columns:
            if i00 == i01 and j00 < j01 and (not j00 % 2) != self.even and y0 < i00 * self.size_y:
                i0 -= 1
            if i10 == i11 and j10 < j11 and (not j00 % 2) == self.even and y1 > (i10 + 0.5) * self.size_y:
                i1 += 1
            if j00 == j10 and i00 < i10 and x0 < (j00 * 0.75 + 0.25) * self.size_x:
                j0 -= 1
            if j01 == j11 and i01 < i11 and x1 > (j01 * 0.75 + 0.75) * self.size_x:
                j1 += 1
        else:
            if j00 == j10 and i00 < i10 and (not i00 % 2) != self.even and x0 < j00 * self.size_x:
                j0 -= 1
            if j01 == j11 and i01 < i11 and (not i00 % 2) == self.even and x1 > (j01 + 0.5) * self.size_x:
                j1 += 1
            if i00 == i01 and j00 < j01 and y0 < (i00 * 0.75 + 0.25) * self.size_y:
                i0 -= 1
            if i10 == i11 and j10 < j11 and y1 > (i10 * 0.75 + 0.75) * self.size_y:
                i1 += 1
        return [i0, j0, i1, j1]

    def get_adjacent_offsets(self, coords: Coordinates) -> List[GridOffset]:
        return [self.get_offset(cube) for cube in self.get_adjacent_cubes(coords)]

    def test_adjacency(self, coords1: Coordinates, coords2: Coordinates) -> bool:
        c1 = self.get_cube(coords1)
        c2 = self.get_cube(coords2)
        d0 = self.cube_distance(c1, c2)
        if c1.k is None:
            return d0 == 1
        if d0 > 1:
            return False
        d1 = abs(c1.k - c2.k)
        if d1 > 1:
            return False
        if self.diagonals == GridDiagonalRule.ILLEGAL:
            return d0 + d1 == 1
        return d0 + d1 != 0

    def get_shifted_offset(self, coords: Coordinates, direction: int) -> GridOffset:
        offset = self.get_offset(coords)

        # Every other row (column) has no neighbor in one of the diagonal directions
        if self.columns:
            if bool(direction & MovementDirection.LEFT) != bool(direction & MovementDirection.RIGHT):
                even = (offset.j % 2 == 0) == self.even
                if (even and direction & MovementDirection.UP) or (not even and direction & MovementDirection.DOWN):
                    direction &= ~(MovementDirection.UP | MovementDirection.DOWN)
        else:
            if bool(direction & MovementDirection.UP) != bool(direction & MovementDirection.DOWN):
                even = (offset.i % 2 == 0) == self.even
                if (even and direction & MovementDirection.LEFT) or (not even and direction & MovementDirection.RIGHT):
                    direction &= ~(MovementDirection.LEFT | MovementDirection.RIGHT)

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
        if ((abs(di) | abs(dj)) + abs(dk)) > 1 and self.diagonals == GridDiagonalRule.ILLEGAL:
            # Diagonal movement is not allowed
            di = dj = dk = 0
        return GridOffset(offset.i + di, offset.j + dj, offset.k + dk if offset.k is not None else None)

    def get_shifted_point(self, point: Point, direction: int) -> Point:
        center = self.get_center_point(point)
        shifted = self.get_center_point(self.get_shifted_offset(center, direction))
        x = point.x + (shifted.x - center.x)
        y = point.y + (shifted.y - center.y)
        if point.elevation is None:
            return Point(x, y)
        return Point(x, y, point.elevation + (shifted.elevation - center.elevation))

    def get_cube(self, coords: Coordinates) -> HexCube:
        """
        Get the cube coordinates of the grid space containing the coordinates.

        Raises:
            InvalidCoordinatesError: If cube coordinates do not satisfy q + r + s == 0
        """
        if isinstance(coords, GridOffset):
            return self.offset_to_cube(coords)
        if isinstance(coords, HexCube):
            return self.cube_round(self._check_cube(coords))
        return self.cube_round(self.point_to_cube(coords))

    def get_adjacent_cubes(self, coords: Coordinates) -> List[HexCube]:
        """
        Get the cube coordinates of the grid spaces adjacent to the coordinates.

        In 3D the six neighbors in the same layer come first, then the
        diagonal neighbors (unless diagonals are illegal), then the spaces
        directly below and above.
        """
        c = self.get_cube(coords)
        q, r, s, k = c.q, c.r, c.s, c.k
        deltas = [(-1, 0, 1), (-1, 1, 0), (0, -1, 1), (0, 1, -1), (1, -1, 0), (1, 0, -1)]
        cubes = [HexCube(q + dq, r + dr, s + ds, k) for dq, dr, ds in deltas]
        if k is None:
            return cubes

        if self.diagonals != GridDiagonalRule.ILLEGAL:
            for cube in cubes[:6]:
                cubes.append(HexCube(cube.q, cube.r, cube.s, k - 1))
                cubes.append(HexCube(cube.q, cube.r, cube.s, k + 1))
        cubes.append(HexCube(q, r, s, k - 1))
        cubes.append(HexCube(q, r, s, k + 1))
        return cubes

    def get_shifted_cube(self, coords: Coordinates, direction: int) -> HexCube:
        """Get the cube coordinates of the grid space shifted by one in the direction."""
        return self.get_cube(self.get_shifted_offset(coords, direction))

    def get_top_left_point(self, coords: Coordinates) -> Point:
        size = self.size
        if isinstance(coords, GridOffset):
            i, j, k = coords.i, coords.j, coords.k
            if self.columns:
                x = (2 * SQRT1_3) * ((0.75 * j) * size)
                even = (j + 1) % 2 == 0
                y = (i - (0.5 if self.even == even else 0)) * size
            else:
                y = (2 * SQRT1_3) * ((0.75 * i) * size)
                even = (i + 1) % 2 == 0
                x = (j - (0.5 if self.even == even else 0)) * size
        else:
            cube = self.get_cube(coords)
            q, r, k = cube.q, cube.r, cube.k
            if self.columns:
                x = (SQRT3 / 2) * (q * size)
                y = (0.5 * (q - (0 if self.even else 1)) + r) * size
            else:
                y = (SQRT3 / 2) * (r * size)
                x = (0.5 * (r - (0 if self.even else 1)) + q) * size
        if k is None:
            return Point(x, y)
        return Point(x, y, k * self.distance)

    def get_center_point(self, coords: Coordinates) -> Point:
        if isinstance(coords, GridOffset):
            i, j, k = coords.i, coords.j, coords.k
            size = self.size
            if self.columns:
                x = (2 * SQRT1_3) * ((0.75 * j + 0.5) * size)
                even = (j + 1) % 2 == 0
                y = (i + (0 if self.even == even else 0.5)) * size
            else:
                y = (2 * SQRT1_3) * ((0.75 * i + 0.5) * size)
                even = (i + 1) % 2 == 0
                x = (j + (0 if self.even == even else 0.5)) * size
            if k is None:
                return Point(x, y)
            return Point(x, y, (k + 0.5) * self.distance)
        cube = self.get_cube(coords)
        if cube.k is not None:
            cube = HexCube(cube.q, cube.r, cube.s, cube.k + 0.5)
        return self.cube_to_point(cube)

    def get_shape(self) -> List[Point]:
        scale_x = self.size_x / 4
        scale_y = self.size_y / 4
        if self.columns:
            x0 = -2 * scale_x
            x1 = -scale_x
            x2 = scale_x
            x3 = 2 * scale_x
            y0 = -2 * scale_y
            y1 = 2 * scale_y
            return [Point(x0, 0), Point(x1, y0), Point(x2, y0), Point(x3, 0), Point(x2, y1), Point(x1, y1)]
        y0 = -2 * scale_y
        y1 = -scale_y
        y2 = scale_y
        y3 = 2 * scale_y
        x0 = -2 * scale_x
        x1 = 2 * scale_x
        return [Point(0, y0), Point(x1, y1), Point(x1, y2), Point(0, y3), Point(x0, y2), Point(x0, y1)]

    def get_vertices(self, coords: Coordinates) -> List[Point]:
        offset = self.get_offset(coords)
        i, j = offset.i, offset.j
        scale_x = self.size_x / 4
        scale_y = self.size_y / 4
        if self.columns:
            x = 3 * j
            x0 = x * scale_x
            x1 = (x + 1) * scale_x
            x2 = (x + 3) * scale_x
            x3 = (x + 4) * scale_x
            even = (j + 1) % 2 == 0
            y = 4 * i - (2 if self.even == even else 0)
            y0 = y * scale_y
            y1 = (y + 2) * scale_y
            y2 = (y + 4) * scale_y
            return [Point(x0, y1), Point(x1, y0), Point(x2, y0), Point(x3, y1), Point(x2, y2), Point(x1, y2)]
        y = 3 * i
        y0 = y * scale_y
        y1 = (y + 1) * scale_y
        y2 = (y + 3) * scale_y
        y3 = (y + 4) * scale_y
        even = (i + 1) % 2 == 0
        x = 4 * j - (2 if self.even == even else 0)
        x0 = x * scale_x
        x1 = (x + 2) * scale_x
        x2 = (x + 4) * scale_x
        return [Point(x1, y0), Point(x2, y1), Point(x2, y2), Point(x1, y3), Point(x0, y2), Point(x0, y1)]

    def get_snapped_point(self, point: Point, behavior: SnappingBehavior) -> Point:
        mode = int(behavior.mode)
        resolution = behavior.resolution
        if mode & INVALID_SNAPPING_BITS:
            raise InvalidSnappingModeError(mode)
        if mode == 0:
            return self._snap_elevation(point, point)

        # Symmetries and identities
        if self.columns:
            # Top-Left = Bottom-Left
            if mode & 0x50:
                mode |= 0x50
            if mode & 0x500:
                mode |= 0x500
            # Top-Right = Bottom-Right
            if mode & 0xA0:
                mode |= 0xA0
            if mode & 0xA00:
                mode |= 0xA00
            # Left Side = Right Vertex
            if mode & 0x4000:
                mode |= 0xA0
            # Right Side = Left Vertex
            if mode & 0x8000:
                mode |= 0x50
        else:
            # Top-Left = Top-Right
            if mode & 0x30:
                mode |= 0x30
            if mode & 0x300:
                mode |= 0x300
            # Bottom-Left = Bottom-Right
            if mode & 0xC0:
                mode |= 0xC0
            if mode & 0xC00:
                mode |= 0xC00
            # Top Side = Bottom Vertex
            if mode & 0x1000:
                mode |= 0xC0
            # Bottom Side = Top Vertex
            if mode & 0x2000:
                mode |= 0x30

        candidates = []
        rectangular = False

        # Only top/bottom or left/right sides
        if not mode & 0x2:
            if self.columns:
                if mode & 0x3000:
                    candidates.append(self._snap_to_top_or_bottom(point, resolution))
            elif mode & 0xC000:
                candidates.append(self._snap_to_left_or_right(point, resolution))

        # Any vertex (plus edge/center)
        if (mode & 0xF0) == 0xF0:
            snap = {
                0x0: self._snap_to_vertex,
                0x1: self._snap_to_vertex_or_center,
                0x2: self._snap_to_edge_or_vertex,
                0x3: self._snap_to_edge_or_vertex_or_center
            }[mode & 0x3]
            candidates.append(snap(point, resolution))
        # A specific vertex
        elif mode & 0xF0:
            if (mode & 0x3) == 0x1:
                candidates.append(self._snap_to_specific_vertex_or_center(point, not mode & 0x10, resolution))
            else:
                if (mode & 0x3) == 0x2:
                    candidates.append(self._snap_to_edge(point, resolution))
                elif (mode & 0x3) == 0x3:
                    candidates.append(self._snap_to_edge_or_center(point, resolution))

                # Specific vertices combined with the complementary corners form a rectangular grid
                if ((mode & 0xF0) ^ ((mode & 0xF00) >> 4)) == 0xF0:
                    candidates.append(self._snap_to_rectangular_grid(point, not mode & 0x100, resolution))
                    rectangular = True
                else:
                    candidates.append(self._snap_to_specific_vertex(point, not mode & 0x10, resolution))
        # Edges and/or centers
        elif mode & 0x3:
            snap = {
                0x1: self._snap_to_center,
                0x2: self._snap_to_edge,
                0x3: self._snap_to_edge_or_center
            }[mode & 0x3]
            candidates.append(snap(point, resolution))

        if not rectangular:
            # Any corner
            if (mode & 0xF00) == 0xF00:
                candidates.append(self._snap_to_corner(point, resolution))
            # A specific corner
            elif mode & 0xF00:
                candidates.append(self._snap_to_specific_corner(point, not mode & 0x100, resolution))

        return self._snap_elevation(point, keep_nearest(point, candidates))

    def _snap_to_center(self,
                        point: Point,
                        resolution: int,
                        dx: float = 0,
                        dy: float = 0,
                        columns: Optional[bool] = None,
                        even: Optional[bool] = None,
                        size: Optional[float] = None) -> Point:
        """
        Snap the point to the nearest center of a translated, subdivided hexagonal grid.

        Args:
            point: The point
            resolution: Number of subdivisions of a grid space
            dx: x-translation of the grid
            dy: y-translation of the grid
            columns: Orientation of the grid (defaults to this grid's)
            even: Parity of the grid (defaults to this grid's)
            size: Size of the grid (defaults to this grid's)
        """
        if columns is None:
            columns = self.columns
        if even is None:
            even = self.even
        if size is None:
            size = self.size

        grid = _subdivision_grid(columns, size / resolution)

        # Align the subdivided grid with this grid
        if columns:
            dx += (size - grid.size) * SQRT1_3
            if even:
                dy += size / 2
        else:
            if even:
                dx += size / 2
            dy += (size - grid.size) * SQRT1_3

        snapped = grid.get_center_point(Point(point.x - dx, point.y - dy))
        return Point(snapped.x + dx, snapped.y + dy)

    def _snap_to_vertex(self, point: Point, resolution: int, dx: float = 0, dy: float = 0) -> Point:
        center = self._snap_to_center(point, resolution, dx, dy)
        angle = math.atan2(point.y - center.y, point.x - center.x)
        if self.columns:
            angle = js_round(angle / (math.pi / 3)) * (math.pi / 3)
        else:
            angle = (math.floor(angle / (math.pi / 3)) + 0.5) * (math.pi / 3)
        radius = max(self.size_x, self.size_y) / (2 * resolution)
        return Point(center.x + math.cos(angle) * radius, center.y + math.sin(angle) * radius)

    def _snap_to_vertex_or_center(self, point: Point, resolution: int) -> Point:
        # Vertices and centers form a hexagonal grid of the other orientation
        dx = dy = 0
        if self.columns:
            size = self.size_x / 2
            dy = size * (SQRT1_3 / 2)
        else:
            size = self.size_y / 2
            dx = size * (SQRT1_3 / 2)
        return self._snap_to_center(point, resolution, dx, dy, not self.columns, not self.even, size)

    def _snap_to_edge(self, point: Point, resolution: int) -> Point:
        center = self._snap_to_center(point, resolution)
        angle = math.atan2(point.y - center.y, point.x - center.x)
        if self.columns:
            angle = (math.floor(angle / (math.pi / 3)) + 0.5) * (math.pi / 3)
        else:
            angle = js_round(angle / (math.pi / 3)) * (math.pi / 3)
        radius = min(self.size_x, self.size_y) / (2 * resolution)
        return Point(center.x + math.cos(angle) * radius, center.y + math.sin(angle) * radius)

    def _snap_to_edge_or_center(self, point: Point, resolution: int) -> Point:
        # Edge midpoints and centers form a hexagonal grid of half the size
        dx = dy = 0
        if self.columns:
            size = self.size_y / 2
            dx = size * SQRT1_3
        else:
            size = self.size_x / 2
            dy = size * SQRT1_3
        return self._snap_to_center(point, resolution, dx, dy, self.columns, False, size)

    def _edge_angle(self, angle: float) -> float:
        if self.columns:
            return (math.floor(angle / (math.pi / 3)) + 0.5) * (math.pi / 3)
        return js_round(angle / (math.pi / 3)) * (math.pi / 3)

    def _snap_to_edge_or_vertex(self, point: Point, resolution: int) -> Point:
        center = self._snap_to_center(point, resolution)
        dx = point.x - center.x
        dy = point.y - center.y
        angle = self._edge_angle(math.atan2(dy, dx))
        s = 2 * resolution
        radius1, radius2 = sorted((self.size_x / s, self.size_y / s))
        cos = math.cos(angle)
        sin = math.sin(angle)
        d = cos * dy - sin * dx
        if abs(d) <= radius2 / 4:
            return Point(center.x + cos * radius1, center.y + sin * radius1)
        angle += (math.pi / 6) * _sign(d)
        return Point(center.x + math.cos(angle) * radius2, center.y + math.sin(angle) * radius2)

    def _snap_to_edge_or_vertex_or_center(self, point: Point, resolution: int) -> Point:
        center = self._snap_to_center(point, resolution)
        dx = point.x - center.x
        dy = point.y - center.y
        angle = self._edge_angle(math.atan2(dy, dx))
        s = 2 * resolution
        radius1, radius2 = sorted((self.size_x / s, self.size_y / s))
        cos = math.cos(angle)
        sin = math.sin(angle)
        d1 = cos * dx + sin * dy
        if d1 <= radius1 / 2:
            return center
        d2 = cos * dy - sin * dx
        if abs(d2) <= radius2 / 4:
            return Point(center.x + cos * radius1, center.y + sin * radius1)
        angle += (math.pi / 6) * _sign(d2)
        return Point(center.x + math.cos(angle) * radius2, center.y + math.sin(angle) * radius2)

    def _snap_to_corner(self, point: Point, resolution: int) -> Point:
        dx = dy = 0
        s = 2 * resolution
        if self.columns:
            dy = self.size_y / s
        else:
            dx = self.size_x / s
        return self._snap_to_vertex(point, resolution, dx, dy)

    def _snap_to_specific_vertex(self, point: Point, other: bool, resolution: int) -> Point:
        """Snap to the top-left vertex, or the bottom-right vertex if other."""
        dx = dy = 0
        s = (-2 if other else 2) * resolution
        if self.columns:
            dx = self.size_x / s
        else:
            dy = self.size_y / s
        return self._snap_to_center(point, resolution, dx, dy)

    def _snap_to_specific_vertex_or_center(self, point: Point, other: bool, resolution: int) -> Point:
        """Snap to the top-left vertex or center, or the bottom-right vertex or center if other."""
        dx = dy = 0
        s = (2 if other else -2) * resolution
        if self.columns:
            dx = self.size_x / s
        else:
            dy = self.size_y / s
        return self._snap_to_vertex(point, resolution, dx, dy)

    def _snap_to_specific_corner(self, point: Point, other: bool, resolution: int) -> Point:
        """Snap to the top-left corner, or the bottom-right corner if other."""
        dx = dy = 0
        s = (-4 if other else 4) * resolution
        if self.columns:
            dx = self.size_x / s
        else:
            dy = self.size_y / s
        return self._snap_to_center(point, resolution, dx, dy)

    def _snap_to_rectangular_grid(self, point: Point, other: bool, resolution: int) -> Point:
        """Snap to the rectangular grid aligned with the top-left corners, or vertices if other."""
        tx = self.size_x / 2
        ty = self.size_y / 2
        sx = tx
        sy = ty
        dx = dy = 0
        d = 1 / 3 if other else 2 / 3
        if self.columns:
            sx *= 1.5
            dx = d
        else:
            sy *= 1.5
            dy = d
        sx /= resolution
        sy /= resolution
        return Point((js_round((point.x - tx) / sx + dx) - dx) * sx + tx,
                     (js_round((point.y - ty) / sy + dy) - dy) * sy + ty)

    def _snap_to_top_or_bottom(self, point: Point, resolution: int) -> Point:
        return self._snap_to_center(point, resolution, 0, self.size_y / (2 * resolution))

    def _snap_to_left_or_right(self, point: Point, resolution: int) -> Point:
        return self._snap_to_center(point, resolution, self.size_x / (2 * resolution), 0)

    def calculate_dimensions(self, scene_width: float, scene_height: float, padding: float) -> GridDimensions:
        columns = self.columns
        size = self.size
        size_x = (2 * size) / SQRT3 if columns else size
        size_y = size if columns else (2 * size) / SQRT3
        stride_x = 0.75 * size_x if columns else size_x
        stride_y = size_y if columns else 0.75 * size_y

        if not padding:
            cols = math.ceil((scene_width + (-size_x / 4 if columns else size_x / 2)) / stride_x - 1e-6)
            rows = math.ceil((scene_height + (size_y / 2 if columns else -size_y / 4)) / stride_y - 1e-6)
            return GridDimensions(width=scene_width, height=scene_height, x=0, y=0, rows=rows, columns=cols)

        # `* (1 / stride)` is not the same as `/ stride` in floating point and existing scenes rely on it
        x = math.ceil((padding * scene_width) * (1 / stride_x)) * stride_x
        y = math.ceil((padding * scene_height) * (1 / stride_y)) * stride_y
        width = scene_width + 2 * js_round(math.ceil((padding * scene_width) * (1 / stride_x)) / (1 / stride_x))
        height = scene_height + 2 * js_round(math.ceil((padding * scene_height) * (1 / stride_y)) / (1 / stride_y))

        # The top-left hexagon of the scene is a full hexagon in even grids and a half hexagon in odd grids
        cross_even = js_round(x / stride_x if columns else y / stride_y) % 2 == 0
        if not cross_even:
            if columns:
                y += size_y / 2
                height += size_y
            else:
                x += size_x / 2
                width += size_x

        cols = js_round(width * (1 / stride_x))
        rows = js_round(height * (1 / stride_y))
        width = cols * stride_x
        height = rows * stride_y
        if columns:
            rows += 1
            width += size_x / 4
        else:
            cols += 1
            height += size_y / 4
        return GridDimensions(width=width, height=height, x=x, y=y, rows=rows, columns=cols)

    @staticmethod
    def calculate_legacy_dimensions(columns: bool,
                                    legacy_size: float,
                                    scene_width: float,
                                    scene_height: float,
                                    padding: float) -> GridDimensions:
        """
        Calculate the padded dimensions of a scene created with the legacy hexagon sizing.

        Legacy scenes measured the grid size across the long diagonal of the hexagon.
        """
        x = math.ceil((padding * scene_width) * (1 / legacy_size)) * legacy_size
        y = math.ceil((padding * scene_height) * (1 / legacy_size)) * legacy_size
        width = scene_width + 2 * x
        height = scene_height + 2 * y
        size = legacy_size * (SQRT3 / 2)
        size_x = legacy_size if columns else size
        size_y = size if columns else legacy_size
        stride_x = 0.75 * size_x if columns else size_x
        stride_y = size_y if columns else 0.75 * size_y
        cols = math.floor((width + (size_x / 4 if columns else size_x)) / stride_x + 1e-6)
        rows = math.floor((height + (size_y if columns else size_y / 4)) / stride_y + 1e-6)
        return GridDimensions(width=width, height=height, x=x, y=y, rows=rows, columns=cols)

    def _to_cube(self, coords: Coordinates) -> HexCube:
        """Fractional cube coordinates of the coordinates."""
        if isinstance(coords, Point):
            return self.point_to_cube(coords)
        if isinstance(coords, GridOffset):
            return self.offset_to_cube(coords)
        return self._check_cube(coords)

    def _measure_path(self,
                      waypoints: List[PathWaypoint],
                      cost: Optional[Union[float, CostFunction]],
                      result: PathMeasurement):
        w0 = waypoints[0]
        o0 = self.get_offset(w0.coords)
        c0 = self.offset_to_cube(o0)
        d0 = self._to_cube(w0.coords)
        p0 = w0.coords if isinstance(w0.coords, Point) else self.cube_to_point(d0)

        is_3d = o0.k is not None
        diagonals = self.diagonals
        alternating = diagonals in (GridDiagonalRule.ALTERNATING_1, GridDiagonalRule.ALTERNATING_2)

        # Running diagonal counters of the alternating rules, threaded through all segments
        nd = 1 if diagonals == GridDiagonalRule.ALTERNATING_2 else 0
        ld = nd

        for index in range(1, len(waypoints)):
            w1 = waypoints[index]
            o1 = self.get_offset(w1.coords)
            c1 = self.offset_to_cube(o1)
            d1 = self._to_cube(w1.coords)
            p1 = w1.coords if isinstance(w1.coords, Point) else self.cube_to_point(d1)
            cost1 = w1.cost if w1.cost is not None else cost

            if w1.measure:
                # Number of moves, number of diagonal (vertical) moves and cost of the moves
                n = int(self.cube_distance(c0, c1))
                d = 0
                if is_3d:
                    d = abs(c0.k - c1.k)
                    if n < d:
                        n, d = d, n
                nd0 = nd
                if diagonals == GridDiagonalRule.EQUIDISTANT:
                    c = n
                elif diagonals == GridDiagonalRule.EXACT:
                    c = n + (SQRT2 - 1) * d
                elif diagonals == GridDiagonalRule.APPROXIMATE:
                    c = n + 0.5 * d
                elif diagonals == GridDiagonalRule.RECTILINEAR:
                    c = n + d
                elif alternating:
                    nd += d
                    c = n + (math.floor(nd / 2) - math.floor(nd0 / 2))
                else:
                    n = n + d
                    d = 0
                    c = n

                # Distance of the segment
                a = self.cube_distance(d0, d1)
                b = 0
                if is_3d:
                    b = abs(d0.k - d1.k)
                    if a < b:
                        a, b = b, a
                if diagonals == GridDiagonalRule.EQUIDISTANT:
                    length = a
                elif diagonals == GridDiagonalRule.EXACT:
                    length = a + (SQRT2 - 1) * b
                elif diagonals == GridDiagonalRule.APPROXIMATE:
                    length = a + 0.5 * b
                elif alternating:
                    ld0 = ld
                    ld += b
                    length = a + ((abs((ld - 1) / 2 - math.floor(ld / 2)) + (ld - 1) / 2)
                                  - (abs((ld0 - 1) / 2 - math.floor(ld0 / 2)) + (ld0 - 1) / 2))
                else:
                    length = a + b
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
            c0 = c1
            d0 = d1
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
            if o0.k == o1.k or (o0.i == o1.i and o0.j == o1.j):
                d = 1
            else:
                if alternating:
                    d = 1 + (math.floor((diagonals + 1) / 2) - math.floor(diagonals / 2))
                else:
                    d = self.DIAGONAL_STEP.get(self.diagonals, 1)
                diagonals += 1

            c += cost(o0, o1, d * self.distance, waypoint)
            o0 = o1
        return c

    def get_direct_path(self, waypoints: Sequence[Coordinates]) -> List[GridOffset]:
        if not waypoints:
            return []

        c0 = self.get_cube(waypoints[0])
        q0, r0, k0 = c0.q, c0.r, c0.k
        is_3d = k0 is not None
        path = [self.get_offset(c0)]

        diagonals = self.diagonals != GridDiagonalRule.ILLEGAL
        for waypoint in waypoints[1:]:
            c1 = self.get_cube(waypoint)
            q1, r1, k1 = c1.q, c1.r, c1.k
            if q0 == q1 and r0 == r1 and k0 == k1:
                continue

            # Segments collinear with hexagon edges are nudged to one side so the walk is deterministic
            dq = q0 - q1
            dr = r0 - r1
            eq = er = 0
            if self.columns:
                # Collinear with SE-NW edges
                if dq == dr:
                    er = EDGE_EPSILON if (not (q0 + r0) & 1) == self.even else -EDGE_EPSILON
                    eq = -er
                # Collinear with SW-NE edges
                elif -2 * dq == dr:
                    eq = EDGE_EPSILON if (not r0 & 1) == self.even else -EDGE_EPSILON
                # Collinear with E-W edges
                elif dq == -2 * dr:
                    er = -EDGE_EPSILON if (not q0 & 1) == self.even else EDGE_EPSILON
            else:
                # Collinear with SE-NW edges
                if dq == dr:
                    eq = EDGE_EPSILON if (not (q0 + r0) & 1) == self.even else -EDGE_EPSILON
                    er = -eq
                # Collinear with SW-NE edges
                elif dq == -2 * dr:
                    er = EDGE_EPSILON if (not q0 & 1) == self.even else -EDGE_EPSILON
                # Collinear with S-N edges
                elif -2 * dq == dr:
                    eq = -EDGE_EPSILON if (not r0 & 1) == self.even else EDGE_EPSILON

            n = int(self.cube_distance(c0, c1))
            if is_3d:
                if n != 0:
                    path.extend(self._walk_3d(c0, c1, n, eq, er, diagonals))
                    path.append(self.get_offset(c1))
                else:
                    last = path[-1]
                    k = k0
                    sk = 1 if k0 < k1 else -1
                    while k != k1:
                        k += sk
                        path.append(GridOffset(last.i, last.j, k))
            else:
                for step in range(1, n):
                    t = (step + EDGE_EPSILON) / n
                    q = mix(q0, q1, t) + eq
                    r = mix(r0, r1, t) + er
                    path.append(self.get_offset(HexCube(q, r, 0 - q - r)))
                path.append(self.get_offset(c1))

            c0 = c1
            q0, r0, k0 = q1, r1, k1

        return path

    def _walk_3d(self, c0: HexCube, c1: HexCube, n: int, eq: float, er: float, diagonals: bool) -> List[GridOffset]:
        """Intermediate offsets of a 3D segment, excluding both ends."""
        q0, r0, k0 = c0.q, c0.r, c0.k
        q1, r1, k1 = c1.q, c1.r, c1.k
        q, r, k = q0, r0, k0
        steps = 0
        sk = 1 if k0 < k1 else -1
        path = []

        if diagonals:
            # Interleave horizontal and vertical steps with one error accumulator
            dk = 0 - abs(k0 - k1)
            e = n + dk
            while True:
                e2 = e * 2
                if e2 >= dk:
                    e += dk
                    steps += 1
                    t = (steps + EDGE_EPSILON) / n
                    q = mix(q0, q1, t) + eq
                    r = mix(r0, r1, t) + er
                if e2 <= n:
                    e += n
                    k += sk
                if steps == n and k == k1:
                    break
                path.append(self.get_offset(HexCube(q, r, 0 - q - r, k)))
        else:
            # One axis per step, picking the axis with the least elapsed progress
            dk1 = abs(k0 - k1) or 1
            tc = dk1
            tk = n
            while True:
                if tc <= tk:
                    tc += dk1
                    steps += 1
                    t = (steps + EDGE_EPSILON) / n
                    q = mix(q0, q1, t) + eq
                    r = mix(r0, r1, t) + er
                else:
                    tk += n
                    k += sk
                if steps == n and k == k1:
                    break
                path.append(self.get_offset(HexCube(q, r, 0 - q - r, k)))
        return path

    def get_translated_point(self, point: Point, direction: float, distance: float) -> Point:
        direction = math.radians(direction)
        dx = math.cos(direction)
        dy = math.sin(direction)
        if self.columns:
            q = (2 * SQRT1_3) * dx
            r = -0.5 * q + dy
        else:
            r = (2 * SQRT1_3) * dy
            q = -0.5 * r + dx
        s = distance / self.distance * self.size / ((abs(r) + abs(q) + abs(q + r)) / 2)
        return Point(point.x + dx * s, point.y + dy * s, point.elevation)

    def get_circle(self, center: Point, radius: float) -> List[Point]:
        if radius <= 0:
            return []
        r = radius / self.distance * self.size
        x, y = center.x, center.y
        if self.columns:
            x0 = r * (SQRT3 / 2)
            x1 = -x0
            y0 = r
            y1 = y0 / 2
            y2 = -y1
            y3 = -y0
            return [Point(x, y + y0), Point(x + x1, y + y1), Point(x + x1, y + y2),
                    Point(x, y + y3), Point(x + x0, y + y2), Point(x + x0, y + y1)]
        y0 = r * (SQRT3 / 2)
        y1 = -y0
        x0 = r
        x1 = x0 / 2
        x2 = -x1
        x3 = -x0
        return [Point(x + x0, y), Point(x + x1, y + y0), Point(x + x2, y + y0),
                Point(x + x3, y), Point(x + x2, y + y1), Point(x + x1, y + y1)]

    @staticmethod
    def cube_round(cube: HexCube) -> HexCube:
        """
        Round fractional cube coordinates to the nearest hexagon.

        The component with the largest rounding error is recomputed from the
        other two so that q + r + s == 0 holds exactly. The k component is floored.
        """
        iq = js_round(cube.q)
        ir = js_round(cube.r)
        is_ = js_round(cube.s)
        dq = abs(iq - cube.q)
        dr = abs(ir - cube.r)
        ds = abs(is_ - cube.s)

        if dq > dr and dq > ds:
            iq = -ir - is_
        elif dr > ds:
            ir = -iq - is_
        else:
            is_ = -iq - ir

        if cube.k is None:
            return HexCube(iq, ir, is_)
        return HexCube(iq, ir, is_, math.floor(cube.k + 1e-8))

    def point_to_cube(self, point: Point) -> HexCube:
        """Convert a point into fractional cube coordinates."""
        x = point.x / self.size
        y = point.y / self.size
        if self.columns:
            q = (2 * SQRT1_3) * x - 2 / 3
            r = -0.5 * (q + (1 if self.even else 0)) + y
        else:
            r = (2 * SQRT1_3) * y - 2 / 3
            q = -0.5 * (r + (1 if self.even else 0)) + x
        s = 0 - q - r
        if point.elevation is None:
            return HexCube(q, r, s)
        return HexCube(q, r, s, point.elevation / self.distance)

    def cube_to_point(self, cube: HexCube) -> Point:
        """Convert cube coordinates into a point (the center for integer cubes)."""
        q, r = cube.q, cube.r
        size = self.size
        if self.columns:
            x = (0.5 * SQRT1_3) * ((3 * q + 2) * size)
            y = (0.5 * (q + (1 if self.even else 0)) + r) * size
        else:
            y = (0.5 * SQRT1_3) * ((3 * r + 2) * size)
            x = (0.5 * (r + (1 if self.even else 0)) + q) * size
        if cube.k is None:
            return Point(x, y)
        return Point(x, y, cube.k * self.distance)

    def offset_to_cube(self, offset: GridOffset) -> HexCube:
        """Convert an offset into integer cube coordinates."""
        i, j = offset.i, offset.j
        parity = 1 if self.even else -1
        if self.columns:
            q = j
            r = i - ((j + parity * (j & 1)) >> 1)
        else:
            q = j - ((i + parity * (i & 1)) >> 1)
            r = i
        return HexCube(q, r, 0 - q - r, offset.k)

    def cube_to_offset(self, cube: HexCube) -> GridOffset:
        """Convert integer cube coordinates into an offset."""
        q, r = cube.q, cube.r
        parity = 1 if self.even else -1
        if self.columns:
            j = q
            i = r + ((q + parity * (q & 1)) >> 1)
        else:
            i = r
            j = q + ((r + parity * (r & 1)) >> 1)
        return GridOffset(i, j, cube.k)

    @staticmethod
    def cube_distance(a: HexCube, b: HexCube) -> float:
        """Distance in hexagons between two cube coordinates."""
        dq = a.q - b.q
        dr = a.r - b.r
        return (abs(dq) + abs(dr) + abs(dq + dr)) / 2

    def get_token_snapped_position(self,
                                   position: Point,
                                   width: float,
                                   height: float,
                                   shape: int = TokenShape.ELLIPSE_1) -> Point:
        """
        Snap the top-left position of a token.

        Args:
            position: Top-left position of the token in pixels
            width: Width of the token in grid spaces
            height: Height of the token in grid spaces
            shape: TokenShape of the footprint

        Returns:
            The snapped top-left position
        """
        data = get_hexagonal_shape(width, height, shape, self.columns)
        if data is not None:
            offset_x = data.anchor.x * self.size_x
            offset_y = data.anchor.y * self.size_y
            center = self.get_center_point(Point(position.x + offset_x, position.y + offset_y))
            return Point(center.x - offset_x, center.y - offset_y)

        # Tokens without a hexagonal footprint snap like rectangles
        mode = SnappingMode.CENTER | SnappingMode.VERTEX | SnappingMode.CORNER | SnappingMode.SIDE_MIDPOINT
        return self.get_snapped_point(Point(position.x, position.y), SnappingBehavior(mode))

    def get_token_offset(self,
                         position: Point,
                         width: float,
                         height: float,
                         shape: int = TokenShape.ELLIPSE_1) -> GridOffset:
        """Get the offset of the top-left grid space of a token."""
        width = js_round(width * 2) / 2
        height = js_round(height * 2) / 2
        anchor = get_hexagonal_offsets(width, height, shape, self.columns).anchor
        x = js_round(position.x) + self.size_x * anchor.x
        y = js_round(position.y) + self.size_y * anchor.y
        return self.get_offset(Point(x, y, position.elevation))

    def get_token_offsets(self,
                          position: Point,
                          width: float,
                          height: float,
                          shape: int = TokenShape.ELLIPSE_1) -> List[GridOffset]:
        """
        Get the offsets of the grid spaces a token occupies.

        Args:
            position: Top-left position of the token in pixels
            width: Width of the token in grid spaces
            height: Height of the token in grid spaces
            shape: TokenShape of the footprint

        Returns:
            The occupied offsets (2D)
        """
        origin = self.get_token_offset(Point(position.x, position.y), width, height, shape)
        width = js_round(width * 2) / 2
        height = js_round(height * 2) / 2
        data = get_hexagonal_offsets(width, height, shape, self.columns)
        is_even = ((origin.j if self.columns else origin.i) % 2 == 0) == self.even
        return [GridOffset(origin.i + o.i, origin.j + o.j) for o in (data.even if is_even else data.odd)]
