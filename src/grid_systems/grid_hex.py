# src/grid_systems/grid_hex.py
"""Value object for a single hexagon of a hexagonal grid."""

from typing import List

from ..abstractions.types import Coordinates, HexCube, Point
from .hexagonal_grid import HexagonalGrid


class GridHex:
    """
    One grid space of a HexagonalGrid.

    Two hexes are equal if they have the same offset.
    """

    def __init__(self, coordinates: Coordinates, grid: HexagonalGrid):
        """
        Initialize hex.

        Args:
            coordinates: Point, offset or cube coordinates inside the hex
            grid: The hexagonal grid the hex belongs to

        Raises:
            TypeError: If the grid is not a HexagonalGrid
        """
        if not isinstance(grid, HexagonalGrid):
            raise TypeError(f"GridHex requires a HexagonalGrid, got: {type(grid).__name__}")
        self.grid = grid
        self.cube = grid.get_cube(coordinates)
        self.offset = grid.cube_to_offset(self.cube)

    @property
    def center(self) -> Point:
        return self.grid.get_center_point(self.cube)

    @property
    def top_left(self) -> Point:
        return self.grid.get_top_left_point(self.cube)

    def get_neighbors(self) -> List['GridHex']:
        """Get the hexes adjacent to this one."""
        return [self.__class__(cube, self.grid) for cube in self.grid.get_adjacent_cubes(self.cube)]

    def shift_cube(self, dq: int, dr: int, ds: int) -> 'GridHex':
        """Get the hex shifted by the cube deltas."""
        cube = self.cube
        return self.__class__(HexCube(cube.q + dq, cube.r + dr, cube.s + ds, cube.k), self.grid)

    def __eq__(self, other) -> bool:
        if not isinstance(other, GridHex):
            return NotImplemented
        return self.offset.i == other.offset.i and self.offset.j == other.offset.j

    def __hash__(self) -> int:
        return hash((self.offset.i, self.offset.j))

    def __repr__(self) -> str:
        return f"GridHex(i={self.offset.i}, j={self.offset.j})"
