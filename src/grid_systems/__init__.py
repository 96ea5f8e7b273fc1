# src/grid_systems/__init__.py
"""Grid system implementations."""

from .gridless_grid import GridlessGrid
from .square_grid import SquareGrid
from .hexagonal_grid import HexagonalGrid
from .grid_hex import GridHex
from .hex_shapes import HexagonalShape, HexagonalOffsets, get_hexagonal_shape, get_hexagonal_offsets
from .grid_factory import (
    GridFactory,
    GridSpecification,
    get_or_create_grid
)

__all__ = [
    'GridlessGrid',
    'SquareGrid',
    'HexagonalGrid',
    'GridHex',
    'HexagonalShape',
    'HexagonalOffsets',
    'get_hexagonal_shape',
    'get_hexagonal_offsets',
    'GridFactory',
    'GridSpecification',
    'get_or_create_grid'
]

# Register grids with component registry on import
# (This happens automatically with decorators)
