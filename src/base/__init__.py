"""
Base classes for battle map grid systems.

- BaseGrid: Conversion between points and grid offsets, snapping and path measurement
- Grid exceptions shared by all grid implementations

Usage Example:
    from src.base import BaseGrid
    from src.core import component_registry

    @component_registry.grids.register_decorator(grid_types={GridType.SQUARE})
    class MyGrid(BaseGrid):
        def get_offset(self, coords):
            ...
"""

from .grid import BaseGrid
from .exceptions import (
    GridError,
    GridConfigurationError,
    InvalidSnappingModeError,
    InvalidCoordinatesError
)

__all__ = [
    'BaseGrid',
    'GridError',
    'GridConfigurationError',
    'InvalidSnappingModeError',
    'InvalidCoordinatesError'
]
