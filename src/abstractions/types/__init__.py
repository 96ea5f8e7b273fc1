# src/abstractions/types/__init__.py
"""Type definitions for the abstractions layer."""

# Grid types
from .grid_types import (
    GRID_MIN_SIZE, INVALID_SNAPPING_BITS,
    GridType, GridDiagonalRule, GridLineStyle, MovementDirection, SnappingMode, TokenShape,
    Point, GridOffset, HexCube, Coordinates, Rectangle, GridDimensions,
    SnappingBehavior, CostFunction, PathWaypoint,
    MeasuredSegment, MeasuredWaypoint, PathMeasurement
)

__all__ = [
    'GRID_MIN_SIZE', 'INVALID_SNAPPING_BITS',
    'GridType', 'GridDiagonalRule', 'GridLineStyle', 'MovementDirection', 'SnappingMode', 'TokenShape',
    'Point', 'GridOffset', 'HexCube', 'Coordinates', 'Rectangle', 'GridDimensions',
    'SnappingBehavior', 'CostFunction', 'PathWaypoint',
    'MeasuredSegment', 'MeasuredWaypoint', 'PathMeasurement'
]
