"""Foundation layer - pure abstractions and types with no src dependencies."""

# Re-export key types for convenience
from .types import (
    GridType, GridDiagonalRule, MovementDirection, SnappingMode, SnappingBehavior,
    Point, GridOffset, HexCube, PathWaypoint, PathMeasurement
)

__all__ = [
    'GridType',
    'GridDiagonalRule',
    'MovementDirection',
    'SnappingMode',
    'SnappingBehavior',
    'Point',
    'GridOffset',
    'HexCube',
    'PathWaypoint',
    'PathMeasurement'
]
