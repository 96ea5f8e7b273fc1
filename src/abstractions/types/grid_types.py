# src/abstractions/types/grid_types.py
"""Grid system type definitions."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag
from typing import Any, Callable, Dict, List, Optional, Union


# Smallest grid size (in pixels) a scene may be configured with
GRID_MIN_SIZE = 20


class GridType(IntEnum):
    """The supported grid topologies and hexagonal orientations."""
    GRIDLESS = 0
    SQUARE = 1
    HEXODDR = 2
    HEXEVENR = 3
    HEXODDQ = 4
    HEXEVENQ = 5

    @property
    def is_hexagonal(self) -> bool:
        return self >= GridType.HEXODDR


class GridDiagonalRule(IntEnum):
    """Rules for measuring diagonal moves."""
    EQUIDISTANT = 0
    EXACT = 1
    APPROXIMATE = 2
    RECTILINEAR = 3
    ALTERNATING_1 = 4
    ALTERNATING_2 = 5
    ILLEGAL = 6


class MovementDirection(IntFlag):
    """Directions of one-cell moves, combinable as bit flags."""
    UP = 0x1
    DOWN = 0x2
    LEFT = 0x4
    RIGHT = 0x8
    UP_LEFT = 0x5
    UP_RIGHT = 0x9
    DOWN_LEFT = 0x6
    DOWN_RIGHT = 0xA
    DESCEND = 0x10
    ASCEND = 0x20


class SnappingMode(IntFlag):
    """
    Snapping targets within a grid space.

    The bit values are stable: persisted scene data stores them and the
    hexagonal symmetry folding depends on the exact bit positions.
    """
    CENTER = 0x1
    EDGE_MIDPOINT = 0x2
    TOP_LEFT_VERTEX = 0x10
    TOP_RIGHT_VERTEX = 0x20
    BOTTOM_LEFT_VERTEX = 0x40
    BOTTOM_RIGHT_VERTEX = 0x80
    VERTEX = 0xF0
    TOP_LEFT_CORNER = 0x100
    TOP_RIGHT_CORNER = 0x200
    BOTTOM_LEFT_CORNER = 0x400
    BOTTOM_RIGHT_CORNER = 0x800
    CORNER = 0xF00
    TOP_SIDE_MIDPOINT = 0x1000
    BOTTOM_SIDE_MIDPOINT = 0x2000
    LEFT_SIDE_MIDPOINT = 0x4000
    RIGHT_SIDE_MIDPOINT = 0x8000
    SIDE_MIDPOINT = 0xF000


# Bits that are not part of any snapping mode
INVALID_SNAPPING_BITS = ~0xFFF3


class TokenShape(IntEnum):
    """Footprint shapes of multi-cell tokens on hexagonal grids."""
    ELLIPSE_1 = 0
    ELLIPSE_2 = 1
    TRAPEZOID_1 = 2
    TRAPEZOID_2 = 3
    RECTANGLE_1 = 4
    RECTANGLE_2 = 5


class GridLineStyle(Enum):
    """Line styles a grid may be drawn with."""
    SOLID_LINES = "solidLines"
    DASHED_LINES = "dashedLines"
    DOTTED_LINES = "dottedLines"
    SQUARE_POINTS = "squarePoints"
    DIAMOND_POINTS = "diamondPoints"
    ROUND_POINTS = "roundPoints"


@dataclass(frozen=True)
class Point:
    """Continuous pixel coordinates, optionally with an elevation in grid units."""
    x: float
    y: float
    elevation: Optional[float] = None

    @property
    def is_elevated(self) -> bool:
        return self.elevation is not None

    def with_elevation(self, elevation: Optional[float]) -> 'Point':
        return Point(self.x, self.y, elevation)


@dataclass(frozen=True)
class GridOffset:
    """Row (i), column (j) and optional layer (k) of one grid space."""
    i: int
    j: int
    k: Optional[int] = None

    @property
    def is_elevated(self) -> bool:
        return self.k is not None


@dataclass(frozen=True)
class HexCube:
    """Cube coordinates of a hexagonal grid space (q + r + s == 0)."""
    q: float
    r: float
    s: float
    k: Optional[float] = None

    @property
    def is_elevated(self) -> bool:
        return self.k is not None


Coordinates = Union[Point, GridOffset, HexCube]


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned pixel rectangle."""
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class GridDimensions:
    """Scene dimensions after padding was applied."""
    width: float
    height: float
    x: float
    y: float
    rows: int
    columns: int


@dataclass(frozen=True)
class SnappingBehavior:
    """Snapping mode and the subdivision resolution of a grid space."""
    mode: int
    resolution: int = 1

    def __post_init__(self):
        if not (isinstance(self.resolution, int) and self.resolution > 0):
            raise ValueError(f"Resolution must be a positive integer, got: {self.resolution}")


# (from_offset, to_offset, distance, waypoint) -> cost
CostFunction = Callable[[GridOffset, GridOffset, float, 'PathWaypoint'], float]


@dataclass
class PathWaypoint:
    """A waypoint passed to measure_path together with its segment options."""
    coords: Union[Point, GridOffset]
    measure: bool = True
    teleport: bool = False
    cost: Optional[Union[float, CostFunction]] = None
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class MeasuredSegment:
    """Measurements of one leg between two consecutive waypoints."""
    start: 'MeasuredWaypoint'
    end: 'MeasuredWaypoint'
    distance: float = 0.0
    cost: float = 0.0
    spaces: int = 0
    diagonals: int = 0
    euclidean: float = 0.0


@dataclass(eq=False)
class MeasuredWaypoint:
    """Running totals of the path up to a waypoint."""
    backward: Optional[MeasuredSegment] = None
    forward: Optional[MeasuredSegment] = None
    distance: float = 0.0
    cost: float = 0.0
    spaces: int = 0
    diagonals: int = 0
    euclidean: float = 0.0


@dataclass(eq=False)
class PathMeasurement:
    """Result of measuring a path through a list of waypoints."""
    waypoints: List[MeasuredWaypoint] = field(default_factory=list)
    segments: List[MeasuredSegment] = field(default_factory=list)
    distance: float = 0.0
    cost: float = 0.0
    spaces: int = 0
    diagonals: int = 0
    euclidean: float = 0.0
