# src/grid_systems/hex_shapes.py
"""Footprints of multi-cell tokens on hexagonal grids."""

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple
import math
import logging

import numpy as np

from ..abstractions.types import GridOffset, Point, TokenShape
from ..utils.geometry import js_round, polygon_centroid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HexagonalShape:
    """
    Footprint of a token in a hexagonal grid.

    All coordinates are in units of the grid space size (size_x, size_y)
    relative to the top-left of the token.
    """
    # Offsets relative to the top-left space, for an even and an odd top-left space
    even: Tuple[GridOffset, ...]
    odd: Tuple[GridOffset, ...]
    # Polygon outline as flat [x0, y0, x1, y1, ...] coordinates
    points: Tuple[float, ...]
    center: Point
    anchor: Point

    def get_polygon(self, size_x: float, size_y: float) -> List[Point]:
        """Outline of the shape in pixels relative to the top-left of the token."""
        return [Point(x * size_x, y * size_y) for x, y in zip(self.points[0::2], self.points[1::2])]


@dataclass(frozen=True)
class HexagonalOffsets:
    """Occupied offsets and anchor of a token, with the rectangular fallback applied."""
    even: Tuple[GridOffset, ...]
    odd: Tuple[GridOffset, ...]
    anchor: Point


def _is_integer(value: float) -> bool:
    return float(value).is_integer()


@lru_cache(maxsize=None)
def get_hexagonal_shape(width: float, height: float, shape: int, columns: bool) -> Optional[HexagonalShape]:
    """
    Get the hexagonal shape of a token.

    Args:
        width: Width of the token in grid spaces (positive)
        height: Height of the token in grid spaces (positive)
        shape: TokenShape of the footprint
        columns: Column-based instead of row-based grid

    Returns:
        The shape, or None if there is no hexagonal shape for the combination of arguments
    """
    if not (_is_integer(width * 2) and _is_integer(height * 2)):
        return None

    # Column shapes are the transposed row shapes
    if columns:
        row_shape = get_hexagonal_shape(height, width, shape, False)
        if row_shape is None:
            return None
        even = sorted((GridOffset(o.j, o.i) for o in row_shape.even), key=lambda o: (o.j, o.i))
        odd = sorted((GridOffset(o.j, o.i) for o in row_shape.odd), key=lambda o: (o.j, o.i))
        points = np.array(row_shape.points, dtype=float).reshape(-1, 2)[::-1, ::-1].ravel()
        return HexagonalShape(
            even=tuple(even),
            odd=tuple(odd),
            points=tuple(points.tolist()),
            center=Point(row_shape.center.y, row_shape.center.x),
            anchor=Point(row_shape.anchor.y, row_shape.anchor.x)
        )

    if width == 0.5 and height == 0.5:
        return HexagonalShape(
            even=(GridOffset(0, 0),),
            odd=(GridOffset(0, 0),),
            points=(0.25, 0.0, 0.5, 0.125, 0.5, 0.375, 0.25, 0.5, 0.0, 0.375, 0.0, 0.125),
            center=Point(0.25, 0.25),
            anchor=Point(0.25, 0.25)
        )

    if width == 1 and height == 1:
        return HexagonalShape(
            even=(GridOffset(0, 0),),
            odd=(GridOffset(0, 0),),
            points=(0.5, 0.0, 1.0, 0.25, 1.0, 0.75, 0.5, 1.0, 0.0, 0.75, 0.0, 0.25),
            center=Point(0.5, 0.5),
            anchor=Point(0.5, 0.5)
        )

    if shape <= TokenShape.TRAPEZOID_2:
        return _create_ellipse_or_trapezoid(width, height, shape)
    if shape <= TokenShape.RECTANGLE_2:
        return _create_rectangle(width, height, shape)
    return None


def _create_ellipse_or_trapezoid(width: float, height: float, shape: int) -> Optional[HexagonalShape]:
    """Row-based hexagonal ellipse or trapezoid."""
    if not (_is_integer(width) and _is_integer(height)):
        return None
    width = int(width)
    height = int(height)

    if shape == TokenShape.ELLIPSE_1:
        if height >= 2 * width:
            return None
        top = height // 2
        bottom = (height - 1) // 2
    elif shape == TokenShape.ELLIPSE_2:
        if height >= 2 * width:
            return None
        top = (height - 1) // 2
        bottom = height // 2
    elif shape == TokenShape.TRAPEZOID_1:
        if height > width:
            return None
        top = height - 1
        bottom = 0
    else:
        if height > width:
            return None
        top = 0
        bottom = height - 1

    even = []
    odd = []
    for i in range(bottom, 0, -1):
        for j in range(width - i):
            even.append(GridOffset(bottom - i, j + (((bottom & 1) + i + 1) >> 1)))
            odd.append(GridOffset(bottom - i, j + (((bottom & 1) + i) >> 1)))
    for i in range(top + 1):
        for j in range(width - i):
            even.append(GridOffset(bottom + i, j + (((bottom & 1) + i + 1) >> 1)))
            odd.append(GridOffset(bottom + i, j + (((bottom & 1) + i) >> 1)))

    # Walk the outline clockwise starting at the top-left of the top row
    points = []
    x = 0.5 * bottom
    y = 0.25
    for _ in range(width - bottom):
        points += [x, y]
        x += 0.5
        y -= 0.25
        points += [x, y]
        x += 0.5
        y += 0.25
    points += [x, y]
    for _ in range(bottom):
        y += 0.5
        points += [x, y]
        x += 0.5
        y += 0.25
        points += [x, y]
    y += 0.5
    for _ in range(top):
        points += [x, y]
        x -= 0.5
        y += 0.25
        points += [x, y]
        y += 0.5
    for _ in range(width - top):
        points += [x, y]
        x -= 0.5
        y += 0.25
        points += [x, y]
        x -= 0.5
        y -= 0.25
    points += [x, y]
    for _ in range(top):
        y -= 0.5
        points += [x, y]
        x -= 0.5
        y -= 0.25
        points += [x, y]
    y -= 0.5
    for _ in range(bottom):
        points += [x, y]
        x += 0.5
        y -= 0.25
        points += [x, y]
        y -= 0.5

    return HexagonalShape(
        even=tuple(even),
        odd=tuple(odd),
        points=tuple(points),
        center=polygon_centroid(points),
        anchor=Point(0.0, 0.5) if bottom % 2 else Point(0.5, 0.5)
    )


def _create_rectangle(width: float, height: float, shape: int) -> Optional[HexagonalShape]:
    """Row-based hexagonal rectangle."""
    if width < 1 or not _is_integer(height):
        return None
    if width == 1 and height > 1:
        return None
    if not _is_integer(width) and height == 1:
        return None
    height = int(height)

    even_rows = shape == TokenShape.RECTANGLE_1 or height == 1
    even = []
    odd = []
    for i in range(height):
        j0 = 0 if even_rows else (i + 1) & 1
        j1 = int(width + (i & 1) * 0.5) - ((i & 1) if even_rows else 0)
        for j in range(j0, j1):
            even.append(GridOffset(i, j + (i & 1)))
            odd.append(GridOffset(i, j))

    x = 0.0 if even_rows else 0.5
    y = 0.25
    points = [x, y]
    while x + 1 <= width:
        x += 0.5
        y -= 0.25
        points += [x, y]
        x += 0.5
        y += 0.25
        points += [x, y]
    if x != width:
        y += 0.5
        points += [x, y]
        x += 0.5
        y += 0.25
        points += [x, y]
    while y + 1.5 <= 0.75 * height:
        y += 0.5
        points += [x, y]
        x -= 0.5
        y += 0.25
        points += [x, y]
        y += 0.5
        points += [x, y]
        x += 0.5
        y += 0.25
        points += [x, y]
    if y + 0.75 < 0.75 * height:
        y += 0.5
        points += [x, y]
        x -= 0.5
        y += 0.25
        points += [x, y]
    y += 0.5
    points += [x, y]
    while x - 1 >= 0:
        x -= 0.5
        y += 0.25
        points += [x, y]
        x -= 0.5
        y -= 0.25
        points += [x, y]
    if x != 0:
        y -= 0.5
        points += [x, y]
        x -= 0.5
        y -= 0.25
        points += [x, y]
    while y - 1.5 > 0:
        y -= 0.5
        points += [x, y]
        x += 0.5
        y -= 0.25
        points += [x, y]
        y -= 0.5
        points += [x, y]
        x -= 0.5
        y -= 0.25
        points += [x, y]
    if y - 0.75 > 0:
        y -= 0.5
        points += [x, y]
        x += 0.5
        y -= 0.25
        points += [x, y]

    return HexagonalShape(
        even=tuple(even),
        odd=tuple(odd),
        points=tuple(points),
        center=Point(width / 2, (0.75 * math.floor(height) + 0.5 * (height % 1) + 0.25) / 2),
        anchor=Point(0.5, 0.5) if even_rows else Point(0.0, 0.5)
    )


@lru_cache(maxsize=None)
def get_hexagonal_offsets(width: float, height: float, shape: int, columns: bool) -> HexagonalOffsets:
    """
    Get the occupied offsets and the anchor of a token.

    Sizes without a hexagonal shape fall back to the closest hexagonal rectangle.

    Raises:
        ValueError: If not even the fallback rectangle exists for the size
    """
    data = get_hexagonal_shape(width, height, shape, columns)
    if data is not None:
        return HexagonalOffsets(even=data.even, odd=data.odd, anchor=data.anchor)

    fallback_width = width
    fallback_height = height
    if columns:
        fallback_height += 0.5
        fallback_width = js_round(fallback_width)
        if fallback_width == 1:
            fallback_height = math.floor(fallback_height)
        elif fallback_height == 1:
            fallback_height += 0.5
    else:
        fallback_width += 0.5
        fallback_height = js_round(fallback_height)
        if fallback_height == 1:
            fallback_width = math.floor(fallback_width)
        elif fallback_width == 1:
            fallback_width += 0.5

    data = get_hexagonal_shape(fallback_width, fallback_height, TokenShape.RECTANGLE_1, columns)
    if data is None:
        raise ValueError(f"No hexagonal footprint for token size {width}x{height}")
    logger.debug(f"Token size {width}x{height} uses the rectangular footprint "
                 f"{fallback_width}x{fallback_height}")
    return HexagonalOffsets(
        even=data.even,
        odd=data.odd,
        anchor=Point(data.anchor.x - 0.25, data.anchor.y - 0.25)
    )
