# src/utils/geometry.py
"""Planar geometry primitives shared by the grid systems and polygon logic."""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from src.abstractions.types import Point


@dataclass(frozen=True)
class LineIntersection:
    """Intersection point and the parameters along both lines."""
    x: float
    y: float
    t0: float
    t1: Optional[float] = None


@dataclass(frozen=True)
class CircleIntersection:
    """Classification of a segment against a circle."""
    a_inside: bool
    b_inside: bool
    contained: bool
    outside: bool
    tangent: bool
    intersections: List[Point] = field(default_factory=list)


def almost_equal(a: float, b: float, epsilon: float = 1e-8) -> bool:
    """Test for near-equivalence of two numbers."""
    return abs(a - b) < epsilon


def js_round(value: float) -> int:
    """Round half towards positive infinity."""
    return math.floor(value + 0.5)


def mix(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return a + (b - a) * t


def clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


def normalize_radians(radians: float) -> float:
    """Bound an angle to the range [-pi, pi)."""
    pi2 = 2 * math.pi
    return radians - pi2 * math.floor((radians + math.pi) / pi2)


def orient2d_fast(a, b, c) -> float:
    """
    Orientation of point c with respect to the line through a and b.

    Positive if c is counter-clockwise of AB in canvas coordinates (y pointing
    down), negative if clockwise and zero if collinear. Not robust for nearly
    collinear inputs.
    """
    return (a.y - c.y) * (b.x - c.x) - (a.x - c.x) * (b.y - c.y)


def line_segment_intersects(a, b, c, d) -> bool:
    """
    Test whether segment AB crosses segment CD.

    Collinear segments never intersect.
    """
    xa = orient2d_fast(a, b, c)
    xb = orient2d_fast(a, b, d)
    if not xa and not xb:
        return False
    xab = (xa * xb) <= 0
    xcd = (orient2d_fast(c, d, a) * orient2d_fast(c, d, b)) <= 0
    return xab and xcd


def line_line_intersection(a, b, c, d, t1: bool = False) -> Optional[LineIntersection]:
    """
    Intersection of the infinite lines AB and CD.

    Args:
        a: First point of line AB
        b: Second point of line AB
        c: First point of line CD
        d: Second point of line CD
        t1: Also compute the parameter along CD

    Returns:
        The intersection, or None if a line has zero length or the lines are parallel
    """
    if (a.x == b.x and a.y == b.y) or (c.x == d.x and c.y == d.y):
        return None

    dnm = (d.y - c.y) * (b.x - a.x) - (d.x - c.x) * (b.y - a.y)
    if dnm == 0:
        return None

    t0 = ((d.x - c.x) * (a.y - c.y) - (d.y - c.y) * (a.x - c.x)) / dnm
    t1_value = ((b.x - a.x) * (a.y - c.y) - (b.y - a.y) * (a.x - c.x)) / dnm if t1 else None
    return LineIntersection(
        x=a.x + t0 * (b.x - a.x),
        y=a.y + t0 * (b.y - a.y),
        t0=t0,
        t1=t1_value
    )


def line_segment_intersection(a, b, c, d, epsilon: float = 1e-8) -> Optional[LineIntersection]:
    """
    Intersection of the segments AB and CD.

    Returns:
        The intersection with both parameters clamped to [0, 1], or None
    """
    if (a.x == b.x and a.y == b.y) or (c.x == d.x and c.y == d.y):
        return None

    dnm = (d.y - c.y) * (b.x - a.x) - (d.x - c.x) * (b.y - a.y)
    if dnm == 0:
        return None

    t0 = ((d.x - c.x) * (a.y - c.y) - (d.y - c.y) * (a.x - c.x)) / dnm
    if not (-epsilon <= t0 <= 1 + epsilon):
        return None

    t1 = ((b.x - a.x) * (a.y - c.y) - (b.y - a.y) * (a.x - c.x)) / dnm
    if not (-epsilon <= t1 <= 1 + epsilon):
        return None

    return LineIntersection(
        x=a.x + t0 * (b.x - a.x),
        y=a.y + t0 * (b.y - a.y),
        t0=clamp(t0, 0, 1),
        t1=clamp(t1, 0, 1)
    )


def line_circle_intersection(a, b, center, radius: float, epsilon: float = 1e-8) -> CircleIntersection:
    """
    Classify segment AB against a circle.

    Args:
        a: Segment start
        b: Segment end
        center: Circle center
        radius: Circle radius
        epsilon: Tolerance of the containment and intersection tests

    Returns:
        Which endpoints are inside and where the segment crosses the circle
    """
    r2 = radius ** 2
    a_inside = (a.x - center.x) ** 2 + (a.y - center.y) ** 2 < r2 - epsilon
    b_inside = (b.x - center.x) ** 2 + (b.y - center.y) ** 2 < r2 - epsilon

    contained = a_inside and b_inside
    intersections = [] if contained else quadratic_intersection(a, b, center, radius, epsilon)

    return CircleIntersection(
        a_inside=a_inside,
        b_inside=b_inside,
        contained=contained,
        outside=not contained and not intersections,
        tangent=not a_inside and not b_inside and len(intersections) == 1,
        intersections=intersections
    )


def closest_point_to_segment(c, a, b):
    """
    Closest point to c on segment AB.

    Raises:
        ValueError: If AB has zero length
    """
    dx = b.x - a.x
    dy = b.y - a.y
    if dx == 0 and dy == 0:
        raise ValueError("Zero-length segment AB not supported")
    u = ((c.x - a.x) * dx + (c.y - a.y) * dy) / (dx * dx + dy * dy)
    if u < 0:
        return a
    if u > 1:
        return b
    return Point(a.x + u * dx, a.y + u * dy)


def quadratic_intersection(p0, p1, center, radius: float, epsilon: float = 0) -> List[Point]:
    """
    Points where segment P0P1 crosses a circle, ordered from P0 to P1.

    A discriminant that is almost zero is treated as a single tangent point.
    """
    dx = p1.x - p0.x
    dy = p1.y - p0.y

    a = dx ** 2 + dy ** 2
    if a == 0:
        return []
    b = 2 * dx * (p0.x - center.x) + 2 * dy * (p0.y - center.y)
    c = (p0.x - center.x) ** 2 + (p0.y - center.y) ** 2 - radius ** 2

    disc2 = b ** 2 - 4 * a * c
    if almost_equal(disc2, 0):
        disc2 = 0
    elif disc2 < 0:
        return []

    disc = math.sqrt(disc2)
    intersections = []
    t1 = (-b - disc) / (2 * a)
    if -epsilon <= t1 <= 1 + epsilon:
        intersections.append(Point(p0.x + dx * t1, p0.y + dy * t1))
    if not disc2:
        return intersections

    t2 = (-b + disc) / (2 * a)
    if -epsilon <= t2 <= 1 + epsilon:
        intersections.append(Point(p0.x + dx * t2, p0.y + dy * t2))
    return intersections


def _pairs(points: Sequence) -> List[tuple]:
    """Coordinate pairs of a flat number sequence or a sequence of points."""
    if isinstance(points[0], (int, float)):
        return [(points[i], points[i + 1]) for i in range(0, len(points), 2)]
    return [(p.x, p.y) for p in points]


def polygon_centroid(points: Sequence[Union[float, Point]]) -> Point:
    """
    Centroid of a polygon.

    Args:
        points: Flat [x0, y0, x1, y1, ...] coordinates or a list of points

    Returns:
        The area-weighted centroid, the mean of the vertices for a polygon
        without area, or the origin for an empty polygon
    """
    if len(points) == 0:
        return Point(0.0, 0.0)
    pairs = _pairs(points)
    x = y = a = 0.0
    x0, y0 = pairs[-1]
    for x1, y1 in pairs:
        z = x0 * y1 - x1 * y0
        x += (x0 + x1) * z
        y += (y0 + y1) * z
        a += z
        x0, y0 = x1, y1
    if a == 0:
        n = len(pairs)
        return Point(sum(px for px, _ in pairs) / n, sum(py for _, py in pairs) / n)
    a *= 3
    return Point(x / a, y / a)


def path_circle_intersects(points: Sequence[Union[float, Point]], close: bool, center, radius: float) -> bool:
    """
    Test whether a circle touches an open or closed path.

    Args:
        points: Flat coordinates or a list of points
        close: Whether the last point connects back to the first
        center: Circle center
        radius: Circle radius
    """
    if len(points) == 0:
        return False
    pairs = _pairs(points)
    rr = radius * radius
    if close:
        x0, y0 = pairs[-1]
        edges = pairs
    else:
        x0, y0 = pairs[0]
        edges = pairs[1:]

    for x1, y1 in edges:
        dx = center.x - x0
        dy = center.y - y0
        nx = x1 - x0
        ny = y1 - y0
        nn = nx * nx + ny * ny
        t = clamp((dx * nx + dy * ny) / nn, 0, 1) if nn else 0
        dx = t * nx - dx
        dy = t * ny - dy
        if dx * dx + dy * dy <= rr:
            return True
        x0, y0 = x1, y1
    return False


def circle_circle_intersects(x0: float, y0: float, r0: float, x1: float, y1: float, r1: float) -> bool:
    """Test whether two circles intersect."""
    return math.hypot(x0 - x1, y0 - y1) <= r0 + r1
