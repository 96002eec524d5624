"""Geometry utility functions."""
from typing import Tuple
import math

Point = Tuple[float, float]


def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points."""
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    return math.sqrt(dx * dx + dy * dy)


def angle_to(start: Point, end: Point) -> float:
    """Heading in radians from start to end."""
    return math.atan2(end[1] - start[1], end[0] - start[0])


def perpendicular_offset(angle: float, offset: float) -> Point:
    """Offset vector perpendicular to a segment heading.

    Args:
        angle: Heading of the segment in radians
        offset: Signed length of the offset

    Returns:
        (dx, dy) to add to both segment endpoints
    """
    return (math.cos(angle + math.pi / 2) * offset,
            math.sin(angle + math.pi / 2) * offset)


def pointer_displacement(point: Point, pointer: Point,
                         radius: float, force: float) -> Point:
    """Push a point away from the pointer.

    The displacement grows linearly from 0 at ``radius`` to ``force`` at the
    pointer itself. A point sitting exactly on the pointer has no direction
    and is left alone.

    Args:
        point: The point to displace
        pointer: Current pointer position
        radius: Radius of influence
        force: Maximum displacement in pixels

    Returns:
        The displaced point
    """
    dx = point[0] - pointer[0]
    dy = point[1] - pointer[1]
    dist = math.sqrt(dx * dx + dy * dy)
    if dist == 0 or dist >= radius:
        return point
    strength = (radius - dist) / radius * force
    return (point[0] + dx / dist * strength,
            point[1] + dy / dist * strength)


def width_ramp(progress: float, knee: float, knee_share: float) -> float:
    """Piecewise linear width profile along a crack.

    The first ``knee`` of the path covers ``knee_share`` of the width growth,
    the rest of the path covers the remainder.

    Args:
        progress: Position along the path in [0, 1)
        knee: Fraction of the path before the knee
        knee_share: Fraction of the width growth reached at the knee

    Returns:
        Width growth fraction in [0, 1]
    """
    if progress < knee:
        return progress / knee * knee_share
    return knee_share + (progress - knee) / (1 - knee) * (1 - knee_share)


def out_of_bounds(x: float, y: float, width: float, height: float, margin: float) -> bool:
    """Check if a point lies outside the canvas grown by ``margin`` on every side."""
    return (y > height * (1 + margin) or y < -height * margin or
            x < -width * margin or x > width * (1 + margin))
