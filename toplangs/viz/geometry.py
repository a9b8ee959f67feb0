"""
Shared 2D geometry for the circular layouts.

Angles are in degrees, measured clockwise from 3 o'clock because SVG's y
axis points down.
"""
import math
from typing import NamedTuple


class Point(NamedTuple):
    x: float
    y: float


def degrees_to_radians(angle_in_degrees: float) -> float:
    return angle_in_degrees * (math.pi / 180.0)


def polar_to_cartesian(
    center_x: float,
    center_y: float,
    radius: float,
    angle_in_degrees: float,
) -> Point:
    """Point on the circle (center, radius) at the given angle."""
    rads = degrees_to_radians(angle_in_degrees)
    return Point(
        x=center_x + radius * math.cos(rads),
        y=center_y + radius * math.sin(rads),
    )


def circle_length(radius: float) -> float:
    """Circumference of a circle."""
    return 2 * math.pi * radius
