# road_gen/domain/geometry.py
import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float  # world units, same frame as the terrain grid
    y: float


def to_point(p) -> Point:
    return p if isinstance(p, Point) else Point(float(p[0]), float(p[1]))


def end_point(start: Point, angle: float, length: float) -> Point:
    return Point(start.x + math.cos(angle) * length, start.y + math.sin(angle) * length)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def angle_between(a: float, b: float) -> float:
    """Absolute heading difference folded into [0, pi]."""
    diff = abs(a - b) % (2 * math.pi)  # headings are not wrapped by the goal rules
    return min(diff, 2 * math.pi - diff)


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle with half-open containment [x, x+w) x [y, y+h)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def contains(self, p: Point) -> bool:
        return self.x <= p.x < self.max_x and self.y <= p.y < self.max_y
