"""Cap: a circular region of the unit sphere.

Caps are immutable. Movers keep old caps around as tail snapshots, so
growth and movement always build a new Cap instead of editing one.
"""

import math
from dataclasses import dataclass

from .geo import Point, angular_distance

FULL_SPHERE_AREA = 4 * math.pi
FULL_SPHERE_RADIUS = math.pi


@dataclass(frozen=True)
class Cap:
    """Center unit vector plus angular radius in radians."""
    center: Point
    radius: float = 0.0

    def __post_init__(self):
        if self.radius < 0:
            raise ValueError(f"cap radius must be >= 0, got {self.radius}")
        if self.radius > FULL_SPHERE_RADIUS:
            object.__setattr__(self, "radius", FULL_SPHERE_RADIUS)

    @classmethod
    def from_area(cls, center: Point, area: float) -> "Cap":
        """Cap around center covering area steradians."""
        area = max(0.0, min(FULL_SPHERE_AREA, area))
        cos_r = max(-1.0, min(1.0, 1.0 - area / (2 * math.pi)))
        return cls(center, math.acos(cos_r))

    def area(self) -> float:
        """Solid angle in steradians, 0 to 4*pi."""
        return 2 * math.pi * (1.0 - math.cos(self.radius))

    def contains(self, point: Point) -> bool:
        """Closed containment: a point exactly on the rim is inside."""
        return angular_distance(self.center, point) <= self.radius

    def intersects(self, other: "Cap") -> bool:
        return angular_distance(self.center, other.center) <= self.radius + other.radius

    def expanded(self, delta: float) -> "Cap":
        """New cap with radius grown by delta, capped at the whole sphere."""
        return Cap(self.center, max(0.0, min(FULL_SPHERE_RADIUS, self.radius + delta)))

    def moved(self, center: Point) -> "Cap":
        """Same radius, new center."""
        return Cap(center, self.radius)
