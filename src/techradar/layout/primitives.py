"""
Geometric Primitives for the radar layout.

All coordinates are chart-local: the origin is the radar centre and ``y`` grows
downwards (screen convention), so angles run clockwise on screen.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import numpy as np
import math

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Point:
    """A point in the chart plane."""
    x: float
    y: float

    @classmethod
    def from_polar(cls, radius: float, angle: float) -> Point:
        return cls(radius * math.cos(angle), radius * math.sin(angle))

    @property
    def radius(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def angle(self) -> float:
        """Angle in (-pi, pi]."""
        return math.atan2(self.y, self.x)

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def translate(self, dx: float, dy: float) -> Point:
        return Point(self.x + dx, self.y + dy)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])


@dataclass(frozen=True)
class Wedge:
    """
    An annulus sector: everything between two radii and two angles.
    ``angle_min < angle_max``; the sweep goes from min to max.
    """
    inner_radius: float
    outer_radius: float
    angle_min: float
    angle_max: float

    @property
    def sweep(self) -> float:
        return self.angle_max - self.angle_min

    @property
    def area(self) -> float:
        return 0.5 * self.sweep * (self.outer_radius ** 2 - self.inner_radius ** 2)

    @property
    def mid_angle(self) -> float:
        return (self.angle_min + self.angle_max) / 2

    def normalized_angle(self, angle: float) -> float:
        """Shift ``angle`` by whole turns so it lands as close as possible to the sweep."""
        turns = round((self.mid_angle - angle) / (2 * math.pi))
        return angle + turns * 2 * math.pi

    def contains(self, point: Point, tolerance: float = 1e-9) -> bool:
        r = point.radius
        if r < self.inner_radius - tolerance or r > self.outer_radius + tolerance:
            return False
        t = self.normalized_angle(point.angle)
        return self.angle_min - tolerance <= t <= self.angle_max + tolerance

    def outline(self, resolution: int = 64) -> npt.NDArray[np.float64]:
        """
        Closed polygon approximating the wedge boundary: the outer arc from
        ``angle_min`` to ``angle_max``, then the inner arc back.
        Returns an (N, 2) array.
        """
        angles = np.linspace(self.angle_min, self.angle_max, resolution)
        outer = np.column_stack((self.outer_radius * np.cos(angles), self.outer_radius * np.sin(angles)))
        if self.inner_radius <= 0.0:
            return np.vstack((outer, [[0.0, 0.0]]))
        back = angles[::-1]
        inner = np.column_stack((self.inner_radius * np.cos(back), self.inner_radius * np.sin(back)))
        return np.vstack((outer, inner))

