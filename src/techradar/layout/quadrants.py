"""
Quadrant sectors.

The radar is split into four quarter-planes addressed by display order::

    1 | 0
    --+--
    2 | 3

Angles are measured in screen coordinates (y down), so the top-right sector
spans (-pi/2, 0).
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence, Tuple
import math

from techradar.layout.primitives import Point
from techradar.model.radar import Quadrant


@dataclass(frozen=True)
class QuadrantSector:
    index: int              # position in RadarConfig.quadrants
    display_order: int
    name: str
    angle_min: float
    angle_max: float

    @property
    def mid_angle(self) -> float:
        return (self.angle_min + self.angle_max) / 2

    @property
    def direction(self) -> Tuple[int, int]:
        """Signs of (x, y) for points in this sector."""
        point = Point.from_polar(1.0, self.mid_angle)
        return (1 if point.x > 0 else -1, 1 if point.y > 0 else -1)


def sector_angles(display_order: int) -> Tuple[float, float]:
    """(angle_min, angle_max) for the sector at ``display_order``."""
    return -(display_order + 1) * math.pi / 2, -display_order * math.pi / 2


def build_sectors(quadrants: Sequence[Quadrant]) -> Tuple[QuadrantSector, ...]:
    """One sector per quadrant, sorted by display order."""
    sectors = []
    for index, quadrant in enumerate(quadrants):
        angle_min, angle_max = sector_angles(quadrant.display_order)
        sectors.append(QuadrantSector(index, quadrant.display_order, quadrant.name, angle_min, angle_max))
    return tuple(sorted(sectors, key=lambda s: s.display_order))
