"""
Entry Segments
==============
A segment is the intersection of one quadrant sector and one ring band, shrunk
by the configured paddings so markers stay clear of the grid lines.

Why is this file needed?
------------------------
1. It owns the padding rules (radial inset, angular inset scaled by the ring
   centre radius) and the guards that keep thin rings from collapsing while
   every point stays inside its own band.
2. It is the only place that draws random points, so the sampling law
   (uniform over area) is defined once.
3. It answers the density question: how many entries fit before the clearance
   guarantee stops holding.
"""
from __future__ import annotations
from dataclasses import dataclass
import math
import sys

import numpy as np

from techradar.layout.primitives import Point, Wedge
from techradar.layout.quadrants import QuadrantSector
from techradar.layout.rings import RingBand

# Fraction of the segment area that clearance discs may cover before random
# placement is expected to run out of room.
PACKING_FRACTION = 0.2


@dataclass(frozen=True)
class Segment:
    sector: QuadrantSector
    band: RingBand
    wedge: Wedge

    @classmethod
    def create(
        cls,
        sector: QuadrantSector,
        band: RingBand,
        radial_padding: float,
        angular_padding: float,
    ) -> Segment:
        # Thin bands keep at least their middle half.
        radial_padding = min(radial_padding, band.thickness / 4)
        inner = band.inner_radius + radial_padding
        outer = band.outer_radius - radial_padding

        # Angular padding is given in px at the ring centre.
        centre = (inner + outer) / 2
        padding = angular_padding / max(centre, 1.0)
        padding = min(padding, max(0.0, (sector.angle_max - sector.angle_min) / 2 - 0.01))
        angle_min = sector.angle_min + padding
        angle_max = sector.angle_max - padding
        if angle_max <= angle_min:
            angle_min, angle_max = sector.angle_min, sector.angle_max

        return cls(sector, band, Wedge(inner, outer, angle_min, angle_max))

    @property
    def area(self) -> float:
        return self.wedge.area

    def capacity(self, clearance: float) -> int:
        """Entries the segment holds while the clearance guarantee still applies."""
        if clearance <= 0:
            return sys.maxsize
        return math.floor(PACKING_FRACTION * self.area / (math.pi * (clearance / 2) ** 2))

    def random_point(self, rng: np.random.Generator) -> Point:
        """Uniform sample over the segment area."""
        w = self.wedge
        u, v = rng.random(2)
        radius = math.sqrt(w.inner_radius ** 2 + u * (w.outer_radius ** 2 - w.inner_radius ** 2))
        angle = w.angle_min + v * w.sweep
        return Point.from_polar(radius, angle)

    def contains(self, point: Point) -> bool:
        return self.wedge.contains(point, tolerance=1e-6)
