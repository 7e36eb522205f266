"""
Ring bands.

Band radii are area-balanced: each ring's share of the annulus between the hub
and the outer radius is proportional to its ``width``. With equal widths every
ring covers the same area, so outer rings are thinner than inner ones.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Tuple
import numpy as np
import math

from techradar.model.radar import Ring


@dataclass(frozen=True)
class RingBand:
    index: int              # position in RadarConfig.rings
    display_order: int
    name: str
    color: str
    inner_radius: float
    outer_radius: float

    @property
    def thickness(self) -> float:
        return self.outer_radius - self.inner_radius

    @property
    def area(self) -> float:
        return math.pi * (self.outer_radius ** 2 - self.inner_radius ** 2)


def ring_radii(widths: Sequence[float], hub_radius: float, outer_radius: float) -> List[float]:
    """
    Outer radius of each ring, innermost first.

    ``r_k = sqrt(hub^2 + (W_k / W) * (R^2 - hub^2))`` where ``W_k`` is the
    cumulative width up to and including ring ``k``.
    """
    weights = np.asarray(widths, dtype=float)
    if weights.size == 0:
        return []
    fractions = np.cumsum(weights) / weights.sum()
    radii = np.sqrt(hub_radius ** 2 + fractions * (outer_radius ** 2 - hub_radius ** 2))
    # Pin the last radius exactly; cumsum may drift by an ulp.
    radii[-1] = outer_radius
    return radii.tolist()


def build_bands(rings: Sequence[Ring], hub_radius: float, outer_radius: float) -> Tuple[RingBand, ...]:
    """One band per ring, sorted by display order (innermost first)."""
    ordered = sorted(enumerate(rings), key=lambda item: item[1].display_order)
    radii = ring_radii([ring.width for _, ring in ordered], hub_radius, outer_radius)
    bands = []
    inner = hub_radius
    for (index, ring), outer in zip(ordered, radii):
        bands.append(RingBand(index, ring.display_order, ring.name, ring.color, inner, outer))
        inner = outer
    return tuple(bands)
