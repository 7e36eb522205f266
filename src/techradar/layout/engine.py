"""
Layout Engine
=============
Turns a validated ``RadarConfig`` into a ``Geometry``: quadrant sectors, ring
bands, and one placement (point, sequence number, seed, colour) per entry.

Why is this file needed?
------------------------
1. Determinism: the same config always yields the same geometry. Every entry
   draws its candidates from its own generator seeded by its id, and entries
   are placed in a fixed order.
2. Collision avoidance: candidates closer than ``blip_clearance`` to a point
   already placed in the same quadrant are rejected. Retries are bounded, so
   layout always terminates, even when a segment is overfull.
3. Separation of concerns: nothing here draws. The renderer only reads the
   returned ``Geometry``.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import logging

import numpy as np

from techradar.layout.primitives import Point
from techradar.layout.quadrants import QuadrantSector, build_sectors
from techradar.layout.rings import RingBand, build_bands
from techradar.layout.rng import entry_seed, rng_for
from techradar.layout.segments import Segment
from techradar.model.errors import LayoutError
from techradar.model.options import DisplayOptions, resolve_display_options
from techradar.model.radar import Entry, EntryId, RadarConfig
from techradar.model.validation import validate_config

logger = logging.getLogger(__name__)

TITLE_HEIGHT = 60
FOOTER_HEIGHT = 40
MIN_BAND_THICKNESS = 1.0


@dataclass(frozen=True)
class Placement:
    entry_id: EntryId
    sequence: int           # 1-based legend number
    x: float
    y: float
    quadrant: int           # index into RadarConfig.quadrants
    ring: int               # index into RadarConfig.rings
    seed: int
    color: str

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class Geometry:
    """Everything the renderer needs. Coordinates are relative to ``origin``."""
    config: RadarConfig
    options: DisplayOptions
    origin: Point
    outer_radius: float
    sectors: Tuple[QuadrantSector, ...]     # by display order
    bands: Tuple[RingBand, ...]             # innermost first
    placements: Tuple[Placement, ...]       # by sequence number

    def placement_for(self, entry_id: EntryId) -> Optional[Placement]:
        wanted = str(entry_id)
        for placement in self.placements:
            if str(placement.entry_id) == wanted:
                return placement
        return None

    def placement_by_sequence(self, sequence: int) -> Optional[Placement]:
        if 1 <= sequence <= len(self.placements):
            return self.placements[sequence - 1]
        return None

    def sector_for(self, quadrant_index: int) -> QuadrantSector:
        return next(s for s in self.sectors if s.index == quadrant_index)

    def band_for(self, ring_index: int) -> RingBand:
        return next(b for b in self.bands if b.index == ring_index)


def header_heights(config: RadarConfig, options: DisplayOptions) -> Tuple[float, float]:
    """Vertical space reserved above and below the radar."""
    if not options.print_layout:
        return 0.0, 0.0
    return (TITLE_HEIGHT if config.title else 0.0), FOOTER_HEIGHT


def outer_radius_for(config: RadarConfig, options: DisplayOptions) -> float:
    title_h, footer_h = header_heights(config, options)
    return min(options.width, options.height - title_h - footer_h) / 2 - options.chart_padding


def sequence_order(config: RadarConfig) -> List[Entry]:
    """
    Entries in legend order: quadrant display order, then ring display order
    (inner to outer), then label (case-insensitive), then id.
    """
    quadrant_order = [q.display_order for q in config.quadrants]
    ring_order = [r.display_order for r in config.rings]
    return sorted(
        config.entries,
        key=lambda e: (quadrant_order[e.quadrant], ring_order[e.ring], e.label.casefold(), e.key),
    )


def _entry_color(entry: Entry, config: RadarConfig, options: DisplayOptions) -> str:
    if entry.active:
        return config.rings[entry.ring].color
    return options.colors.inactive


def layout(config: RadarConfig) -> Geometry:
    """
    Compute the geometry of ``config``.

    Raises:
        ConfigValidationError: the config breaks a data-model invariant.
        LayoutError: the chart has no rings or is too small for its rings.
    """
    validate_config(config)
    options = resolve_display_options(config.display_options)

    if not config.rings:
        raise LayoutError("Cannot lay out a radar without rings.")

    outer_radius = outer_radius_for(config, options)
    if outer_radius <= options.hub_radius:
        raise LayoutError(
            f"Chart is too small: outer radius {outer_radius:.1f} does not exceed "
            f"the hub radius {options.hub_radius:.1f}."
        )

    sectors = build_sectors(config.quadrants)
    bands = build_bands(config.rings, options.hub_radius, outer_radius)
    thinnest = min(bands, key=lambda b: b.thickness)
    if thinnest.thickness < MIN_BAND_THICKNESS:
        raise LayoutError(
            f"Ring '{thinnest.name}' is only {thinnest.thickness:.2f}px wide; "
            f"enlarge the chart or reduce the number of rings."
        )

    sectors_by_index = {s.index: s for s in sectors}
    bands_by_index = {b.index: b for b in bands}
    segments: Dict[Tuple[int, int], Segment] = {}
    placed: Dict[int, np.ndarray] = {s.index: np.empty((0, 2)) for s in sectors}
    clearance = options.blip_clearance

    placements = []
    for sequence, entry in enumerate(sequence_order(config), start=1):
        key = (entry.quadrant, entry.ring)
        segment = segments.get(key)
        if segment is None:
            segment = Segment.create(
                sectors_by_index[entry.quadrant],
                bands_by_index[entry.ring],
                options.segment_radial_padding,
                options.segment_angular_padding,
            )
            segments[key] = segment

        seed = entry_seed(entry.id, options.seed)
        point = _place(segment, rng_for(seed), placed[entry.quadrant], clearance,
                       options.max_placement_attempts, entry)
        placed[entry.quadrant] = np.vstack((placed[entry.quadrant], point.to_array()))

        placements.append(Placement(
            entry_id=entry.id,
            sequence=sequence,
            x=point.x,
            y=point.y,
            quadrant=entry.quadrant,
            ring=entry.ring,
            seed=seed,
            color=_entry_color(entry, config, options),
        ))

    title_h, footer_h = header_heights(config, options)
    origin = Point(options.width / 2, options.height / 2 + (title_h - footer_h) / 2)
    logger.debug(f"Laid out {len(placements)} entries in {len(bands)} rings (R={outer_radius:.1f}).")
    return Geometry(
        config=config,
        options=options,
        origin=origin,
        outer_radius=outer_radius,
        sectors=sectors,
        bands=bands,
        placements=tuple(placements),
    )


def _place(
    segment: Segment,
    rng: np.random.Generator,
    placed: np.ndarray,
    clearance: float,
    max_attempts: int,
    entry: Entry,
) -> Point:
    """Rejection-sample a point in ``segment`` at least ``clearance`` away from ``placed``."""
    candidate = segment.random_point(rng)
    if placed.size == 0 or clearance <= 0:
        return candidate
    for attempt in range(max_attempts):
        if attempt:
            candidate = segment.random_point(rng)
        distances = np.hypot(placed[:, 0] - candidate.x, placed[:, 1] - candidate.y)
        if distances.min() >= clearance:
            return candidate
    # The last candidate is accepted even though it is not clear.
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            f"No free spot for entry '{entry.label}' after {max_attempts} attempts; "
            f"segment holds about {segment.capacity(clearance)} entries at this clearance."
        )
    return candidate
