"""
Radar Renderer
==============
Paints a ``Geometry`` onto a ``DrawingSurface`` and wires the interactions
between markers and legend rows.

Why is this file needed?
------------------------
1. Drawing order and keys: backgrounds first, then grid, labels, markers and
   legend. Every item gets a stable key (``wedge:<q>``, ``ring:<r>``,
   ``marker:<seq>``, ``legend:<seq>``, ``bubble:<seq>``, ...), so hosts and
   tests can address it.
2. Interaction state lives in one ``InteractionController`` per paint. A new
   paint clears the surface (dropping all items and bindings) and starts a
   fresh controller, so nothing from the previous picture keeps listening.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Set
import logging
import math

from techradar.layout.engine import Geometry, Placement
from techradar.layout.primitives import Point, Wedge
from techradar.model.radar import Entry, Movement
from techradar.view.surface import DrawingSurface, MarkerShape, Style, TextAnchor

logger = logging.getLogger(__name__)

LEGEND_GAP = 30
LEGEND_RING_GAP = 8


def marker_key(sequence: int) -> str:
    return f"marker:{sequence}"


def legend_key(sequence: int) -> str:
    return f"legend:{sequence}"


def bubble_key(sequence: int) -> str:
    return f"bubble:{sequence}"


def bubble_lines(entry: Entry) -> List[str]:
    """Tooltip text: the label, then the description when there is one."""
    lines = [entry.label]
    if entry.description:
        lines.append(entry.description)
    return lines


def marker_shape(entry: Entry) -> MarkerShape:
    if entry.is_new:
        return MarkerShape.STAR
    if entry.moved == Movement.UP:
        return MarkerShape.TRIANGLE_UP
    if entry.moved == Movement.DOWN:
        return MarkerShape.TRIANGLE_DOWN
    return MarkerShape.CIRCLE


class InteractionController:
    """
    Hover and pin state of one painted chart.

    Hovering a marker or its legend row highlights both and shows the entry's
    bubble; leaving hides the bubble and removes the highlight unless the entry
    is pinned. A click pins the entry, a second click unpins it, and clicking
    another entry moves the pin.
    """

    def __init__(self, surface: DrawingSurface):
        self.surface = surface
        self.hovered: Optional[int] = None
        self.pinned: Optional[int] = None
        self._keys: Dict[int, List[str]] = {}
        self._bubbles: Dict[int, str] = {}
        self._lit: Set[int] = set()
        self._shown: Optional[str] = None

    def bind(self, sequence: int, keys: List[str], bubble: Optional[str] = None) -> None:
        """
        Make every item in ``keys`` act for the entry numbered ``sequence``.
        ``bubble`` is the key of the entry's tooltip, shown while it is hovered.
        """
        self._keys[sequence] = list(keys)
        if bubble is not None:
            self._bubbles[sequence] = bubble
        for key in keys:
            self.surface.bind_hover(
                key,
                lambda s=sequence: self.enter(s),
                lambda s=sequence: self.leave(s),
            )
            self.surface.bind_click(key, lambda s=sequence: self.toggle_pin(s))

    def enter(self, sequence: int) -> None:
        self.hovered = sequence
        self._refresh()

    def leave(self, sequence: int) -> None:
        if self.hovered == sequence:
            self.hovered = None
        self._refresh()

    def toggle_pin(self, sequence: int) -> None:
        self.pinned = None if self.pinned == sequence else sequence
        self._refresh()

    @property
    def highlighted(self) -> Set[int]:
        return set(self._lit)

    def _refresh(self) -> None:
        wanted = {s for s in (self.hovered, self.pinned) if s in self._keys}
        for sequence in self._lit - wanted:
            self._apply(sequence, False)
        for sequence in wanted - self._lit:
            self._apply(sequence, True)
        self._lit = wanted

        bubble = self._bubbles.get(self.hovered) if self.hovered is not None else None
        if bubble != self._shown:
            if self._shown is not None:
                self.surface.set_visible(self._shown, False)
            if bubble is not None:
                self.surface.set_visible(bubble, True)
            self._shown = bubble

    def _apply(self, sequence: int, on: bool) -> None:
        for key in self._keys[sequence]:
            self.surface.set_highlighted(key, on)


class RadarRenderer:
    def __init__(self, surface: DrawingSurface):
        self.surface = surface

    def paint(self, geometry: Geometry) -> InteractionController:
        """Clear the surface and paint ``geometry`` on it."""
        options = geometry.options
        self.surface.clear()
        self.surface.set_canvas(options.width, options.height, options.colors.background)
        self.surface.set_highlight_color(options.colors.highlight)

        self._paint_grid(geometry)
        if options.print_layout:
            self._paint_headers(geometry)

        self._paint_markers(geometry)
        if options.print_layout:
            self._paint_legend(geometry)
        bubbles = self._paint_bubbles(geometry)

        controller = InteractionController(self.surface)
        for placement in geometry.placements:
            entry = geometry.config.entry_by_id(placement.entry_id)
            keys = [marker_key(placement.sequence)]
            if options.print_layout:
                keys.append(legend_key(placement.sequence))
            if entry.active and entry.link:
                for key in keys:
                    self.surface.set_link(key, entry.link, options.links_in_new_tabs)
            controller.bind(placement.sequence, keys, bubbles.get(placement.sequence))

        logger.debug(
            f"Painted '{geometry.config.title}': {len(geometry.placements)} markers, "
            f"{len(geometry.bands)} rings."
        )
        return controller

    # ------------------------------------------------------------------

    def _to_surface(self, geometry: Geometry, point: Point) -> Point:
        return point.translate(geometry.origin.x, geometry.origin.y)

    def _paint_grid(self, geometry: Geometry) -> None:
        options = geometry.options
        colors = options.colors
        origin = geometry.origin

        for sector in geometry.sectors:
            wedge = Wedge(0.0, geometry.outer_radius, sector.angle_min, sector.angle_max)
            outline = wedge.outline() + origin.to_array()
            self.surface.draw_wedge(
                f"wedge:{sector.display_order}",
                outline,
                Style(fill=colors.quadrant_fill, stroke=colors.grid, stroke_width=1.0),
            )

        for band in geometry.bands:
            self.surface.draw_ring(
                f"ring:{band.display_order}",
                origin,
                band.outer_radius,
                Style(stroke=colors.grid, stroke_width=2.0 if band.display_order == 0 else 1.0),
            )
            if options.print_layout:
                self.surface.draw_label(
                    f"ring-label:{band.display_order}",
                    Point(origin.x, origin.y - (band.inner_radius + band.outer_radius) / 2),
                    band.name.upper(),
                    Style(
                        font_family=options.font_family, font_size=12, bold=True,
                        text_color=band.color, opacity=0.35,
                    ),
                    TextAnchor.MIDDLE,
                )

        for sector in geometry.sectors:
            sx, sy = sector.direction
            radius = geometry.outer_radius
            position = Point(origin.x + sx * radius, origin.y + sy * (radius + 20))
            self.surface.draw_label(
                f"quadrant:{sector.display_order}",
                position,
                sector.name,
                Style(font_family=options.font_family, font_size=16, bold=True),
                TextAnchor.END if sx < 0 else TextAnchor.START,
            )

    def _paint_headers(self, geometry: Geometry) -> None:
        options = geometry.options
        config = geometry.config
        font = options.font_family
        if config.title:
            self.surface.draw_label(
                "title", Point(options.chart_padding / 2, 25), config.title,
                Style(font_family=font, font_size=30, bold=True),
            )
        if config.date:
            self.surface.draw_label(
                "date", Point(options.chart_padding / 2, 50), config.date,
                Style(font_family=font, font_size=14, text_color="#999"),
            )
        if options.footer:
            self.surface.draw_label(
                "footer", Point(options.chart_padding / 2, options.height - 20), options.footer,
                Style(font_family=font, font_size=10),
            )

    def _paint_markers(self, geometry: Geometry) -> None:
        options = geometry.options
        for placement in geometry.placements:
            entry = geometry.config.entry_by_id(placement.entry_id)
            self.surface.draw_marker(
                marker_key(placement.sequence),
                self._to_surface(geometry, placement.point),
                marker_shape(entry),
                options.marker_radius,
                Style(
                    fill=placement.color, font_family=options.font_family,
                    font_size=8, text_color="#fff",
                ),
                text=str(placement.sequence),
            )

    def _legend_origin(self, geometry: Geometry, display_order: int) -> Point:
        options = geometry.options
        origin = geometry.origin
        radius = geometry.outer_radius
        right = display_order in (0, 3)
        x = origin.x + radius + LEGEND_GAP if right else (
            origin.x - radius - LEGEND_GAP - 2 * options.legend_column_width
        )
        y = origin.y - radius if display_order in (0, 1) else origin.y + LEGEND_GAP
        return Point(x, y)

    def _paint_legend(self, geometry: Geometry) -> None:
        options = geometry.options
        font = options.font_family
        line = options.legend_line_height
        by_cell: Dict[tuple, List[Placement]] = {}
        for placement in geometry.placements:
            by_cell.setdefault((placement.quadrant, placement.ring), []).append(placement)

        rings_per_column = math.ceil(len(geometry.bands) / 2)
        for sector in geometry.sectors:
            anchor = self._legend_origin(geometry, sector.display_order)
            self.surface.draw_label(
                f"legend-quadrant:{sector.display_order}", anchor, sector.name,
                Style(font_family=font, font_size=18, bold=True),
            )
            column_y = [anchor.y + 2 * line, anchor.y + 2 * line]
            for position, band in enumerate(geometry.bands):
                column = 0 if position < rings_per_column else 1
                x = anchor.x + column * options.legend_column_width
                y = column_y[column]
                self.surface.draw_label(
                    f"legend-ring:{sector.display_order}:{band.display_order}", Point(x, y),
                    band.name, Style(font_family=font, font_size=12, bold=True, text_color=band.color),
                )
                y += line * 1.5
                for placement in by_cell.get((sector.index, band.index), []):
                    entry = geometry.config.entry_by_id(placement.entry_id)
                    self.surface.draw_label(
                        legend_key(placement.sequence), Point(x, y),
                        f"{placement.sequence}. {entry.label}",
                        Style(font_family=font, font_size=11,
                              text_color="#000" if entry.active else options.colors.inactive),
                    )
                    y += line
                column_y[column] = y + LEGEND_RING_GAP

    def _paint_bubbles(self, geometry: Geometry) -> Dict[int, str]:
        """Hidden tooltips, painted last so they sit above everything else."""
        options = geometry.options
        style = Style(
            fill=options.colors.highlight, opacity=0.8, font_family=options.font_family,
            font_size=10, text_color="#fff",
        )
        bubbles: Dict[int, str] = {}
        for placement in geometry.placements:
            entry = geometry.config.entry_by_id(placement.entry_id)
            # Inactive entries only explain themselves on the printable chart.
            if not (entry.active or options.print_layout):
                continue
            center = self._to_surface(geometry, placement.point)
            key = bubble_key(placement.sequence)
            self.surface.draw_bubble(
                key, Point(center.x, center.y - options.marker_radius), bubble_lines(entry), style
            )
            bubbles[placement.sequence] = key
        return bubbles
