"""
Chart Handle
============
The object a host keeps after rendering a radar. It is the whole surface the
toolbar (or any other host code) talks to: read the current config, render a
new one, reset to the original, and reach the JSON exchange helpers.
"""
from __future__ import annotations
from typing import Optional
import logging

from techradar.layout.engine import Geometry, layout
from techradar.model import json_io
from techradar.model.radar import RadarConfig
from techradar.view.renderer import InteractionController, RadarRenderer
from techradar.view.surface import DrawingSurface

logger = logging.getLogger(__name__)


class ChartHandle:
    """
    Live chart bound to one host surface.

    ``render`` lays out the new config before touching the surface, so a config
    that fails validation or layout leaves the previous picture (and
    ``get_config()``) unchanged.
    """

    # Exchange helpers: import_config, export_config, merge_configs, ...
    json_io = json_io

    def __init__(self, surface: DrawingSurface, initial_config: RadarConfig):
        self.surface = surface
        self._renderer = RadarRenderer(surface)
        self._initial_config = initial_config
        self._geometry: Optional[Geometry] = None
        self._interactions: Optional[InteractionController] = None

    @property
    def initial_config(self) -> RadarConfig:
        return self._initial_config

    @property
    def geometry(self) -> Optional[Geometry]:
        return self._geometry

    @property
    def pinned(self) -> Optional[int]:
        """Sequence number of the pinned entry, if any."""
        return self._interactions.pinned if self._interactions else None

    def get_config(self) -> Optional[RadarConfig]:
        return self._geometry.config if self._geometry else None

    def render(self, config: RadarConfig) -> ChartHandle:
        """
        Validate, lay out and paint ``config``.

        Raises:
            ConfigValidationError: invalid config (nothing is repainted).
            LayoutError: unsatisfiable geometry (nothing is repainted).
        """
        geometry = layout(config)
        self.paint(geometry)
        return self

    def paint(self, geometry: Geometry) -> ChartHandle:
        """Paint an already computed geometry, replacing the current picture."""
        self._interactions = self._renderer.paint(geometry)
        self._geometry = geometry
        logger.info(
            f"Rendered '{geometry.config.title}' with {len(geometry.placements)} entries."
        )
        return self

    def reset(self) -> ChartHandle:
        """Re-render the config the chart was created with."""
        logger.info("Resetting chart to its initial config.")
        return self.render(self._initial_config)

    def highlight(self, sequence: Optional[int]) -> None:
        """Pin the entry numbered ``sequence`` (``None`` clears the pin)."""
        if self._interactions is None:
            return
        if sequence is None:
            if self._interactions.pinned is not None:
                self._interactions.toggle_pin(self._interactions.pinned)
        elif self._interactions.pinned != sequence:
            self._interactions.toggle_pin(sequence)


def create_chart(config: RadarConfig, surface: DrawingSurface) -> ChartHandle:
    """Render ``config`` onto ``surface`` and return the live handle."""
    return ChartHandle(surface, config).render(config)


def render(geometry: Geometry, surface: DrawingSurface) -> ChartHandle:
    """Paint a computed ``geometry`` onto ``surface`` and return the live handle."""
    return ChartHandle(surface, geometry.config).paint(geometry)
