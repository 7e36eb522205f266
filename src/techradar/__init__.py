"""
techradar: a quadrant/ring technology radar chart.

Typical use::

    from techradar import create_chart, import_config
    from techradar.view.scene_surface import SceneSurface

    chart = create_chart(import_config(text), SceneSurface())
"""
from techradar.layout.engine import Geometry, layout
from techradar.model.errors import (
    ConfigError, ConfigValidationError, LayoutError, ParseError, RadarError
)
from techradar.model.json_io import export_config, import_config, merge_configs
from techradar.model.radar import Entry, Movement, Quadrant, RadarConfig, Ring
from techradar.view.chart import ChartHandle, create_chart, render

__version__ = "0.1.0"

__all__ = [
    "Entry", "Movement", "Quadrant", "RadarConfig", "Ring",
    "Geometry", "layout",
    "ChartHandle", "create_chart", "render",
    "export_config", "import_config", "merge_configs",
    "RadarError", "ConfigError", "ConfigValidationError", "ParseError", "LayoutError",
]
