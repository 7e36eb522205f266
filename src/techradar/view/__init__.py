"""
The VIEW layer paints layout geometry onto a host-owned drawing surface.
Only ``scene_surface`` depends on Qt; the rest runs headless.
"""
from techradar.view.chart import ChartHandle, create_chart, render
from techradar.view.recording import RecordingSurface
from techradar.view.surface import DrawingSurface, MarkerShape, Style, TextAnchor

__all__ = [
    "ChartHandle", "create_chart", "render",
    "RecordingSurface", "DrawingSurface", "MarkerShape", "Style", "TextAnchor",
]
