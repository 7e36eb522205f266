"""
Display Options
===============
Resolves the free-form ``display_options`` object of a radar config into a
typed ``DisplayOptions`` instance.

The raw object is kept verbatim inside ``RadarConfig`` (unknown keys survive
export/import); only the layout engine and the renderer look at the resolved
form. Merging follows one rule everywhere: objects merge recursively, arrays
and scalars are replaced.
"""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from techradar.model.errors import ConfigValidationError
from techradar.model.radar import thaw


DEFAULT_FOOTER = "▲ moved up     ▼ moved down     ★ new     ⬤ no change"

DEFAULT_DISPLAY_OPTIONS: Dict[str, Any] = {
    "width": 1450,
    "height": 1000,
    "chart_padding": 60,
    "hub_radius": 30,
    "segment_radial_padding": 16,
    "segment_angular_padding": 12,
    "blip_clearance": 24,
    "max_placement_attempts": 200,
    "marker_radius": 9,
    "seed": 42,
    "print_layout": True,
    "links_in_new_tabs": True,
    "font_family": "Arial, Helvetica",
    "footer": DEFAULT_FOOTER,
    "legend_column_width": 140,
    "legend_line_height": 14,
    "colors": {
        "background": "#fff",
        "grid": "#dddde0",
        "inactive": "#ddd",
        "quadrant_fill": "#f4f4f6",
        "highlight": "#333",
    },
}


@dataclass(frozen=True)
class Colors:
    background: str
    grid: str
    inactive: str
    quadrant_fill: str
    highlight: str


@dataclass(frozen=True)
class DisplayOptions:
    width: float
    height: float
    chart_padding: float
    hub_radius: float
    segment_radial_padding: float
    segment_angular_padding: float
    blip_clearance: float
    max_placement_attempts: int
    marker_radius: float
    seed: int
    print_layout: bool
    links_in_new_tabs: bool
    font_family: str
    footer: str
    legend_column_width: float
    legend_line_height: float
    colors: Colors


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a new dict with ``override`` merged over ``base``.
    Nested mappings merge key by key; every other value (lists included) replaces.
    """
    merged: Dict[str, Any] = thaw(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = thaw(value)
    return merged


_INT_FIELDS = ("max_placement_attempts", "seed")
_FLOAT_FIELDS = (
    "width", "height", "chart_padding", "hub_radius", "segment_radial_padding",
    "segment_angular_padding", "blip_clearance", "marker_radius",
    "legend_column_width", "legend_line_height",
)
_BOOL_FIELDS = ("print_layout", "links_in_new_tabs")
_STR_FIELDS = ("font_family", "footer")


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def resolve_display_options(raw: Mapping[str, Any] | None = None) -> DisplayOptions:
    """
    Apply defaults to a raw ``display_options`` object and type-check it.

    Raises:
        ConfigValidationError: if a known option has the wrong type or sign.
    """
    if raw is not None and not isinstance(raw, Mapping):
        raise ConfigValidationError(
            "displayOptions must be an object", field="displayOptions", value=raw
        )
    merged = deep_merge(DEFAULT_DISPLAY_OPTIONS, raw or {})

    for name in _FLOAT_FIELDS:
        value = merged[name]
        if not _is_number(value) or not math.isfinite(value) or value < 0:
            raise ConfigValidationError(
                f"displayOptions.{name} must be a finite non-negative number (found: {value!r})",
                field=f"displayOptions.{name}", value=value,
            )
    for name in _INT_FIELDS:
        value = merged[name]
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigValidationError(
                f"displayOptions.{name} must be an integer (found: {value!r})",
                field=f"displayOptions.{name}", value=value,
            )
    if merged["max_placement_attempts"] < 1:
        raise ConfigValidationError(
            "displayOptions.max_placement_attempts must be at least 1",
            field="displayOptions.max_placement_attempts", value=merged["max_placement_attempts"],
        )
    for name in _BOOL_FIELDS:
        if not isinstance(merged[name], bool):
            raise ConfigValidationError(
                f"displayOptions.{name} must be a boolean (found: {merged[name]!r})",
                field=f"displayOptions.{name}", value=merged[name],
            )
    for name in _STR_FIELDS:
        if not isinstance(merged[name], str):
            raise ConfigValidationError(
                f"displayOptions.{name} must be a string (found: {merged[name]!r})",
                field=f"displayOptions.{name}", value=merged[name],
            )

    colors = merged["colors"]
    if not isinstance(colors, Mapping):
        raise ConfigValidationError(
            "displayOptions.colors must be an object", field="displayOptions.colors", value=colors
        )
    for name in DEFAULT_DISPLAY_OPTIONS["colors"]:
        if not isinstance(colors[name], str):
            raise ConfigValidationError(
                f"displayOptions.colors.{name} must be a colour string (found: {colors[name]!r})",
                field=f"displayOptions.colors.{name}", value=colors[name],
            )

    return DisplayOptions(
        width=float(merged["width"]),
        height=float(merged["height"]),
        chart_padding=float(merged["chart_padding"]),
        hub_radius=float(merged["hub_radius"]),
        segment_radial_padding=float(merged["segment_radial_padding"]),
        segment_angular_padding=float(merged["segment_angular_padding"]),
        blip_clearance=float(merged["blip_clearance"]),
        max_placement_attempts=merged["max_placement_attempts"],
        marker_radius=float(merged["marker_radius"]),
        seed=merged["seed"],
        print_layout=merged["print_layout"],
        links_in_new_tabs=merged["links_in_new_tabs"],
        font_family=merged["font_family"],
        footer=merged["footer"],
        legend_column_width=float(merged["legend_column_width"]),
        legend_line_height=float(merged["legend_line_height"]),
        colors=Colors(**{name: colors[name] for name in DEFAULT_DISPLAY_OPTIONS["colors"]}),
    )
