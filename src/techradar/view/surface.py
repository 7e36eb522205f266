"""
Drawing Surface Interface
=========================
The renderer never talks to a toolkit directly. It paints through the small
capability interface below, which a host implements on top of whatever it
draws with (a ``QGraphicsScene``, an SVG writer, a recorder in tests).

Every drawn element carries a unique string key. Keys are how the renderer
binds interactions and toggles highlight state after painting.

Coordinates handed to a surface are absolute surface coordinates (the layout's
chart-local coordinates already shifted by the radar origin).
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Optional, Sequence, TYPE_CHECKING
import numpy as np

from techradar.layout.primitives import Point

if TYPE_CHECKING:
    import numpy.typing as npt

Callback = Callable[[], None]


class MarkerShape(StrEnum):
    CIRCLE = "circle"
    TRIANGLE_UP = "triangle-up"
    TRIANGLE_DOWN = "triangle-down"
    STAR = "star"


class TextAnchor(StrEnum):
    START = "start"
    MIDDLE = "middle"
    END = "end"


@dataclass(frozen=True)
class Style:
    """Paint attributes. ``None`` means "do not paint" for fill and stroke."""
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 1.0
    opacity: float = 1.0
    font_family: Optional[str] = None
    font_size: float = 12.0
    bold: bool = False
    text_color: str = "#000"


def marker_polygon(shape: MarkerShape, size: float) -> npt.NDArray[np.float64]:
    """
    Vertices (N, 2) of a polygonal marker centred on the origin, screen
    orientation (y down). Circles have no polygon; returns an empty array.
    """
    if shape == MarkerShape.CIRCLE:
        return np.empty((0, 2))
    if shape == MarkerShape.STAR:
        # Five outer tips alternating with five inner corners, first tip up.
        angles = -np.pi / 2 + np.arange(10) * np.pi / 5
        radii = np.where(np.arange(10) % 2 == 0, size * 1.4, size * 0.6)
        return np.column_stack((radii * np.cos(angles), radii * np.sin(angles)))
    tip = -1.0 if shape == MarkerShape.TRIANGLE_UP else 1.0
    return np.array([
        [0.0, tip * size * 1.3],
        [-size * 1.1, -tip * size * 0.8],
        [size * 1.1, -tip * size * 0.8],
    ])


class DrawingSurface(ABC):
    """Capability interface the renderer paints through."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every drawn item and every interaction binding."""

    def set_canvas(self, width: float, height: float, background: str) -> None:
        """Size and background of the drawing area. Optional for surfaces."""

    def set_highlight_color(self, color: str) -> None:
        """Colour used by ``set_highlighted``. Optional for surfaces."""

    @abstractmethod
    def draw_wedge(self, key: str, outline: npt.NDArray[np.float64], style: Style) -> None:
        """Filled closed polygon (an (N, 2) array of vertices)."""

    @abstractmethod
    def draw_ring(self, key: str, center: Point, radius: float, style: Style) -> None:
        """Circle outline."""

    @abstractmethod
    def draw_marker(
        self,
        key: str,
        center: Point,
        shape: MarkerShape,
        size: float,
        style: Style,
        text: Optional[str] = None,
    ) -> None:
        """Entry marker, optionally with a short text (the sequence number) on top."""

    @abstractmethod
    def draw_label(
        self,
        key: str,
        position: Point,
        text: str,
        style: Style,
        anchor: TextAnchor = TextAnchor.START,
    ) -> None:
        """Single line of text, vertically centred on ``position``."""

    @abstractmethod
    def draw_bubble(self, key: str, anchor: Point, lines: Sequence[str], style: Style) -> None:
        """
        Tooltip bubble pointing down at ``anchor``. Bubbles start hidden and
        never take pointer events; ``set_visible`` shows them.
        """

    @abstractmethod
    def set_visible(self, key: str, visible: bool) -> None:
        ...

    def set_link(self, key: str, url: str, new_tab: bool) -> None:
        """Make the item open ``url`` when activated. Optional for surfaces."""

    @abstractmethod
    def bind_hover(self, key: str, on_enter: Callback, on_leave: Callback) -> None:
        ...

    @abstractmethod
    def bind_click(self, key: str, on_click: Callback) -> None:
        ...

    @abstractmethod
    def set_highlighted(self, key: str, highlighted: bool) -> None:
        ...
