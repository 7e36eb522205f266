"""
Recording Surface
=================
A headless ``DrawingSurface`` that keeps every call in memory.

Used by the tests and by anything that wants to inspect what the renderer
would paint without a GUI. It can also simulate pointer interaction
(``hover``, ``leave``, ``click``) through the bindings the renderer made.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from techradar.layout.primitives import Point
from techradar.view.surface import Callback, DrawingSurface, MarkerShape, Style, TextAnchor


@dataclass
class DrawCall:
    kind: str
    key: str
    params: Dict[str, Any] = field(default_factory=dict)


class RecordingSurface(DrawingSurface):
    def __init__(self) -> None:
        self.items: Dict[str, DrawCall] = {}
        self.hover_bindings: Dict[str, Tuple[Callback, Callback]] = {}
        self.click_bindings: Dict[str, Callback] = {}
        self.highlighted: Set[str] = set()
        self.visible: Set[str] = set()
        self.links: Dict[str, Tuple[str, bool]] = {}
        self.canvas: Optional[Tuple[float, float, str]] = None
        self.clear_count = 0

    # --- DrawingSurface -------------------------------------------------

    def clear(self) -> None:
        self.items.clear()
        self.hover_bindings.clear()
        self.click_bindings.clear()
        self.highlighted.clear()
        self.visible.clear()
        self.links.clear()
        self.canvas = None
        self.clear_count += 1

    def set_canvas(self, width: float, height: float, background: str) -> None:
        self.canvas = (width, height, background)

    def draw_wedge(self, key, outline, style: Style) -> None:
        self._add(DrawCall("wedge", key, {"outline": outline, "style": style}))

    def draw_ring(self, key: str, center: Point, radius: float, style: Style) -> None:
        self._add(DrawCall("ring", key, {"center": center, "radius": radius, "style": style}))

    def draw_marker(
        self,
        key: str,
        center: Point,
        shape: MarkerShape,
        size: float,
        style: Style,
        text: Optional[str] = None,
    ) -> None:
        self._add(DrawCall("marker", key, {
            "center": center, "shape": shape, "size": size, "style": style, "text": text,
        }))

    def draw_label(
        self,
        key: str,
        position: Point,
        text: str,
        style: Style,
        anchor: TextAnchor = TextAnchor.START,
    ) -> None:
        self._add(DrawCall("label", key, {
            "position": position, "text": text, "style": style, "anchor": anchor,
        }))

    def draw_bubble(self, key: str, anchor: Point, lines: Sequence[str], style: Style) -> None:
        self._add(DrawCall("bubble", key, {"anchor": anchor, "lines": list(lines), "style": style}))

    def set_visible(self, key: str, visible: bool) -> None:
        self._require(key)
        if visible:
            self.visible.add(key)
        else:
            self.visible.discard(key)

    def set_link(self, key: str, url: str, new_tab: bool) -> None:
        self._require(key)
        self.links[key] = (url, new_tab)

    def bind_hover(self, key: str, on_enter: Callback, on_leave: Callback) -> None:
        self._require(key)
        self.hover_bindings[key] = (on_enter, on_leave)

    def bind_click(self, key: str, on_click: Callback) -> None:
        self._require(key)
        self.click_bindings[key] = on_click

    def set_highlighted(self, key: str, highlighted: bool) -> None:
        self._require(key)
        if highlighted:
            self.highlighted.add(key)
        else:
            self.highlighted.discard(key)

    # --- Inspection & simulation ------------------------------------------

    def keys(self, kind: Optional[str] = None) -> List[str]:
        return [key for key, call in self.items.items() if kind is None or call.kind == kind]

    def hover(self, key: str) -> None:
        self.hover_bindings[key][0]()

    def leave(self, key: str) -> None:
        self.hover_bindings[key][1]()

    def click(self, key: str) -> None:
        self.click_bindings[key]()

    def _add(self, call: DrawCall) -> None:
        if call.key in self.items:
            raise ValueError(f"Duplicate item key '{call.key}'.")
        self.items[call.key] = call

    def _require(self, key: str) -> None:
        if key not in self.items:
            raise KeyError(f"No item with key '{key}' has been drawn.")
