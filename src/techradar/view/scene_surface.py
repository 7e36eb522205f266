"""
Qt Scene Surface
================
``DrawingSurface`` implemented on a ``QGraphicsScene``.

Why is this file needed?
------------------------
1. It is the bridge between the toolkit-free renderer and Qt: every drawing
   call becomes a ``QGraphicsItem`` registered under its key.
2. Interactions: items override the hover and mouse-press handlers and call
   back into the renderer's controller, so markers and legend rows react
   without any signal plumbing in the host.
3. Export: the scene can be written to SVG with ``QSvgGenerator``.
4. Links: linked items show their URL as a tool tip and open it in the system
   browser on double-click (a single click pins the entry).
"""
from __future__ import annotations
from typing import Callable, Dict, Optional, Sequence, Tuple
import logging

import numpy as np
from PySide6.QtCore import QPointF, QRect, QRectF, QSize, Qt, QUrl
from PySide6.QtGui import (
    QBrush, QColor, QDesktopServices, QFont, QPainter, QPainterPath, QPen, QPolygonF
)
from PySide6.QtSvg import QSvgGenerator
from PySide6.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsPathItem, QGraphicsScene, QGraphicsSimpleTextItem
)

from techradar.layout.primitives import Point
from techradar.view.surface import (
    Callback, DrawingSurface, MarkerShape, Style, TextAnchor, marker_polygon
)

logger = logging.getLogger(__name__)

HIGHLIGHT_PEN_WIDTH = 2.5
BUBBLE_POINTER = 8


def _color(value: str, opacity: float = 1.0) -> QColor:
    color = QColor(value)
    if opacity < 1.0:
        color.setAlphaF(opacity)
    return color


def _pen(style: Style) -> QPen:
    if style.stroke is None:
        return QPen(Qt.PenStyle.NoPen)
    pen = QPen(_color(style.stroke, style.opacity))
    pen.setWidthF(style.stroke_width)
    return pen


def _brush(style: Style) -> QBrush:
    if style.fill is None:
        return QBrush(Qt.BrushStyle.NoBrush)
    return QBrush(_color(style.fill, style.opacity))


def _font(style: Style) -> QFont:
    # CSS-like family lists ("Arial, Helvetica") become Qt fallback families.
    font = QFont()
    font.setFamilies([name.strip() for name in (style.font_family or "").split(",") if name.strip()])
    font.setPointSizeF(style.font_size)
    font.setBold(style.bold)
    return font


def _polygon(points: np.ndarray) -> QPolygonF:
    return QPolygonF([QPointF(float(x), float(y)) for x, y in points])


def open_in_browser(url: str) -> None:
    QDesktopServices.openUrl(QUrl(url))


class _Interactive:
    """Mixin routing Qt hover/press events to plain callbacks."""
    _on_enter: Optional[Callback] = None
    _on_leave: Optional[Callback] = None
    _on_click: Optional[Callback] = None
    _on_activate: Optional[Callback] = None

    def set_hover(self, on_enter: Callback, on_leave: Callback) -> None:
        self._on_enter = on_enter
        self._on_leave = on_leave
        self.setAcceptHoverEvents(True)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

    def set_click(self, on_click: Callback) -> None:
        self._on_click = on_click

    def set_activate(self, on_activate: Callback) -> None:
        self._on_activate = on_activate

    def hoverEnterEvent(self, event) -> None:
        if self._on_enter is not None:
            self._on_enter()
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event) -> None:
        if self._on_leave is not None:
            self._on_leave()
        super().hoverLeaveEvent(event)

    def mousePressEvent(self, event) -> None:
        if self._on_click is not None and event.button() == Qt.MouseButton.LeftButton:
            self._on_click()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseDoubleClickEvent(self, event) -> None:
        if self._on_activate is not None and event.button() == Qt.MouseButton.LeftButton:
            self._on_activate()
            event.accept()
            return
        super().mouseDoubleClickEvent(event)


class _PathItem(_Interactive, QGraphicsPathItem):
    pass


class _EllipseItem(_Interactive, QGraphicsEllipseItem):
    pass


class _TextItem(_Interactive, QGraphicsSimpleTextItem):
    pass


class SceneSurface(DrawingSurface):
    """
    Draws into a ``QGraphicsScene``. The scene may be owned by the host (pass
    it in) or created here; either way this class never deletes the scene.
    ``open_url`` is called with the URL of a linked item when it is activated.
    """

    def __init__(
        self,
        scene: Optional[QGraphicsScene] = None,
        open_url: Callable[[str], None] = open_in_browser,
    ):
        self.scene = scene if scene is not None else QGraphicsScene()
        self.items: Dict[str, QGraphicsItem] = {}
        self.links: Dict[str, Tuple[str, bool]] = {}
        self._open_url = open_url
        self._highlight_color = QColor("#333")
        # Original paint of highlighted items, restored when the highlight ends.
        self._saved: Dict[str, Tuple[QPen, QBrush, QFont]] = {}

    def clear(self) -> None:
        self.scene.clear()
        self.items.clear()
        self.links.clear()
        self._saved.clear()

    def set_canvas(self, width: float, height: float, background: str) -> None:
        self.scene.setSceneRect(QRectF(0, 0, width, height))
        self.scene.setBackgroundBrush(QBrush(QColor(background)))

    def set_highlight_color(self, color: str) -> None:
        self._highlight_color = QColor(color)

    def draw_wedge(self, key: str, outline: np.ndarray, style: Style) -> None:
        path = QPainterPath()
        path.addPolygon(_polygon(outline))
        path.closeSubpath()
        item = _PathItem(path)
        item.setPen(_pen(style))
        item.setBrush(_brush(style))
        self._add(key, item)

    def draw_ring(self, key: str, center: Point, radius: float, style: Style) -> None:
        item = _EllipseItem(center.x - radius, center.y - radius, 2 * radius, 2 * radius)
        item.setPen(_pen(style))
        item.setBrush(QBrush(Qt.BrushStyle.NoBrush))
        self._add(key, item)

    def draw_marker(
        self,
        key: str,
        center: Point,
        shape: MarkerShape,
        size: float,
        style: Style,
        text: Optional[str] = None,
    ) -> None:
        path = QPainterPath()
        if shape == MarkerShape.CIRCLE:
            path.addEllipse(QPointF(0.0, 0.0), size, size)
        else:
            path.addPolygon(_polygon(marker_polygon(shape, size)))
            path.closeSubpath()
        item = _PathItem(path)
        item.setPen(_pen(style))
        item.setBrush(_brush(style))
        item.setPos(center.x, center.y)
        if text:
            label = QGraphicsSimpleTextItem(text, item)
            label.setFont(_font(style))
            label.setBrush(QBrush(_color(style.text_color)))
            label.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
            rect = label.boundingRect()
            label.setPos(-rect.width() / 2, -rect.height() / 2)
        self._add(key, item)

    def draw_label(
        self,
        key: str,
        position: Point,
        text: str,
        style: Style,
        anchor: TextAnchor = TextAnchor.START,
    ) -> None:
        item = _TextItem(text)
        item.setFont(_font(style))
        item.setBrush(QBrush(_color(style.text_color, style.opacity)))
        rect = item.boundingRect()
        x = position.x
        if anchor == TextAnchor.MIDDLE:
            x -= rect.width() / 2
        elif anchor == TextAnchor.END:
            x -= rect.width()
        item.setPos(x, position.y - rect.height() / 2)
        self._add(key, item)

    def draw_bubble(self, key: str, anchor: Point, lines: Sequence[str], style: Style) -> None:
        text = QGraphicsSimpleTextItem("\n".join(lines))
        text.setFont(_font(style))
        text.setBrush(QBrush(_color(style.text_color)))
        rect = text.boundingRect()
        width, height = rect.width(), rect.height()

        # Rounded box above the anchor with a small pointer under its middle.
        path = QPainterPath()
        path.addRoundedRect(QRectF(-5, -height - 4, width + 10, height + 4), 4, 4)
        path.addPolygon(_polygon(np.array([
            [width / 2 - 5, 0.0], [width / 2 + 5, 0.0], [width / 2, BUBBLE_POINTER],
        ])))
        path.closeSubpath()
        bubble = QGraphicsPathItem(path)
        bubble.setPen(QPen(Qt.PenStyle.NoPen))
        bubble.setBrush(_brush(style))
        text.setParentItem(bubble)
        text.setPos(0, -height - 2)
        for item in (bubble, text):
            item.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
            item.setAcceptHoverEvents(False)
        bubble.setPos(anchor.x - width / 2, anchor.y - BUBBLE_POINTER)
        bubble.setZValue(2)
        bubble.setVisible(False)
        self._add(key, bubble)

    def set_visible(self, key: str, visible: bool) -> None:
        self._item(key).setVisible(visible)

    def set_link(self, key: str, url: str, new_tab: bool) -> None:
        # A desktop browser decides about tabs itself; the flag is only recorded.
        item = self._item(key)
        item.setToolTip(url)
        item.set_activate(lambda: self._open_url(url))
        self.links[key] = (url, new_tab)

    def bind_hover(self, key: str, on_enter: Callback, on_leave: Callback) -> None:
        self._item(key).set_hover(on_enter, on_leave)

    def bind_click(self, key: str, on_click: Callback) -> None:
        self._item(key).set_click(on_click)

    def set_highlighted(self, key: str, highlighted: bool) -> None:
        item = self._item(key)
        if highlighted:
            if key in self._saved:
                return
            if isinstance(item, QGraphicsSimpleTextItem):
                self._saved[key] = (item.pen(), item.brush(), item.font())
                font = QFont(item.font())
                font.setBold(True)
                item.setFont(font)
                item.setBrush(QBrush(self._highlight_color))
            else:
                self._saved[key] = (item.pen(), item.brush(), QFont())
                pen = QPen(self._highlight_color)
                pen.setWidthF(HIGHLIGHT_PEN_WIDTH)
                item.setPen(pen)
            item.setZValue(1)
        elif key in self._saved:
            pen, brush, font = self._saved.pop(key)
            if isinstance(item, QGraphicsSimpleTextItem):
                item.setFont(font)
                item.setBrush(brush)
            else:
                item.setPen(pen)
            item.setZValue(0)

    def is_highlighted(self, key: str) -> bool:
        return key in self._saved

    def export_svg(self, filepath: str, title: str = "") -> None:
        """Write the current scene to an SVG file."""
        rect = self.scene.sceneRect()
        generator = QSvgGenerator()
        generator.setFileName(filepath)
        generator.setSize(QSize(int(rect.width()), int(rect.height())))
        generator.setViewBox(QRect(0, 0, int(rect.width()), int(rect.height())))
        generator.setTitle(title)
        painter = QPainter()
        painter.begin(generator)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            self.scene.render(painter, QRectF(0, 0, rect.width(), rect.height()), rect)
        finally:
            painter.end()
        logger.info(f"Exported SVG to {filepath}")

    def _add(self, key: str, item: QGraphicsItem) -> None:
        if key in self.items:
            raise ValueError(f"Duplicate item key '{key}'.")
        self.scene.addItem(item)
        self.items[key] = item

    def _item(self, key: str):
        try:
            return self.items[key]
        except KeyError:
            raise KeyError(f"No item with key '{key}' has been drawn.") from None
