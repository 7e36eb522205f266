"""
Main Application Window
=======================
Demo host for the radar chart: the chart view in the centre, a toolbar for
importing, merging and exporting configs, and a log console at the bottom.

Why is this file needed?
------------------------
1. Embedding: it shows how a host owns the drawing surface and only talks to
   the chart through ``ChartHandle`` (``get_config``, ``render``, ``reset``,
   ``json_io``).
2. Routing: it connects toolbar actions to the exchange helpers and reports
   failures without disturbing the chart on screen.
"""
from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import Qt, QObject, Signal
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QDockWidget, QFileDialog, QMainWindow, QMessageBox, QPlainTextEdit, QToolBar
)

from techradar.app.application import VISIBLE_APP_NAME
from techradar.app.ui.radar_view import RadarView
from techradar.config import EXPORT_SLUG
from techradar.logging_config import DATE_FORMAT, LOG_FORMAT
from techradar.model.errors import RadarError
from techradar.model.radar import RadarConfig
from techradar.view.chart import ChartHandle, create_chart

logger = logging.getLogger(__name__)

JSON_FILTER = "JSON Files (*.json)"
SVG_FILTER = "SVG Files (*.svg)"


class Console(QPlainTextEdit):
    """Read-only log pane; ``ConsoleLogHandler`` writes into it."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)


class _LogBridge(QObject):
    message = Signal(str)


class ConsoleLogHandler(logging.Handler):
    """Mirrors 'techradar' log records into a ``Console``."""

    def __init__(self, console: Console):
        super().__init__(level=logging.INFO)
        self.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        # Records may come from any thread; the signal hops onto the GUI thread.
        self._bridge = _LogBridge()
        self._bridge.message.connect(console.appendPlainText)

    def emit(self, record: logging.LogRecord) -> None:
        self._bridge.message.emit(self.format(record))


class RadarWindow(QMainWindow):
    def __init__(self, config: RadarConfig) -> None:
        super().__init__()
        self.resize(1400, 900)

        self.view = RadarView(self)
        self.setCentralWidget(self.view)

        self.console = Console(self)
        dock = QDockWidget("Log", self)
        dock.setWidget(self.console)
        self.addDockWidget(Qt.BottomDockWidgetArea, dock)
        self._log_handler = ConsoleLogHandler(self.console)
        logging.getLogger("techradar").addHandler(self._log_handler)

        self.chart: ChartHandle = create_chart(config, self.view.surface)
        self.view.fit()

        self._create_actions()
        self._create_toolbar()
        self.update_window_title()

    def _create_actions(self) -> None:
        self.act_open = QAction("Open...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.on_open)

        self.act_merge = QAction("Merge...", self)
        self.act_merge.setShortcut("Ctrl+M")
        self.act_merge.triggered.connect(self.on_merge)

        self.act_export = QAction("Export JSON...", self)
        self.act_export.setShortcut("Ctrl+S")
        self.act_export.triggered.connect(self.on_export_json)

        self.act_export_svg = QAction("Export SVG...", self)
        self.act_export_svg.triggered.connect(self.on_export_svg)

        self.act_reset = QAction("Reset", self)
        self.act_reset.triggered.connect(self.on_reset)

    def _create_toolbar(self) -> None:
        toolbar = QToolBar("Config", self)
        toolbar.setMovable(False)
        toolbar.addAction(self.act_open)
        toolbar.addAction(self.act_merge)
        toolbar.addSeparator()
        toolbar.addAction(self.act_export)
        toolbar.addAction(self.act_export_svg)
        toolbar.addSeparator()
        toolbar.addAction(self.act_reset)
        self.addToolBar(toolbar)

    # --- HELPER METHODS ---
    def update_window_title(self) -> None:
        config = self.chart.get_config()
        title = config.title if config and config.title else "Untitled"
        self.setWindowTitle(f"{VISIBLE_APP_NAME} - [{title}]")

    def _apply(self, config: RadarConfig) -> None:
        self.chart.render(config)
        self.view.fit()
        self.update_window_title()

    def _report(self, action: str, error: Exception) -> None:
        logger.error(f"{action} failed: {error}")
        QMessageBox.warning(self, "Tech Radar", f"{action} failed:\n{error}")

    # --- TOOLBAR OPERATIONS (no dialogs) ---
    def open_text(self, text: str) -> RadarConfig:
        """Replace the chart with the config in ``text``."""
        config = self.chart.json_io.import_config(text)
        self._apply(config)
        return config

    def merge_text(self, text: str) -> RadarConfig:
        """Merge a full or partial config in ``text`` into the current one."""
        merged = self.chart.json_io.import_and_merge(self.chart.get_config(), text)
        self._apply(merged)
        return merged

    def export_text(self) -> str:
        return self.chart.json_io.export_config(self.chart.get_config())

    def open_file(self, path: Path) -> RadarConfig:
        config = self.open_text(Path(path).read_text(encoding="utf-8"))
        logger.info(f"Opened {Path(path).name}")
        return config

    def merge_file(self, path: Path) -> RadarConfig:
        config = self.merge_text(Path(path).read_text(encoding="utf-8"))
        logger.info(f"Merged {Path(path).name}")
        return config

    def export_file(self, path: Path) -> None:
        Path(path).write_text(self.export_text(), encoding="utf-8")
        logger.info(f"Exported {Path(path).name}")

    # --- SLOTS ---
    def on_open(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(self, "Open Radar", "", JSON_FILTER)
        if fname:
            try:
                self.open_file(Path(fname))
            except (OSError, RadarError) as e:
                self._report("Open", e)

    def on_merge(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(self, "Merge Radar", "", JSON_FILTER)
        if fname:
            try:
                self.merge_file(Path(fname))
            except (OSError, RadarError) as e:
                self._report("Merge", e)

    def on_export_json(self) -> None:
        default_name = self.chart.json_io.export_file_name(EXPORT_SLUG)
        fname, _ = QFileDialog.getSaveFileName(self, "Export Radar", default_name, JSON_FILTER)
        if fname:
            if not fname.endswith(".json"):
                fname += ".json"
            try:
                self.export_file(Path(fname))
            except (OSError, RadarError) as e:
                self._report("Export", e)

    def on_export_svg(self) -> None:
        default_name = self.chart.json_io.export_file_name(EXPORT_SLUG).replace(".json", ".svg")
        fname, _ = QFileDialog.getSaveFileName(self, "Export SVG", default_name, SVG_FILTER)
        if fname:
            if not fname.endswith(".svg"):
                fname += ".svg"
            config = self.chart.get_config()
            self.view.surface.export_svg(fname, title=config.title if config else "")

    def on_reset(self) -> None:
        try:
            self.chart.reset()
        except RadarError as e:
            self._report("Reset", e)
            return
        self.view.fit()
        self.update_window_title()

    def closeEvent(self, event, /) -> None:
        logging.getLogger("techradar").removeHandler(self._log_handler)
        event.accept()
