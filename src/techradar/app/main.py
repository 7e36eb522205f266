"""
Application Initialization
==========================
Builds the demo window around a chart and starts the Qt event loop.

Run with: python -m techradar [config.json]
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from techradar.app.application import create_app
from techradar.app.ui.main_window import RadarWindow
from techradar.config import DEFAULT_RADAR_PATH
from techradar.model.errors import RadarError
from techradar.model.json_io import import_config

logger = logging.getLogger(__name__)


def main(config_path: Optional[str] = None) -> int:
    """Main entry point for the application."""
    app = create_app()
    path = Path(config_path or DEFAULT_RADAR_PATH)
    try:
        config = import_config(path.read_text(encoding="utf-8"))
    except (OSError, RadarError) as e:
        logger.error(f"Could not load radar from {path}: {e}")
        return 1

    win = RadarWindow(config)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
