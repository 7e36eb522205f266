"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths scattered throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (the demo radar JSON) when the app is frozen into an .exe.

Chart settings themselves are not configured here; they travel with each
radar in its ``displayOptions``.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_RADAR_PATH (str): Absolute path to the bundled demo radar.
    EXPORT_SLUG (str): Prefix of exported file names.
"""
import logging
import sys
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: config.py is in src/techradar/
    project_root: Path = Path(__file__).parent.parent.parent
    return os.path.join(str(project_root), relative_path)


ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_RADAR_PATH: str = os.path.join(ASSETS_PATH, "demo_radar.json")
EXPORT_SLUG: str = "tech-radar"

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")
