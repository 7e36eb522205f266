"""
Command-line interface.

    python -m techradar [config.json] [--svg out.svg] [--log-level LEVEL] [--log-file PATH]

Without ``--svg`` the demo window opens; with it the radar is rendered
headlessly and written to the SVG file.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from techradar.config import DEFAULT_RADAR_PATH
from techradar.logging_config import parse_level, setup_logging
from techradar.model.errors import RadarError

logger = logging.getLogger("techradar.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="techradar", description="Render a technology radar.")
    parser.add_argument(
        "config", nargs="?", default=DEFAULT_RADAR_PATH,
        help="Radar config in the JSON exchange format (default: bundled demo radar).",
    )
    parser.add_argument("--svg", metavar="PATH", help="Render headlessly to this SVG file and exit.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    parser.add_argument("--log-file", metavar="PATH", help="Also write the log to this file.")
    return parser


def export_svg(config_path: str, svg_path: str) -> None:
    """Lay out the radar in ``config_path`` and write it to ``svg_path``."""
    # Headless rendering still needs a Qt application for fonts.
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from techradar.app.application import create_app
    from techradar.model.json_io import import_config
    from techradar.view.chart import create_chart
    from techradar.view.scene_surface import SceneSurface

    app = create_app()
    config = import_config(Path(config_path).read_text(encoding="utf-8"))
    surface = SceneSurface()
    create_chart(config, surface)
    surface.export_svg(svg_path, title=config.title)
    app.processEvents()


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        level = parse_level(args.log_level)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2
    setup_logging(level=level, log_file=args.log_file)

    if args.svg:
        try:
            export_svg(args.config, args.svg)
        except (OSError, RadarError) as e:
            logger.error(f"Could not render {args.config}: {e}")
            return 1
        return 0

    from techradar.app.main import main as run_app
    return run_app(args.config)


if __name__ == "__main__":
    sys.exit(main())
