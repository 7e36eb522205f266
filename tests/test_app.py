import json
import logging

import pytest

pytest.importorskip("PySide6")

from techradar.__main__ import main  # noqa: E402
from techradar.config import DEFAULT_RADAR_PATH  # noqa: E402
from techradar.logging_config import parse_level, setup_logging  # noqa: E402
from techradar.model.errors import ParseError  # noqa: E402
from techradar.model.json_io import export_config  # noqa: E402


@pytest.fixture
def window(qapp, sample_config):
    from techradar.app.ui.main_window import RadarWindow
    win = RadarWindow(sample_config)
    yield win
    win.close()


def test_window_renders_config(window, sample_config):
    assert window.chart.get_config() == sample_config
    assert "Test Radar" in window.windowTitle()


def test_merge_text_updates_chart_and_title(window):
    window.merge_text('{"title": "Merged"}')
    assert window.chart.get_config().title == "Merged"
    assert "Merged" in window.windowTitle()


def test_bad_text_keeps_chart(window, sample_config):
    with pytest.raises(ParseError):
        window.open_text("{broken")
    assert window.chart.get_config() == sample_config


def test_export_text_round_trips(window, sample_config):
    assert json.loads(window.export_text()) == json.loads(export_config(sample_config))


def test_file_actions_log_once_to_console(window, sample_config, tmp_path, caplog):
    source = tmp_path / "radar.json"
    source.write_text(export_config(sample_config), encoding="utf-8")
    with caplog.at_level(logging.INFO, logger="techradar"):
        window.merge_file(source)
        window.export_file(tmp_path / "copy.json")
    text = window.console.toPlainText()
    assert text.count("Merged radar.json") == 1
    assert text.count("Exported copy.json") == 1
    assert (tmp_path / "copy.json").exists()


def test_cli_exports_svg(qapp, sample_config, tmp_path):
    config_path = tmp_path / "radar.json"
    config_path.write_text(export_config(sample_config), encoding="utf-8")
    svg_path = tmp_path / "radar.svg"
    assert main([str(config_path), "--svg", str(svg_path), "--log-level", "warning"]) == 0
    assert svg_path.read_text(encoding="utf-8").lstrip().startswith("<?xml")


def test_cli_reports_invalid_config(qapp, tmp_path):
    config_path = tmp_path / "radar.json"
    config_path.write_text("[]", encoding="utf-8")
    assert main([str(config_path), "--svg", str(tmp_path / "out.svg")]) == 1


def test_demo_radar_is_valid():
    from techradar.model.json_io import import_config
    with open(DEFAULT_RADAR_PATH, encoding="utf-8") as f:
        config = import_config(f.read())
    assert len(config.entries) > 0


def test_logging_setup(tmp_path):
    log_file = tmp_path / "radar.log"
    logger = setup_logging(level=logging.DEBUG, log_file=str(log_file))
    logging.getLogger("techradar.layout").debug("hello from layout")
    for handler in logger.handlers:
        handler.flush()
    assert "hello from layout" in log_file.read_text(encoding="utf-8")
    setup_logging(level=logging.WARNING)
    assert len(logger.handlers) == 1


def test_parse_level():
    assert parse_level("debug") == logging.DEBUG
    assert parse_level("30") == 30
    with pytest.raises(ValueError):
        parse_level("chatty")
