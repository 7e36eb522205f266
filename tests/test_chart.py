import pytest

from techradar.layout.engine import layout
from techradar.model import json_io
from techradar.model.errors import ConfigValidationError, LayoutError
from techradar.model.radar import Entry, thaw
from techradar.view.chart import create_chart, render
from techradar.view.recording import RecordingSurface
from techradar.view.renderer import marker_shape
from techradar.view.surface import MarkerShape


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def chart(sample_config, surface):
    return create_chart(sample_config, surface)


def _seq(chart, entry_id):
    return chart.geometry.placement_for(entry_id).sequence


def test_paints_every_part(chart, surface, sample_config):
    count = len(sample_config.entries)
    assert len(surface.keys("marker")) == count
    assert sorted(surface.keys("wedge")) == ["wedge:0", "wedge:1", "wedge:2", "wedge:3"]
    assert sorted(surface.keys("ring")) == ["ring:0", "ring:1", "ring:2"]
    labels = surface.keys("label")
    assert len([k for k in labels if k.startswith("legend:")]) == count
    assert {"title", "date", "footer", "quadrant:0", "ring-label:2"} <= set(labels)
    assert surface.canvas == (1450.0, 1000.0, "#fff")


def test_marker_matches_layout(chart, surface):
    geometry = chart.geometry
    for placement in geometry.placements:
        call = surface.items[f"marker:{placement.sequence}"]
        assert call.params["center"].x == pytest.approx(geometry.origin.x + placement.x)
        assert call.params["center"].y == pytest.approx(geometry.origin.y + placement.y)
        assert call.params["text"] == str(placement.sequence)
        assert call.params["style"].fill == placement.color


def test_marker_shapes(chart, surface, sample_config):
    shapes = {
        entry.id: surface.items[f"marker:{_seq(chart, entry.id)}"].params["shape"]
        for entry in sample_config.entries
    }
    assert shapes["python"] == MarkerShape.CIRCLE
    assert shapes["go"] == MarkerShape.TRIANGLE_UP
    assert shapes["nomad"] == MarkerShape.TRIANGLE_DOWN
    assert shapes[3] == MarkerShape.STAR
    assert shapes["kafka"] == MarkerShape.CIRCLE


def test_new_wins_over_moved():
    assert marker_shape(Entry(1, "x", 0, 0, is_new=True, moved="up")) == MarkerShape.STAR


def test_legend_rows(chart, surface):
    seq = _seq(chart, "k8s")
    assert surface.items[f"legend:{seq}"].params["text"] == f"{seq}. Kubernetes"


def test_hover_marker_highlights_legend(chart, surface):
    seq = _seq(chart, "pg")
    surface.hover(f"marker:{seq}")
    assert surface.highlighted == {f"marker:{seq}", f"legend:{seq}"}
    surface.leave(f"marker:{seq}")
    assert surface.highlighted == set()


def test_hover_legend_highlights_marker(chart, surface):
    seq = _seq(chart, "go")
    surface.hover(f"legend:{seq}")
    assert f"marker:{seq}" in surface.highlighted
    surface.leave(f"legend:{seq}")
    assert surface.highlighted == set()


def test_click_pins_and_moves_pin(chart, surface):
    first, second = 2, 5
    surface.click(f"legend:{first}")
    surface.leave(f"legend:{first}")
    assert chart.pinned == first
    assert surface.highlighted == {f"marker:{first}", f"legend:{first}"}

    surface.click(f"marker:{second}")
    assert chart.pinned == second
    assert surface.highlighted == {f"marker:{second}", f"legend:{second}"}

    surface.click(f"marker:{second}")
    assert chart.pinned is None
    assert surface.highlighted == set()


def test_hover_while_pinned_keeps_pin(chart, surface):
    surface.click("marker:1")
    surface.hover("marker:3")
    assert surface.highlighted == {"marker:1", "legend:1", "marker:3", "legend:3"}
    surface.leave("marker:3")
    assert surface.highlighted == {"marker:1", "legend:1"}


def test_highlight_api(chart, surface):
    chart.highlight(4)
    assert chart.pinned == 4
    assert "legend:4" in surface.highlighted
    chart.highlight(None)
    assert chart.pinned is None
    assert surface.highlighted == set()


def test_rerender_leaves_no_stale_bindings(chart, surface, make_config):
    surface.click("marker:1")
    smaller = make_config(entries=(Entry("solo", "Solo", 0, 0),))
    chart.render(smaller)
    assert surface.clear_count == 2
    assert chart.get_config() == smaller
    assert chart.pinned is None
    assert surface.highlighted == set()
    assert sorted(surface.hover_bindings) == ["legend:1", "marker:1"]
    assert sorted(surface.click_bindings) == ["legend:1", "marker:1"]


def test_failed_render_keeps_previous_picture(chart, surface, sample_config, make_config):
    items = dict(surface.items)
    with pytest.raises(ConfigValidationError):
        chart.render(make_config(entries=(Entry("bad", "Bad", 0, 9),)))
    with pytest.raises(LayoutError):
        chart.render(make_config(display_options={"width": 10}))
    assert surface.clear_count == 1
    assert surface.items == items
    assert chart.get_config() == sample_config
    surface.hover("marker:1")
    assert "legend:1" in surface.highlighted


def test_reset_restores_initial_config(chart, sample_config):
    chart.render(json_io.merge_configs(sample_config, {"title": "Changed"}))
    assert chart.get_config().title == "Changed"
    chart.reset()
    assert chart.get_config() == sample_config
    assert chart.initial_config == sample_config


def test_returned_config_cannot_change_reset(make_config, surface):
    chart = create_chart(make_config(display_options={"seed": 3}), surface)
    config = chart.get_config()
    with pytest.raises(TypeError):
        config.display_options["seed"] = 1
    options = thaw(config.display_options)
    options["seed"] = 1
    chart.render(make_config(display_options=options))
    chart.reset()
    assert chart.get_config().display_options == {"seed": 3}
    assert chart.initial_config.display_options == {"seed": 3}


def test_json_io_namespace(chart, sample_config):
    text = chart.json_io.export_config(chart.get_config())
    assert chart.json_io.import_config(text) == sample_config
    merged = chart.json_io.merge_configs(chart.get_config(), {"date": "2030.01"})
    chart.render(merged)
    assert chart.get_config().date == "2030.01"


def test_without_print_layout_only_markers_are_interactive(make_config, surface):
    config = make_config(display_options={"print_layout": False})
    create_chart(config, surface)
    labels = surface.keys("label")
    assert not any(k.startswith("legend") for k in labels)
    assert "title" not in labels
    assert "ring-label:0" not in labels
    surface.hover("marker:1")
    assert surface.highlighted == {"marker:1"}


def test_bubble_carries_label_and_description(chart, surface):
    seq = _seq(chart, "k8s")
    bubble = surface.items[f"bubble:{seq}"]
    assert bubble.params["lines"] == ["Kubernetes", "Container orchestration"]
    assert surface.items[f"bubble:{_seq(chart, 'python')}"].params["lines"] == ["Python"]
    marker = surface.items[f"marker:{seq}"].params["center"]
    assert bubble.params["anchor"].x == pytest.approx(marker.x)
    assert bubble.params["anchor"].y < marker.y
    assert surface.visible == set()


def test_hover_shows_bubble_until_leave(chart, surface):
    seq = _seq(chart, "k8s")
    surface.hover(f"legend:{seq}")
    assert surface.visible == {f"bubble:{seq}"}
    surface.click(f"legend:{seq}")
    surface.leave(f"legend:{seq}")
    assert surface.visible == set()
    assert chart.pinned == seq

    surface.hover("marker:1")
    surface.hover("marker:2")
    assert surface.visible == {"bubble:2"}


def test_inactive_entry_has_no_bubble_on_screen_layout(make_config, surface):
    chart = create_chart(make_config(display_options={"print_layout": False}), surface)
    seq = _seq(chart, "cassandra")
    assert f"bubble:{seq}" not in surface.items
    surface.hover(f"marker:{seq}")
    assert surface.visible == set()
    assert f"bubble:{_seq(chart, 'pg')}" in surface.items


def test_links_follow_new_tab_option(chart, surface, make_config):
    seq = _seq(chart, 3)
    url = "https://www.rust-lang.org"
    assert surface.links == {f"marker:{seq}": (url, True), f"legend:{seq}": (url, True)}

    chart.render(make_config(display_options={"links_in_new_tabs": False}))
    assert surface.links == {f"marker:{seq}": (url, False), f"legend:{seq}": (url, False)}


def test_inactive_entry_is_not_linked(make_config, surface):
    entries = (Entry("old", "Old", 0, 0, link="https://example.com/old", active=False),)
    create_chart(make_config(entries=entries), surface)
    assert surface.links == {}


def test_render_from_geometry(sample_config, surface):
    geometry = layout(sample_config)
    handle = render(geometry, surface)
    assert handle.geometry is geometry
    assert handle.get_config() == sample_config
    assert len(surface.keys("marker")) == len(sample_config.entries)


def test_duplicate_keys_are_rejected(surface):
    from techradar.layout.primitives import Point
    from techradar.view.surface import Style

    surface.draw_ring("ring:0", Point(0, 0), 10, Style())
    with pytest.raises(ValueError):
        surface.draw_ring("ring:0", Point(0, 0), 20, Style())
