import itertools
import logging
import math

import numpy as np
import pytest

from techradar.layout.engine import layout, outer_radius_for, sequence_order
from techradar.layout.primitives import Point, Wedge
from techradar.layout.quadrants import build_sectors, sector_angles
from techradar.layout.rings import build_bands, ring_radii
from techradar.layout.rng import entry_seed
from techradar.layout.segments import Segment
from techradar.model.errors import ConfigValidationError, LayoutError
from techradar.model.options import resolve_display_options
from techradar.model.radar import Entry, Quadrant, Ring


def _segment(geometry, quadrant, ring):
    options = geometry.options
    return Segment.create(
        geometry.sector_for(quadrant),
        geometry.band_for(ring),
        options.segment_radial_padding,
        options.segment_angular_padding,
    )


def test_layout_is_deterministic(sample_config, make_config):
    first = layout(sample_config)
    second = layout(make_config())
    assert first.placements == second.placements
    assert first.bands == second.bands
    assert first == layout(sample_config)


def test_seed_option_changes_positions(make_config):
    a = layout(make_config(display_options={"seed": 1}))
    b = layout(make_config(display_options={"seed": 2}))
    assert [(p.x, p.y) for p in a.placements] != [(p.x, p.y) for p in b.placements]


def test_entries_in_other_quadrants_do_not_move(make_config, sample_config):
    before = layout(sample_config)
    extra = sample_config.entries + (Entry("deno", "Deno", 3, 2),)
    after = layout(make_config(entries=extra))
    for placement in before.placements:
        if placement.quadrant == 3:
            continue
        moved = after.placement_for(placement.entry_id)
        assert (moved.x, moved.y) == (placement.x, placement.y)


def test_entry_seed_is_stable():
    assert entry_seed("python", 0) == entry_seed("python", 0)
    assert entry_seed(3, 0) == entry_seed("3", 0)
    assert entry_seed("python", 0) != entry_seed("python", 1)
    assert 0 <= entry_seed("python", 2 ** 70) < 2 ** 64


def test_every_entry_sits_in_its_segment(sample_config):
    geometry = layout(sample_config)
    assert len(geometry.placements) == len(sample_config.entries)
    for placement in geometry.placements:
        segment = _segment(geometry, placement.quadrant, placement.ring)
        assert segment.contains(placement.point)
        band = geometry.band_for(placement.ring)
        assert band.inner_radius <= placement.point.radius <= band.outer_radius


def test_sectors_follow_display_order():
    assert sector_angles(0) == (-math.pi / 2, 0.0)
    sectors = build_sectors([Quadrant("a", 2), Quadrant("b", 0), Quadrant("c", 3), Quadrant("d", 1)])
    assert [s.name for s in sectors] == ["b", "d", "a", "c"]
    # 0 top-right, 1 top-left, 2 bottom-left, 3 bottom-right (y grows downwards)
    assert [s.direction for s in sectors] == [(1, -1), (-1, -1), (-1, 1), (1, 1)]


def test_ring_areas_are_balanced():
    radii = ring_radii([1, 1, 1, 1], 30, 400)
    assert radii[-1] == 400
    bounds = [30] + radii
    areas = [math.pi * (o ** 2 - i ** 2) for i, o in zip(bounds, bounds[1:])]
    assert areas == pytest.approx([areas[0]] * 4)
    # Equal areas make outer rings thinner.
    widths = np.diff(bounds)
    assert all(widths[:-1] > widths[1:])


def test_ring_width_weights_area():
    bands = build_bands([Ring("a", 0, "#000", 1.0), Ring("b", 1, "#000", 3.0)], 0.0, 100.0)
    assert bands[1].area == pytest.approx(3 * bands[0].area)


def test_bands_follow_display_order():
    bands = build_bands([Ring("outer", 1, "#000"), Ring("inner", 0, "#000")], 30, 300)
    assert [b.name for b in bands] == ["inner", "outer"]
    assert bands[0].index == 1
    assert bands[0].outer_radius == bands[1].inner_radius


def test_outer_radius_accounts_for_title_and_footer(make_config):
    options = resolve_display_options({})
    assert outer_radius_for(make_config(), options) == min(1450, 1000 - 60 - 40) / 2 - 60
    assert outer_radius_for(make_config(title=""), options) == min(1450, 1000 - 40) / 2 - 60
    bare = resolve_display_options({"print_layout": False})
    assert outer_radius_for(make_config(), bare) == 1000 / 2 - 60


def test_sequence_numbers(make_config):
    quadrants = (Quadrant("Q-a", 1), Quadrant("Q-b", 0), Quadrant("Q-c", 2), Quadrant("Q-d", 3))
    rings = (Ring("outer", 1, "#111"), Ring("inner", 0, "#222"))
    entries = (
        Entry(1, "zeta", 1, 0),
        Entry(2, "Alpha", 1, 0),
        Entry(3, "beta", 1, 1),
        Entry(4, "alpha", 0, 1),
        Entry(5, "Gamma", 1, 1),
    )
    config = make_config(quadrants=quadrants, rings=rings, entries=entries)
    assert [e.id for e in sequence_order(config)] == [3, 5, 2, 1, 4]
    geometry = layout(config)
    assert [(p.sequence, p.entry_id) for p in geometry.placements] == [
        (1, 3), (2, 5), (3, 2), (4, 1), (5, 4),
    ]
    assert geometry.placement_by_sequence(4).entry_id == 1
    assert geometry.placement_by_sequence(9) is None


def test_colours(sample_config):
    geometry = layout(sample_config)
    assert geometry.placement_for("python").color == "#5ba300"
    assert geometry.placement_for("cassandra").color == "#ddd"


def test_empty_quadrants_and_rings_are_fine(make_config):
    geometry = layout(make_config(entries=(Entry("only", "Only", 2, 1),)))
    assert len(geometry.placements) == 1
    assert len(layout(make_config(entries=())).placements) == 0


def test_clearance_holds_below_capacity(make_config):
    entries = tuple(Entry(f"e{i}", f"Entry {i}", 0, 0) for i in range(8))
    geometry = layout(make_config(entries=entries))
    segment = _segment(geometry, 0, 0)
    assert len(entries) <= segment.capacity(geometry.options.blip_clearance)
    points = [p.point for p in geometry.placements]
    for a, b in itertools.combinations(points, 2):
        assert a.distance_to(b) >= geometry.options.blip_clearance


def test_overfull_segment_still_terminates(make_config, caplog):
    entries = tuple(Entry(i, f"Entry {i}", 1, 0) for i in range(60))
    config = make_config(entries=entries, display_options={"blip_clearance": 200, "max_placement_attempts": 5})
    with caplog.at_level(logging.DEBUG, logger="techradar.layout.engine"):
        geometry = layout(config)
    assert len(geometry.placements) == 60
    segment = _segment(geometry, 1, 0)
    assert segment.capacity(200) < 60
    assert all(segment.contains(p.point) for p in geometry.placements)
    assert "No free spot" in caplog.text


def test_overfull_segment_skips_debug_report_when_debug_is_off(make_config, monkeypatch, caplog):
    def capacity(self, clearance):
        raise AssertionError("capacity computed for a suppressed debug line")

    monkeypatch.setattr(Segment, "capacity", capacity)
    entries = tuple(Entry(i, f"Entry {i}", 1, 0) for i in range(60))
    config = make_config(entries=entries, display_options={"blip_clearance": 200, "max_placement_attempts": 5})
    with caplog.at_level(logging.INFO, logger="techradar.layout.engine"):
        geometry = layout(config)
    assert len(geometry.placements) == 60
    assert "No free spot" not in caplog.text


def test_invalid_indices_raise_config_error(make_config):
    with pytest.raises(ConfigValidationError):
        layout(make_config(entries=(Entry("x", "X", 7, 0),)))


def test_no_rings_is_a_layout_error(make_config):
    with pytest.raises(LayoutError):
        layout(make_config(rings=(), entries=()))


def test_too_small_chart_is_a_layout_error(make_config):
    with pytest.raises(LayoutError):
        layout(make_config(display_options={"width": 100}))


def test_too_many_rings_is_a_layout_error(make_config):
    rings = tuple(Ring(f"r{i}", i, "#000") for i in range(400))
    with pytest.raises(LayoutError):
        layout(make_config(rings=rings, entries=()))


def test_collapsed_segment_guard():
    sectors = build_sectors([Quadrant(n, i) for i, n in enumerate("abcd")])
    bands = build_bands([Ring("thin", 0, "#000")], 30, 40)
    segment = Segment.create(sectors[0], bands[0], radial_padding=16, angular_padding=12)
    assert segment.wedge.inner_radius == pytest.approx(32.5)
    assert segment.wedge.outer_radius == pytest.approx(37.5)
    assert segment.wedge.angle_min < segment.wedge.angle_max


def test_thin_ring_keeps_entries_inside_its_band(make_config):
    rings = (Ring("wide", 0, "#000", width=1.0), Ring("sliver", 1, "#111", width=0.0078))
    entries = tuple(Entry(f"s{i}", f"Sliver {i}", 0, 1) for i in range(40))
    geometry = layout(make_config(rings=rings, entries=entries))
    band = geometry.band_for(1)
    assert band.thickness < 2
    for placement in geometry.placements:
        radius = placement.point.radius
        assert band.inner_radius <= radius <= band.outer_radius
        assert radius <= geometry.outer_radius


def test_wedge_contains_and_outline():
    wedge = Wedge(10, 20, 0.0, math.pi / 2)
    assert wedge.contains(Point(0.0, 15.0))
    assert not wedge.contains(Point(-15.0, 0.0))
    assert wedge.contains(Point(20.0, 0.0))
    assert wedge.area == pytest.approx(0.25 * math.pi * (400 - 100))
    outline = wedge.outline(resolution=16)
    assert outline.shape == (32, 2)
