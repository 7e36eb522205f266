import pytest

from techradar.model.errors import ConfigValidationError, ConfigError, RadarError, ValidationProblem
from techradar.model.options import DEFAULT_DISPLAY_OPTIONS, deep_merge, resolve_display_options
from techradar.model.radar import Entry, Quadrant, Ring, thaw
from techradar.model.validation import collect_problems, validate_config


def test_valid_config_passes(sample_config):
    assert collect_problems(sample_config) == []
    assert validate_config(sample_config) is sample_config


def test_all_problems_are_collected(make_config):
    config = make_config(
        rings=(Ring("A", 0, "#000"), Ring("B", 0, "#000", width=0)),
        entries=(Entry("a", "A", 4, 0), Entry("a", "Again", 0, 9)),
    )
    fields = [p.field for p in collect_problems(config)]
    assert fields == [
        "rings",
        "rings[1].width",
        "entries[0].quadrantIndex",
        "entries[1].ringIndex",
        "entries[1].id",
    ]
    with pytest.raises(ConfigValidationError) as excinfo:
        validate_config(config)
    assert len(excinfo.value.problems) == 5
    assert "(and 4 more problem(s))" in str(excinfo.value)


def test_quadrant_orders(make_config):
    quadrants = tuple(Quadrant(q.name, 0) for q in make_config().quadrants)
    problems = collect_problems(make_config(quadrants=quadrants))
    assert [p.field for p in problems] == ["quadrants"]


def test_bad_display_option_is_reported(make_config):
    problems = collect_problems(make_config(display_options={"seed": "abc"}))
    assert [p.field for p in problems] == ["displayOptions.seed"]


def test_error_hierarchy():
    assert issubclass(ConfigValidationError, ConfigError)
    assert issubclass(ConfigError, RadarError)
    error = ConfigValidationError("bad", field="title", value=1)
    assert error.problems == (ValidationProblem("title", "bad", 1),)


def test_config_is_immutable(sample_config):
    with pytest.raises(AttributeError):
        sample_config.title = "changed"
    assert isinstance(sample_config.entries, tuple)


def test_config_copies_caller_dicts(make_config):
    options = {"colors": {"grid": "#000"}}
    config = make_config(display_options=options)
    options["colors"]["grid"] = "#fff"
    assert config.display_options == {"colors": {"grid": "#000"}}


def test_config_mappings_are_read_only(make_config):
    config = make_config(display_options={"seed": 7, "colors": {"grid": "#000"}}, extras={"tags": ["a"]})
    with pytest.raises(TypeError):
        config.display_options["seed"] = 5
    with pytest.raises(TypeError):
        config.display_options["colors"]["grid"] = "#fff"
    assert config.extras["tags"] == ("a",)
    assert thaw(config.extras) == {"tags": ["a"]}


def test_config_is_hashable(sample_config, make_config):
    assert hash(sample_config) == hash(make_config())
    assert len({sample_config, make_config()}) == 1


def test_infinite_ring_width_is_reported(make_config):
    rings = (Ring("A", 0, "#000"), Ring("B", 1, "#000", width=float("inf")), Ring("C", 2, "#000"))
    problems = collect_problems(make_config(rings=rings))
    assert [p.field for p in problems] == ["rings[1].width"]


# --- display options ---------------------------------------------------------

def test_defaults():
    options = resolve_display_options()
    assert options.width == 1450
    assert options.seed == 42
    assert options.max_placement_attempts == 200
    assert options.print_layout is True
    assert options.colors.inactive == "#ddd"


def test_overrides_merge_into_defaults():
    options = resolve_display_options({"hub_radius": 10, "colors": {"grid": "#123456"}})
    assert options.hub_radius == 10.0
    assert options.colors.grid == "#123456"
    assert options.colors.background == DEFAULT_DISPLAY_OPTIONS["colors"]["background"]


@pytest.mark.parametrize("raw, field", [
    ({"width": "wide"}, "displayOptions.width"),
    ({"hub_radius": -1}, "displayOptions.hub_radius"),
    ({"seed": 1.5}, "displayOptions.seed"),
    ({"print_layout": "yes"}, "displayOptions.print_layout"),
    ({"max_placement_attempts": 0}, "displayOptions.max_placement_attempts"),
    ({"colors": {"grid": 0}}, "displayOptions.colors.grid"),
    ({"colors": "red"}, "displayOptions.colors"),
    ({"width": True}, "displayOptions.width"),
    ({"width": float("nan")}, "displayOptions.width"),
    ({"blip_clearance": float("inf")}, "displayOptions.blip_clearance"),
])
def test_wrong_option_types(raw, field):
    with pytest.raises(ConfigValidationError) as excinfo:
        resolve_display_options(raw)
    assert excinfo.value.field == field


def test_deep_merge_objects_merge_and_lists_replace():
    base = {"a": {"x": 1, "y": [1, 2]}, "b": 1}
    merged = deep_merge(base, {"a": {"y": [3]}, "c": 2})
    assert merged == {"a": {"x": 1, "y": [3]}, "b": 1, "c": 2}
    assert base == {"a": {"x": 1, "y": [1, 2]}, "b": 1}
