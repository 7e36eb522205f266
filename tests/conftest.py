import os

import pytest

from techradar.model.radar import Entry, Movement, Quadrant, RadarConfig, Ring

# Qt tests must not need a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

QUADRANTS = (
    Quadrant("Languages", 0),
    Quadrant("Infrastructure", 1),
    Quadrant("Datastores", 2),
    Quadrant("Data Management", 3),
)

RINGS = (
    Ring("ADOPT", 0, "#5ba300"),
    Ring("TRIAL", 1, "#009eb0"),
    Ring("HOLD", 2, "#e09b96"),
)

ENTRIES = (
    Entry("python", "Python", 0, 0),
    Entry("go", "Go", 0, 1, moved=Movement.UP),
    Entry(3, "Rust", 0, 1, is_new=True, link="https://www.rust-lang.org"),
    Entry("k8s", "Kubernetes", 1, 0, description="Container orchestration"),
    Entry("nomad", "Nomad", 1, 2, moved=Movement.DOWN),
    Entry("pg", "PostgreSQL", 2, 0),
    Entry("cassandra", "Cassandra", 2, 2, active=False),
    Entry("kafka", "Kafka", 3, 1, moved=Movement.FLAT),
)


def build_config(**overrides) -> RadarConfig:
    values = dict(
        title="Test Radar",
        date="2024.01",
        quadrants=QUADRANTS,
        rings=RINGS,
        entries=ENTRIES,
        display_options={},
        extras={"repo_url": "https://example.com/radar"},
    )
    values.update(overrides)
    return RadarConfig(**values)


@pytest.fixture
def make_config():
    return build_config


@pytest.fixture
def sample_config() -> RadarConfig:
    return build_config()


@pytest.fixture(scope="session")
def qapp():
    QtWidgets = pytest.importorskip("PySide6.QtWidgets")
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app
