import pytest
from pydantic import ValidationError

from territory_geometry.config import Settings
from territory_geometry.models import AnchorStrategy


def test_defaults_match_engine_constants() -> None:
    current = Settings(_env_file=None)

    assert current.cell_size == 16
    assert current.subdivisions == 4
    assert current.trace_max_points == 10_000
    assert current.simplify_distance == 8.0
    assert current.simplify_area == 1.0
    assert current.anchor_strategy is AnchorStrategy.FARTHEST_INTERIOR
    assert current.separate_label_overlay is True


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TERRITORY_GEOMETRY_CELL_SIZE", "32")
    monkeypatch.setenv("TERRITORY_GEOMETRY_ANCHOR_STRATEGY", "hull_centroid")
    monkeypatch.setenv("TERRITORY_GEOMETRY_DEBUG", "true")

    current = Settings(_env_file=None)

    assert current.cell_size == 32
    assert current.anchor_strategy is AnchorStrategy.HULL_CENTROID
    assert current.debug is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"cell_size": 0},
        {"subdivisions": 1},
        {"cell_size": 18, "subdivisions": 4},
        {"trace_max_points": 3},
        {"simplify_area": -0.5},
        {"anchor_strategy": "middle"},
    ],
)
def test_invalid_values_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
