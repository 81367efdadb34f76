import logging

import pytest

from territory_geometry.models import Cell, Vertex
from territory_geometry.overlays import (
    InMemoryOverlaySink,
    OverlayPlan,
    TerritoryOverlayManager,
    label_square,
    plan_overlays,
)
from territory_geometry.service import TerritoryGeometryService
from territory_geometry.territories import InMemoryTerritoryStore, Territory

ALPHA = Territory(id="alpha", name="Alpha", color="#ff0000", cells=frozenset({Cell(0, 0), Cell(1, 0)}))


class FlakySink(InMemoryOverlaySink):
    def remove(self, overlay_id: str) -> None:
        raise ConnectionError("renderer went away")


def _manager(sink: InMemoryOverlaySink, **kwargs) -> tuple[TerritoryOverlayManager, InMemoryTerritoryStore]:
    manager = TerritoryOverlayManager(TerritoryGeometryService(), sink, **kwargs)
    store = InMemoryTerritoryStore()
    store.add_listener(manager)
    return manager, store


def test_label_square_surrounds_anchor() -> None:
    square = label_square(Vertex(8.0, 70, 8.0))

    assert square.vertices == (
        Vertex(7.0, 70, 7.0),
        Vertex(9.0, 70, 7.0),
        Vertex(9.0, 70, 9.0),
        Vertex(7.0, 70, 9.0),
        Vertex(7.0, 70, 7.0),
    )


def test_single_region_plan_uses_territory_id_and_name() -> None:
    results = TerritoryGeometryService().compute_territory(ALPHA, elevation=70)

    [plan] = plan_overlays(ALPHA, results)

    assert plan.overlay_id == "alpha"
    assert plan.label == "Alpha"
    assert plan.title == "Alpha Territory"
    assert plan.color == "#ff0000"
    assert plan.label_overlay_id == "alpha_label"
    assert plan.inline_label is None
    assert plan.label_polygon == label_square(plan.anchor)


def test_several_regions_are_numbered_from_one() -> None:
    territory = Territory(
        id="beta",
        name="Beta",
        display_name="Beta Co",
        cells=frozenset({Cell(0, 0), Cell(5, 5), Cell(5, 6)}),
    )
    results = TerritoryGeometryService().compute_territory(territory)

    plans = plan_overlays(territory, results, separate_labels=False)

    assert [plan.overlay_id for plan in plans] == ["beta_region_0", "beta_region_1"]
    assert [plan.label for plan in plans] == ["Beta Co #1", "Beta Co #2"]
    assert [plan.inline_label for plan in plans] == ["Beta Co #1", "Beta Co #2"]
    assert all(plan.label_overlay_id is None and plan.label_polygon is None for plan in plans)
    assert plans[0].anchor == results[0].anchor


def test_store_updates_publish_overlays() -> None:
    sink = InMemoryOverlaySink()
    manager, store = _manager(sink)

    store.upsert(ALPHA)

    assert set(sink.shown) == {"alpha", "alpha_label"}
    assert [plan.overlay_id for plan in manager.plans_for("alpha")] == ["alpha"]


def test_split_territory_replaces_previous_overlays() -> None:
    sink = InMemoryOverlaySink()
    _, store = _manager(sink)
    store.upsert(ALPHA)

    store.upsert(Territory(id="gamma", name="Gamma"))
    store.claim_cell(Cell(8, 8), "alpha")

    assert set(sink.shown) == {"alpha_region_0", "alpha_region_0_label", "alpha_region_1", "alpha_region_1_label"}


def test_removed_or_emptied_territories_lose_their_overlays() -> None:
    sink = InMemoryOverlaySink()
    manager, store = _manager(sink)
    store.upsert(ALPHA)
    store.upsert(Territory(id="beta", name="Beta", cells=frozenset({Cell(9, 9)})))

    store.release_cell(Cell(9, 9))
    assert set(sink.shown) == {"alpha", "alpha_label"}
    assert manager.plans_for("beta") == []

    store.remove("alpha")
    assert sink.shown == {}


def test_data_cleared_removes_everything() -> None:
    sink = InMemoryOverlaySink()
    _, store = _manager(sink, separate_labels=False)
    store.upsert(ALPHA)
    store.upsert(Territory(id="beta", name="Beta", cells=frozenset({Cell(9, 9)})))
    assert set(sink.shown) == {"alpha", "beta"}

    store.clear()

    assert sink.shown == {}


def test_hidden_display_keeps_plans_until_enabled() -> None:
    sink = InMemoryOverlaySink()
    manager, store = _manager(sink, display_enabled=False)

    store.upsert(ALPHA)
    assert sink.shown == {}
    assert len(manager.plans_for("alpha")) == 1

    manager.set_display_enabled(True)
    assert set(sink.shown) == {"alpha", "alpha_label"}

    manager.set_display_enabled(False)
    assert sink.shown == {}
    assert manager.display_enabled is False


def test_stale_generation_is_discarded() -> None:
    sink = InMemoryOverlaySink()
    manager, _ = _manager(sink)
    results = TerritoryGeometryService().compute_territory(ALPHA)
    plans = plan_overlays(ALPHA, results)

    stale = manager.begin_refresh("alpha")
    current = manager.begin_refresh("alpha")

    assert manager.publish("alpha", stale, plans) is False
    assert sink.shown == {}
    assert manager.publish("alpha", current, plans) is True
    assert set(sink.shown) == {"alpha", "alpha_label"}


def test_removal_failures_are_logged_and_refresh_continues(caplog: pytest.LogCaptureFixture) -> None:
    sink = FlakySink()
    manager, store = _manager(sink, separate_labels=False)
    store.upsert(ALPHA)

    with caplog.at_level(logging.ERROR, logger="territory_geometry"):
        store.claim_cell(Cell(2, 0), "alpha")

    assert "overlay_remove_failed" in caplog.messages
    [plan] = manager.plans_for("alpha")
    assert isinstance(plan, OverlayPlan)
    assert sink.shown["alpha"] is plan
