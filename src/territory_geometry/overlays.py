"""Overlay planning and publication for map renderers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from territory_geometry.models import AnchorStrategy, GeometryResult, Polygon, Vertex
from territory_geometry.service import TerritoryGeometryService
from territory_geometry.territories import Territory

LABEL_HALF_SIZE = 1


@dataclass(frozen=True, slots=True)
class OverlayPlan:
    """Everything a renderer needs to draw one region of a territory."""

    overlay_id: str
    territory_id: str
    label: str
    title: str
    polygon: Polygon
    anchor: Vertex
    holes: tuple[Polygon, ...] = ()
    color: str | None = None
    label_overlay_id: str | None = None
    label_polygon: Polygon | None = None

    @property
    def inline_label(self) -> str | None:
        """Label drawn by the shape overlay itself; ``None`` when a label overlay carries it."""
        return None if self.label_overlay_id else self.label

    @property
    def overlay_ids(self) -> tuple[str, ...]:
        if self.label_overlay_id:
            return (self.overlay_id, self.label_overlay_id)
        return (self.overlay_id,)


def label_square(anchor: Vertex, half_size: float = LABEL_HALF_SIZE) -> Polygon:
    """Tiny closed square centred on ``anchor`` that hosts a label-only overlay."""
    x, y, z = anchor
    return Polygon(
        (
            Vertex(x - half_size, y, z - half_size),
            Vertex(x + half_size, y, z - half_size),
            Vertex(x + half_size, y, z + half_size),
            Vertex(x - half_size, y, z + half_size),
            Vertex(x - half_size, y, z - half_size),
        )
    )


def plan_overlays(
    territory: Territory,
    results: list[GeometryResult],
    *,
    separate_labels: bool = True,
) -> list[OverlayPlan]:
    """Name and label each result; ``results`` must already be largest first."""
    several = len(results) > 1
    plans: list[OverlayPlan] = []
    for index, result in enumerate(results):
        overlay_id = f"{territory.id}_region_{index}" if several else territory.id
        label = f"{territory.label} #{index + 1}" if several else territory.label
        plans.append(
            OverlayPlan(
                overlay_id=overlay_id,
                territory_id=territory.id,
                label=label,
                title=f"{territory.label} Territory",
                polygon=result.polygon,
                anchor=result.anchor,
                holes=result.holes,
                color=territory.color,
                label_overlay_id=f"{overlay_id}_label" if separate_labels else None,
                label_polygon=label_square(result.anchor) if separate_labels else None,
            )
        )
    return plans


class OverlaySink(Protocol):
    """Rendering collaborator that draws and erases overlays."""

    def show(self, plan: OverlayPlan) -> None:
        """Draw ``plan``, replacing any overlay with the same id."""

    def remove(self, overlay_id: str) -> None:
        """Erase one overlay by id."""


class InMemoryOverlaySink:
    """Keeps shown overlays in a dict; useful for the CLI and tests."""

    def __init__(self) -> None:
        self.shown: dict[str, OverlayPlan] = {}

    def show(self, plan: OverlayPlan) -> None:
        for overlay_id in plan.overlay_ids:
            self.shown[overlay_id] = plan

    def remove(self, overlay_id: str) -> None:
        self.shown.pop(overlay_id, None)


class TerritoryOverlayManager:
    """Keeps a sink in sync with territory changes.

    Each refresh removes every overlay previously published for the
    territory and publishes fresh plans. Refreshes carry a per-territory
    generation number and results for an outdated generation are dropped.
    """

    def __init__(
        self,
        service: TerritoryGeometryService,
        sink: OverlaySink,
        *,
        elevation: float = 70,
        anchor_strategy: AnchorStrategy | str = AnchorStrategy.FARTHEST_INTERIOR,
        separate_labels: bool = True,
        display_enabled: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self._service = service
        self._sink = sink
        self._elevation = elevation
        self._anchor_strategy = AnchorStrategy(anchor_strategy)
        self._separate_labels = separate_labels
        self._display_enabled = display_enabled
        self._plans: dict[str, list[OverlayPlan]] = {}
        self._generations: dict[str, int] = {}
        self._logger = logger or logging.getLogger("territory_geometry.overlays")

    @property
    def display_enabled(self) -> bool:
        return self._display_enabled

    def plans_for(self, territory_id: str) -> list[OverlayPlan]:
        return list(self._plans.get(territory_id, []))

    def set_display_enabled(self, enabled: bool) -> None:
        if enabled == self._display_enabled:
            return
        self._display_enabled = enabled
        for territory_id in sorted(self._plans):
            for plan in self._plans[territory_id]:
                if enabled:
                    self._sink.show(plan)
                else:
                    self._remove_plan(plan)
        self._logger.info("overlay_display_toggled", extra={"display_enabled": enabled})

    def begin_refresh(self, territory_id: str) -> int:
        """Start a new generation for ``territory_id`` and return its number."""
        generation = self._generations.get(territory_id, 0) + 1
        self._generations[territory_id] = generation
        return generation

    def publish(self, territory_id: str, generation: int, plans: list[OverlayPlan]) -> bool:
        """Replace the territory's overlays unless ``generation`` has been superseded."""
        if generation != self._generations.get(territory_id):
            self._logger.debug(
                "stale_overlay_plans_discarded",
                extra={"territory_id": territory_id, "generation": generation},
            )
            return False

        self.clear_territory(territory_id)
        if plans:
            self._plans[territory_id] = list(plans)
        if self._display_enabled:
            for plan in plans:
                self._sink.show(plan)
        self._logger.debug(
            "overlays_published",
            extra={
                "territory_id": territory_id,
                "overlay_count": len(plans),
                "shown": self._display_enabled,
            },
        )
        return True

    def refresh(self, territory: Territory) -> list[OverlayPlan]:
        generation = self.begin_refresh(territory.id)
        plans: list[OverlayPlan] = []
        if territory.cells:
            results = self._service.compute_territory(
                territory,
                elevation=self._elevation,
                anchor_strategy=self._anchor_strategy,
            )
            plans = plan_overlays(territory, results, separate_labels=self._separate_labels)
        self.publish(territory.id, generation, plans)
        return plans

    def clear_territory(self, territory_id: str) -> None:
        for plan in self._plans.pop(territory_id, []):
            self._remove_plan(plan)

    def clear_all(self) -> None:
        for territory_id in sorted(self._plans):
            self.clear_territory(territory_id)

    def on_territory_updated(self, territory: Territory) -> None:
        self.refresh(territory)

    def on_territory_removed(self, territory: Territory) -> None:
        self.begin_refresh(territory.id)
        self.clear_territory(territory.id)

    def on_data_cleared(self) -> None:
        for territory_id in list(self._plans):
            self.begin_refresh(territory_id)
        self.clear_all()

    def _remove_plan(self, plan: OverlayPlan) -> None:
        for overlay_id in plan.overlay_ids:
            try:
                self._sink.remove(overlay_id)
            except Exception:  # noqa: BLE001
                self._logger.exception("overlay_remove_failed", extra={"overlay_id": overlay_id})
